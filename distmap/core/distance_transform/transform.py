"""
Implementation of chamfer distance transforms for binary and label images.

The distance transform maps each foreground sample to the chamfer distance of
the nearest background sample. Distances are propagated by two raster scans:
a forward scan consulting already visited neighbors, then a backward scan
with the mirrored neighborhood. Two scans are enough for the bounded chamfer
neighborhoods built by `distmap.core.neighborhood`.

One generic engine covers 2D and 3D grids, 3x3 and 5x5 neighborhoods, and
integer or floating point accumulators.
"""

import logging
import time
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np

from distmap.core.neighborhood import (
    Neighborhood,
    WeightedOffset,
    build_neighborhood,
    infer_radius,
    required_weight_count,
)
from distmap.errors import ConfigurationError, DimensionMismatchError
from distmap.grid import SUPPORTED_DIMENSIONS, Grid
from distmap.progress import NullProgress, ProgressSink
from distmap.tensor_utils import ArrayLike, like_input, to_numpy
from distmap.weights import WeightSet, as_weight_set

logger = logging.getLogger(__name__)


DEFAULT_MASK_LABEL = 255
# Masks are 8-bit label images
MAX_MASK_LABEL = 255

# Accumulator dtype and wide dtype used for the sweep arithmetic
PRECISIONS = {
    "float": (np.float32, np.float64),
    "int": (np.int32, np.int64),
}


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings of a distance transform engine.

    Attributes:
        ndim: Dimensionality of the masks (2 or 3)
        radius: Neighborhood radius (1 for 3x3, 2 for 5x5); inferred from the
                weight count when None
        precision: "float" for float32 distances, "int" for int32 distances
        normalize: Divide the final map by the orthogonal weight
        mask_label: Mask value of the samples whose distance is computed
    """

    ndim: int = 2
    radius: Optional[int] = None
    precision: str = "float"
    normalize: bool = True
    mask_label: int = DEFAULT_MASK_LABEL

    def __post_init__(self):
        if self.ndim not in SUPPORTED_DIMENSIONS:
            raise ConfigurationError(f"Unsupported dimensionality: {self.ndim}")
        if self.radius is not None:
            required_weight_count(self.ndim, self.radius)
        if self.precision not in PRECISIONS:
            raise ConfigurationError(
                f"Unsupported precision {self.precision!r}, expected one of {sorted(PRECISIONS)}"
            )
        try:
            valid_label = not isinstance(self.mask_label, bool) and int(self.mask_label) == self.mask_label
        except (TypeError, ValueError, OverflowError):
            valid_label = False
        if not valid_label or not 1 <= self.mask_label <= MAX_MASK_LABEL:
            raise ConfigurationError(
                f"Mask label must be an integer in 1..{MAX_MASK_LABEL}, got {self.mask_label!r}"
            )

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> "EngineConfig":
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            raise ConfigurationError(f"Unknown engine settings: {sorted(unknown)}")
        return cls(**mapping)


class DistanceTransformEngine:
    """
    Chamfer distance transform for 2D images and 3D volumes.

    The engine is configured once; its offset tables are immutable and it keeps
    no state between calls, so one engine can serve any number of masks.

    Attributes:
        config: Engine settings
        weights: Weight set, one weight per class of the neighborhood
        neighborhood: Forward and backward weighted offsets
        progress: Receiver of progress notifications
    """

    def __init__(
        self,
        weights: Union[WeightSet, Sequence[float], Any],
        config: Optional[EngineConfig] = None,
        progress: Optional[ProgressSink] = None,
        **overrides,
    ):
        """
        Initialize the engine.

        Args:
            weights: WeightSet, preset or sequence of weights
            config: Engine settings (defaults to a 2D float engine)
            progress: Progress sink (defaults to a no-op sink)
            **overrides: Individual EngineConfig fields overriding `config`

        Raises:
            ConfigurationError: If the weights do not fit the configuration
        """
        config = config or EngineConfig()
        if overrides:
            try:
                config = replace(config, **overrides)
            except TypeError as e:
                raise ConfigurationError(f"Invalid engine settings {sorted(overrides)}: {e}") from e
        self.config = config
        self.progress = progress or NullProgress()

        weight_set = as_weight_set(weights, config.radius, config.ndim)
        radius = config.radius
        if radius is None:
            radius = infer_radius(config.ndim, len(weight_set))

        self._dtype, self._work_dtype = PRECISIONS[config.precision]
        if config.precision == "int":
            values = weight_set.as_ints()
        else:
            values = weight_set.as_floats()
        if config.normalize and values[0] == 0:
            raise ConfigurationError("Cannot normalize a distance map with a zero orthogonal weight")

        self.weights = weight_set
        self.neighborhood: Neighborhood = build_neighborhood(values, config.ndim, radius)

        logger.info(
            f"Distance transform engine: {config.ndim}D, radius {radius}, "
            f"{config.precision} precision, weights {list(values)}, normalize={config.normalize}"
        )

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self._dtype)

    @property
    def sentinel(self):
        """Initial value of the samples to be measured."""
        if np.issubdtype(self._dtype, np.integer):
            return np.iinfo(self._dtype).max
        return np.finfo(self._dtype).max

    def compute_distance_map(
        self,
        mask: Union[Grid, np.ndarray],
        normalize: Optional[bool] = None,
        out: Optional[Grid] = None,
    ) -> Grid:
        """
        Compute the distance map of a mask.

        Args:
            mask: Mask grid; 0 marks background, `mask_label` marks the samples
                  to measure, other labels are left at the initial value
            normalize: Overrides the configured normalization when not None
            out: Optional distance grid to fill instead of allocating one

        Returns:
            Distance grid with the extents of the mask and 0 at background

        Raises:
            DimensionMismatchError: If the mask or `out` do not fit the engine
        """
        normalize = self.config.normalize if normalize is None else normalize
        if normalize and self.neighborhood.weights[0] == 0:
            raise ConfigurationError("Cannot normalize a distance map with a zero orthogonal weight")

        mask = self._check_mask(mask)
        start = time.perf_counter()

        distances = self.initialize(mask, out=out)
        self.forward_sweep(mask, distances)
        self.backward_sweep(mask, distances)
        if normalize:
            self.normalize(mask, distances)

        logger.debug(f"Distance map of {mask!r} computed in {time.perf_counter() - start:.3f}s")
        return distances

    def initialize(self, mask: Grid, out: Optional[Grid] = None) -> Grid:
        """
        Create the distance grid: 0 at background, the sentinel elsewhere.

        Args:
            mask: Mask grid
            out: Optional grid to fill, with the extents of the mask

        Returns:
            The initialized distance grid
        """
        if out is not None:
            if not out.same_extents(mask):
                raise DimensionMismatchError(
                    f"Output extents {out.extents} differ from mask extents {mask.extents}"
                )
            if out.dtype != self.dtype:
                raise ConfigurationError(f"Output dtype {out.dtype} differs from engine dtype {self.dtype}")

        self.progress.status_changed("Initialization...")
        values = np.where(mask.array == 0, 0, self.sentinel).astype(self._dtype)
        if out is None:
            distances = Grid(values)
        else:
            out.array[...] = values
            distances = out
        self.progress.progress_changed(1, 1)
        return distances

    def forward_sweep(self, mask: Grid, distances: Grid) -> None:
        """Propagate distances in raster order using the forward offsets."""
        self.progress.status_changed("Forward scan...")
        self._sweep(mask, distances, self.neighborhood.forward, reverse=False)

    def backward_sweep(self, mask: Grid, distances: Grid) -> None:
        """Propagate distances in reverse raster order using the backward offsets."""
        self.progress.status_changed("Backward scan...")
        self._sweep(mask, distances, self.neighborhood.backward, reverse=True)

    def normalize(self, mask: Grid, distances: Grid) -> None:
        """
        Divide the distance of every non background sample by the orthogonal weight.

        Floating point maps are divided exactly; integer maps use floor division.
        """
        self.progress.status_changed("Normalize map...")
        unit = self.neighborhood.weights[0]
        integral = np.issubdtype(distances.dtype, np.integer)

        dist = distances.array
        labels = mask.array
        count = dist.shape[0]
        for k in range(count):
            self.progress.progress_changed(k, count)
            plane = dist[k]
            foreground = labels[k] != 0
            if integral:
                plane[foreground] //= unit
            else:
                plane[foreground] /= unit
        self.progress.progress_changed(1, 1)

    def _sweep(
        self,
        mask: Grid,
        distances: Grid,
        offsets: Sequence[WeightedOffset],
        reverse: bool,
    ) -> None:
        """
        Run one raster scan.

        Each row is updated in two steps. Offsets reaching another row only read
        samples already final for this scan, so they are applied to the whole
        row at once. The step offset within the row is then chained along runs of
        foreground samples in scan order. Every sample takes the minimum of its value and of all its
        in-bounds neighbors plus the offset weight.
        """
        labels = mask.array
        dist = distances.array
        label = self.config.mask_label
        work = self._work_dtype

        shape = dist.shape
        width = shape[-1]
        row_shape = shape[:-1]

        # The only same-row offset of a chamfer neighborhood is the
        # orthogonal step towards already visited samples
        cross_row = []
        step_weight = None
        for offset in offsets:
            if any(offset.shift[:-1]):
                cross_row.append((offset.shift[:-1], offset.dx, offset.weight))
            else:
                step_weight = offset.weight

        outer = range(shape[0])
        inner = list(np.ndindex(*shape[1:-1]))
        if reverse:
            outer = reversed(outer)
            inner.reverse()

        count = shape[0]
        for step, k in enumerate(outer):
            self.progress.progress_changed(step, count)
            for rest in inner:
                row = (k,) + rest
                foreground = labels[row] == label
                if not foreground.any():
                    continue

                current = dist[row]
                best = current.astype(work)
                for row_shift, dx, weight in cross_row:
                    neighbor = tuple(r + d for r, d in zip(row, row_shift))
                    if not all(0 <= i < s for i, s in zip(neighbor, row_shape)):
                        continue
                    lo = max(0, -dx)
                    hi = min(width, width - dx)
                    if lo >= hi:
                        continue
                    candidates = dist[neighbor][lo + dx:hi + dx].astype(work) + weight
                    np.minimum(best[lo:hi], candidates, out=best[lo:hi])
                current[foreground] = best[foreground]

                if step_weight is not None:
                    self._chain_row(current, foreground, step_weight, reverse)
        self.progress.progress_changed(1, 1)

    def _chain_row(self, current: np.ndarray, foreground: np.ndarray, weight, reverse: bool) -> None:
        """
        Propagate distances along one row through the orthogonal step offset.

        Within a run of foreground samples, the value at x is the minimum over
        j <= x of value[j] + weight * (x - j), j ranging from the sample before
        the run (when there is one) to x. This is a cumulative minimum of
        value[j] - weight * j, shifted back by weight * x.
        """
        values = current.astype(self._work_dtype)
        runs = foreground
        if reverse:
            values = values[::-1]
            runs = runs[::-1]

        edges = np.diff(np.concatenate(([0], runs.astype(np.int8), [0])))
        starts = np.flatnonzero(edges == 1)
        stops = np.flatnonzero(edges == -1)
        for start, stop in zip(starts, stops):
            first = start - 1 if start > 0 else start
            ramp = np.arange(stop - first, dtype=self._work_dtype) * weight
            chained = np.minimum.accumulate(values[first:stop] - ramp) + ramp
            values[start:stop] = chained[start - first:]

        if reverse:
            values = values[::-1]
        current[foreground] = values[foreground]

    def _check_mask(self, mask: Union[Grid, np.ndarray]) -> Grid:
        if not isinstance(mask, Grid):
            mask = Grid(np.asarray(mask))
        if mask.dtype == np.bool_:
            mask = Grid(np.where(mask.array, self.config.mask_label, 0).astype(np.uint8))
        if mask.ndim != self.config.ndim:
            raise DimensionMismatchError(
                f"Engine expects {self.config.ndim}D masks, got a {mask.ndim}D mask"
            )
        return mask


def distance_map(
    mask: Union[Grid, np.ndarray],
    weights: Union[WeightSet, Sequence[float], Any],
    normalize: bool = True,
    radius: Optional[int] = None,
    precision: str = "float",
    mask_label: int = DEFAULT_MASK_LABEL,
    progress: Optional[ProgressSink] = None,
) -> np.ndarray:
    """
    Compute the chamfer distance map of a 2D or 3D mask.

    Args:
        mask: Mask array or grid, 0 for background
        weights: WeightSet, preset or sequence of weights
        normalize: Divide distances by the orthogonal weight
        radius: Neighborhood radius, inferred from the weights when None
        precision: "float" or "int"
        mask_label: Mask value of the samples to measure
        progress: Optional progress sink

    Returns:
        numpy array of distances with the shape of the mask
    """
    ndim = mask.ndim if isinstance(mask, Grid) else np.ndim(mask)
    if ndim not in SUPPORTED_DIMENSIONS:
        raise DimensionMismatchError(f"Mask must be 2D or 3D, got {ndim} dimensions")

    config = EngineConfig(
        ndim=ndim,
        radius=radius,
        precision=precision,
        normalize=normalize,
        mask_label=mask_label,
    )
    engine = DistanceTransformEngine(weights, config, progress)
    return engine.compute_distance_map(mask).array


def create_distance_map(
    volume: ArrayLike,
    weights: Union[WeightSet, Sequence[float], Any],
    normalize: bool = True,
    threshold: Optional[float] = None,
    radius: Optional[int] = None,
    precision: str = "float",
    mask_label: int = DEFAULT_MASK_LABEL,
    progress: Optional[ProgressSink] = None,
) -> ArrayLike:
    """
    Create a distance map from a numpy or torch volume.

    This is a high-level function returning the same kind of object it is
    given: a tensor on the input device for torch input, an array otherwise.

    Args:
        volume: Mask or intensity volume as torch tensor or numpy array
        weights: WeightSet, preset or sequence of weights
        normalize: Divide distances by the orthogonal weight
        threshold: If given, samples with intensity >= threshold are measured
                   and all others are background; without it the
                   volume is used as a mask as it is
        radius: Neighborhood radius, inferred from the weights when None
        precision: "float" or "int"
        mask_label: Mask value of the samples to measure
        progress: Optional progress sink

    Returns:
        Distance map with the same shape as the input
    """
    array = to_numpy(volume)
    if threshold is not None:
        array = np.where(array >= threshold, mask_label, 0).astype(np.uint8)
    elif array.dtype != np.bool_ and not np.any(array == mask_label):
        logger.warning(
            f"No sample equals mask label {mask_label}; pass a threshold to measure an intensity volume"
        )

    result = distance_map(
        array,
        weights,
        normalize=normalize,
        radius=radius,
        precision=precision,
        mask_label=mask_label,
        progress=progress,
    )
    return like_input(result, volume)
