"""
Chamfer distance maps for 2D images and 3D volumes.

This package computes approximate Euclidean distance maps of binary or label
masks with two raster scans over a small weighted neighborhood.
"""

from .errors import ConfigurationError, DimensionMismatchError, DistanceMapError
from .grid import Grid
from .weights import WeightSet, ChamferWeights, ChamferWeights3D
from .progress import ProgressSink, NullProgress, LoggingProgress, TqdmProgress
from .core.distance_transform import DistanceTransformEngine, EngineConfig
from .core.distance_transform import distance_map, create_distance_map
