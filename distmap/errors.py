"""Exceptions raised by the distance map package."""


class DistanceMapError(ValueError):
    """Base class for errors reported before a transform starts."""


class ConfigurationError(DistanceMapError):
    """Raised when weights or engine settings do not describe a valid transform."""


class DimensionMismatchError(DistanceMapError):
    """Raised when grids do not have the dimensionality or extents expected."""
