"""
Chamfer distance transform for binary and label masks.

This module provides the engine computing, for every foreground sample of a
2D or 3D mask, the chamfer distance to the nearest background sample. The
resulting maps feed watershed flooding, geodesic measurements and
skeletonization.
"""

from distmap.core.distance_transform.transform import (
    DEFAULT_MASK_LABEL,
    DistanceTransformEngine,
    EngineConfig,
    distance_map,
    create_distance_map,
)
