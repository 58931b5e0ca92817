"""Core functionality for the distmap package."""

from .neighborhood import Neighborhood, WeightedOffset, build_neighborhood

__all__ = ["Neighborhood", "WeightedOffset", "build_neighborhood"]
