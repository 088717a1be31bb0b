"""Cost-distance and inverse-distance-weighted demand surfaces over friction rasters."""

__version__ = "0.1.0"