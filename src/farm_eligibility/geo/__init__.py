"""Geodesic geometry helpers for farm boundaries and analysis features."""

from .area import (
    GEOMETRY_ERRORS,
    boundary_centroid,
    boundary_feature_collection,
    boundary_upload_filename,
    geodesic_area_ha,
    geodesic_area_m2,
    load_boundary_geometry,
)

__all__ = [
    "GEOMETRY_ERRORS",
    "boundary_centroid",
    "boundary_feature_collection",
    "boundary_upload_filename",
    "geodesic_area_ha",
    "geodesic_area_m2",
    "load_boundary_geometry",
]
