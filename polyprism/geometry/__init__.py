"""Geometric predicates and polygon helpers."""

from .predicates import (
    sign,
    point_in_triangle,
    point_on_open_segment,
    signed_area_2d,
    triangle_area_2d,
    is_ccw,
    centroid_2d,
    is_convex_polygon,
    segments_intersect_strict,
    is_simple_polygon,
    has_duplicate_points,
    remove_duplicate_points,
)

__all__ = [
    "sign",
    "point_in_triangle",
    "point_on_open_segment",
    "signed_area_2d",
    "triangle_area_2d",
    "is_ccw",
    "centroid_2d",
    "is_convex_polygon",
    "segments_intersect_strict",
    "is_simple_polygon",
    "has_duplicate_points",
    "remove_duplicate_points",
]
