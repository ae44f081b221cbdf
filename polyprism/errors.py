"""Exceptions raised while building prism meshes."""

from __future__ import annotations


class PolyPrismError(Exception):
    """Base error of the package."""


class InvalidPolygonError(PolyPrismError, ValueError):
    """Input polygon (or depth) cannot be extruded."""


class DegenerateGeometryError(InvalidPolygonError):
    """Polygon has duplicate consecutive points (zero-length edges)."""


class TriangulationError(PolyPrismError):
    """
    Ear clipping could not finish.

    Raised for clockwise or zero-area input and when a full pass over the
    remaining points finds no ear.
    """

    def __init__(
        self,
        message: str,
        remaining: list[int] | None = None,
        triangles: list[tuple[int, int, int]] | None = None,
    ) -> None:
        super().__init__(message)
        self.remaining = list(remaining) if remaining is not None else []
        self.triangles = list(triangles) if triangles is not None else []
