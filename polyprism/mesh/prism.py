"""
Extrusion of a simple 2D polygon into a closed triangular prism.

Algorithm:
1. Normalise and validate the polygon (shape, duplicates, simplicity, winding)
2. Vertex buffer: bottom layer, top layer, bottom and top centroids
3. Cap triangles from the selected strategy (Ear Clipping by default)
4. Two side triangles per boundary edge
"""

from __future__ import annotations

import math

import numpy as np

from polyprism import log
from polyprism.errors import DegenerateGeometryError, InvalidPolygonError, TriangulationError
from polyprism.geometry.predicates import (
    centroid_2d,
    has_duplicate_points,
    is_simple_polygon,
    remove_duplicate_points,
    signed_area_2d,
)
from polyprism.mesh.mesh import PrismMesh
from polyprism.settings import ExtrusionSettings
from polyprism.triangulation import TriangulationStrategy, get_cap_triangulator


def as_polygon(points) -> np.ndarray:
    """
    Convert points to a float64 array of shape (N, 2).

    Accepts (N, 2) array-likes and flat x0, y0, x1, y1, ... sequences.
    """
    try:
        polygon = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidPolygonError(f"Polygon points are not numeric: {e}") from e

    if polygon.ndim == 1:
        if polygon.size % 2 != 0:
            raise InvalidPolygonError("Flat point list must contain an even number of coordinates")
        polygon = polygon.reshape(-1, 2)

    if polygon.ndim != 2 or polygon.shape[1] != 2:
        raise InvalidPolygonError(f"Polygon must be a Nx2 array, got shape {polygon.shape}")
    if len(polygon) < 3:
        raise InvalidPolygonError(f"Polygon needs at least 3 points, got {len(polygon)}")
    if not np.all(np.isfinite(polygon)):
        raise InvalidPolygonError("Polygon coordinates must be finite")
    return polygon


def build_vertices(polygon: np.ndarray, depth: float) -> np.ndarray:
    """Bottom layer, top layer, then the two centroids, shape (2n+2, 3)."""
    n = len(polygon)
    vertices = np.zeros((2 * n + 2, 3), dtype=np.float32)

    vertices[:n, :2] = polygon
    vertices[n:2 * n, :2] = polygon
    vertices[n:2 * n, 2] = depth

    center = centroid_2d(polygon)
    vertices[2 * n, :2] = center
    vertices[2 * n + 1, :2] = center
    vertices[2 * n + 1, 2] = depth
    return vertices


def build_side_triangles(n: int) -> np.ndarray:
    """
    Two triangles per edge i -> next joining bottom (i, next) and top (i+n, next+n).

    Wound like the caps: the bottom edge is traversed next -> i, the top
    edge i+n -> next+n.
    """
    sides = np.empty((2 * n, 3), dtype=np.int32)
    for i in range(n):
        j = (i + 1) % n
        sides[2 * i] = (i, i + n, j + n)
        sides[2 * i + 1] = (i, j + n, j)
    return sides


class PrismMeshBuilder:
    """
    Builds PrismMesh from 2D polygons.

    Faces are wound counter-clockwise seen from outside in y-down screen
    coordinates; the signed volume of the result is -area * depth.
    settings.flip_winding gives the right-handed convention.
    """

    def __init__(self, settings: ExtrusionSettings | None = None) -> None:
        self.settings = settings or ExtrusionSettings()

    def prepare_polygon(self, points) -> np.ndarray:
        """Validate the polygon and apply the duplicate and winding policies."""
        settings = self.settings
        polygon = as_polygon(points)

        if has_duplicate_points(polygon, settings.duplicate_tolerance):
            if not settings.merge_duplicates:
                raise DegenerateGeometryError("Polygon has duplicate consecutive points")
            count = len(polygon)
            polygon = remove_duplicate_points(polygon, settings.duplicate_tolerance)
            log.warn(f"[PrismMeshBuilder] merged duplicate points: {count} -> {len(polygon)}")
            if len(polygon) < 3:
                raise InvalidPolygonError(
                    f"Polygon has {len(polygon)} distinct points after merging duplicates"
                )

        if settings.check_simple and not is_simple_polygon(polygon):
            raise InvalidPolygonError("Polygon is self-intersecting")

        area = signed_area_2d(polygon)
        if area < 0.0 and settings.auto_orient:
            log.warn("[PrismMeshBuilder] clockwise polygon reversed")
            polygon = polygon[::-1].copy()
        elif not area > 0.0:
            raise TriangulationError(
                f"Polygon must be counter-clockwise with positive area (signed area {area:g})",
                remaining=list(range(len(polygon))),
            )
        return polygon

    def build(
        self,
        points,
        depth: float | None = None,
        strategy: TriangulationStrategy | str | None = None,
        name: str = "",
    ) -> PrismMesh:
        """
        Extrude a polygon.

        Args:
            points: Polygon, shape (N, 2) or flat x/y list, CCW, simple.
            depth: Extrusion distance; settings.depth if None. A negative
                depth mirrors the vertices across z = 0 but keeps the index
                buffer, so the mesh comes out inside-out with the opposite
                signed volume.
            strategy: Cap triangulation; settings.strategy if None.
            name: Mesh name.

        Returns:
            PrismMesh with 2N+2 vertices.

        Raises:
            InvalidPolygonError: bad input, see prepare_polygon.
            DegenerateGeometryError: duplicate points without merge_duplicates.
            TriangulationError: clockwise input or no ear found.
        """
        if depth is None:
            depth = self.settings.depth
        depth = float(depth)
        if not math.isfinite(depth):
            raise InvalidPolygonError(f"Extrusion depth must be finite, got {depth}")

        if strategy is None:
            strategy = self.settings.triangulation_strategy()
        triangulator = get_cap_triangulator(strategy)

        polygon = self.prepare_polygon(points)
        n = len(polygon)

        vertices = build_vertices(polygon, depth)
        caps = triangulator.cap_triangles(polygon)
        sides = build_side_triangles(n)
        triangles = np.vstack([caps, sides])

        if self.settings.flip_winding:
            triangles = triangles[:, [0, 2, 1]]

        mesh = PrismMesh(
            vertices=vertices,
            triangles=triangles,
            polygon_size=n,
            depth=depth,
            strategy=triangulator.strategy,
            name=name,
        )
        log.debug(
            f"[PrismMeshBuilder] '{name}': {n} points, {mesh.vertex_count()} vertices, "
            f"{mesh.triangle_count()} triangles ({triangulator.strategy.value})"
        )
        return mesh


def build_prism_mesh(
    points,
    depth: float,
    strategy: TriangulationStrategy | str = TriangulationStrategy.EAR_CLIPPING,
    settings: ExtrusionSettings | None = None,
) -> PrismMesh:
    """Extrude a simple CCW polygon by depth along Z."""
    return PrismMeshBuilder(settings).build(points, depth=depth, strategy=strategy)
