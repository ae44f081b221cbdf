"""
Cap triangulation for extruded polygons.

Ear Clipping over a circular linked list of polygon indices, plus the
legacy centroid fan for convex input.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from polyprism import log
from polyprism.errors import InvalidPolygonError, TriangulationError
from polyprism.geometry.predicates import (
    sign,
    point_in_triangle,
    point_on_open_segment,
    signed_area_2d,
    is_convex_polygon,
)


class TriangulationStrategy(Enum):
    EAR_CLIPPING = "ear_clipping"
    CENTROID_FAN = "centroid_fan"


def _remaining(next_idx: np.ndarray, start: int) -> list[int]:
    """Walk the ring once starting from start."""
    result = [start]
    idx = int(next_idx[start])
    while idx != start:
        result.append(idx)
        idx = int(next_idx[idx])
    return result


def _is_ear(polygon: np.ndarray, next_idx: np.ndarray, a: int, b: int, c: int) -> bool:
    pa = polygon[a]
    pb = polygon[b]
    pc = polygon[c]

    if not sign(pb, pa, pc) < 0.0:
        return False

    # The ear is CCW, point_in_triangle expects the opposite winding.
    # A point on the diagonal a-c would be left on a zero-area remainder.
    j = int(next_idx[c])
    while j != a:
        pj = polygon[j]
        if point_in_triangle(pj, pa, pc, pb) or point_on_open_segment(pj, pa, pc):
            return False
        j = int(next_idx[j])
    return True


def ear_clip(polygon: np.ndarray) -> np.ndarray:
    """
    Triangulate a simple CCW polygon by Ear Clipping.

    Candidate ears are (a, next[a], next[next[a]]); a valid ear removes its
    middle vertex and the search resumes at a. Worst case O(n^3), typical
    O(n^2).

    Args:
        polygon: np.ndarray shape (N, 2), counter-clockwise.

    Returns:
        Triangles of original indices, shape (N-2, 3), each CCW.

    Raises:
        InvalidPolygonError: fewer than 3 points.
        TriangulationError: clockwise or zero-area polygon, or a full pass
            over the remaining points found no ear.
    """
    polygon = np.asarray(polygon, dtype=np.float64)
    n = len(polygon)
    if n < 3:
        raise InvalidPolygonError(f"Polygon needs at least 3 points, got {n}")

    area = signed_area_2d(polygon)
    if not area > 0.0:
        raise TriangulationError(
            f"Polygon must be counter-clockwise with positive area (signed area {area:g})",
            remaining=list(range(n)),
        )

    prev_idx = np.array([(i - 1) % n for i in range(n)], dtype=np.int64)
    next_idx = np.array([(i + 1) % n for i in range(n)], dtype=np.int64)

    triangles: list[tuple[int, int, int]] = []
    remaining = n
    a = 0
    failures = 0

    while remaining > 2:
        b = int(next_idx[a])
        c = int(next_idx[b])

        if _is_ear(polygon, next_idx, a, b, c):
            triangles.append((a, b, c))
            next_idx[a] = c
            prev_idx[c] = a
            remaining -= 1
            failures = 0
            continue

        failures += 1
        if failures >= remaining:
            left = _remaining(next_idx, a)
            convex = sum(
                1 for i in left
                if sign(polygon[i], polygon[prev_idx[i]], polygon[next_idx[i]]) < 0.0
            )
            log.warn(
                f"[ear_clip] no ear found! remaining={remaining}, convex={convex}, "
                f"reflex={remaining - convex}, triangles={len(triangles)}"
            )
            raise TriangulationError(
                f"No ear found among {remaining} remaining points",
                remaining=left,
                triangles=triangles,
            )
        a = int(next_idx[a])

    return np.array(triangles, dtype=np.int32).reshape(-1, 3)


class CapTriangulator:
    """
    Builds the bottom and top cap triangles of a prism.

    Indices address the prism vertex buffer: bottom layer [0, n), top layer
    [n, 2n), centroids 2n and 2n+1.
    """

    strategy: TriangulationStrategy

    def cap_triangles(self, polygon: np.ndarray) -> np.ndarray:
        raise NotImplementedError("cap_triangles must be implemented in subclasses.")


class EarClippingCaps(CapTriangulator):
    """Per ear: bottom (a, b, c) followed by top (a+n, c+n, b+n)."""

    strategy = TriangulationStrategy.EAR_CLIPPING

    def cap_triangles(self, polygon: np.ndarray) -> np.ndarray:
        n = len(polygon)
        ears = ear_clip(polygon)

        caps = np.empty((2 * len(ears), 3), dtype=np.int32)
        caps[0::2] = ears
        caps[1::2] = ears[:, [0, 2, 1]] + n
        return caps


class CentroidFanCaps(CapTriangulator):
    """
    Fan from the layer centroids. Only valid for convex polygons.

    Produces n triangles per cap instead of n-2.
    """

    strategy = TriangulationStrategy.CENTROID_FAN

    def cap_triangles(self, polygon: np.ndarray) -> np.ndarray:
        n = len(polygon)
        if n < 3:
            raise InvalidPolygonError(f"Polygon needs at least 3 points, got {n}")
        if not is_convex_polygon(polygon):
            raise InvalidPolygonError("Centroid fan requires a convex counter-clockwise polygon")

        caps = []
        for i in range(n):
            caps.append((i, (i + 1) % n, 2 * n))
        for i in range(n):
            caps.append((i + n, 2 * n + 1, (i + 1) % n + n))
        return np.array(caps, dtype=np.int32)


_CAP_TRIANGULATORS = {
    TriangulationStrategy.EAR_CLIPPING: EarClippingCaps,
    TriangulationStrategy.CENTROID_FAN: CentroidFanCaps,
}


def get_cap_triangulator(strategy: TriangulationStrategy | str) -> CapTriangulator:
    """Create the cap triangulator for a strategy or its string value."""
    if isinstance(strategy, str):
        try:
            strategy = TriangulationStrategy(strategy)
        except ValueError:
            raise ValueError(f"Unknown triangulation strategy: {strategy}") from None
    return _CAP_TRIANGULATORS[strategy]()
