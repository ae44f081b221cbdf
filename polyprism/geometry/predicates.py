"""
2D predicates for polygon triangulation.

Points are anything indexable as p[0], p[1]: tuples, lists, rows of an
(N, 2) np.ndarray.
"""

from __future__ import annotations

import numpy as np


def sign(p1, p2, p3) -> float:
    """
    Orientation of p1 relative to the directed line p2 -> p3.

    Negative when p1 lies to the right of the line in a y-up frame (to the
    left in y-down screen coordinates), positive on the other side, zero
    when the three points are collinear.
    """
    return (p1[0] - p3[0]) * (p2[1] - p3[1]) - (p2[0] - p3[0]) * (p1[1] - p3[1])


def point_in_triangle(pt, v1, v2, v3) -> bool:
    """
    Check that pt is strictly inside triangle (v1, v2, v3).

    All three edge signs must be negative, so a point on an edge or at a
    vertex is outside. Inside points give negative signs when v1 -> v2 -> v3
    runs clockwise in a y-up frame; pass counter-clockwise triangles
    reversed.
    """
    b1 = sign(pt, v1, v2) < 0.0
    b2 = sign(pt, v2, v3) < 0.0
    b3 = sign(pt, v3, v1) < 0.0
    return bool(b1 and b2 and b3)


def point_on_open_segment(p, a, b) -> bool:
    """Check that p lies on segment a-b, excluding the endpoints."""
    if sign(p, a, b) != 0.0:
        return False
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    t = (p[0] - a[0]) * dx + (p[1] - a[1]) * dy
    return 0.0 < t < dx * dx + dy * dy


def signed_area_2d(polygon: np.ndarray) -> float:
    """Signed shoelace area of the polygon (positive for CCW)."""
    n = len(polygon)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]
    return area / 2.0


def triangle_area_2d(a, b, c) -> float:
    """Unsigned area of a triangle."""
    return abs(sign(a, b, c)) / 2.0


def is_ccw(polygon: np.ndarray) -> bool:
    return signed_area_2d(polygon) > 0.0


def centroid_2d(polygon: np.ndarray) -> np.ndarray:
    """Arithmetic mean of the polygon points (not the area centroid)."""
    points = np.asarray(polygon, dtype=np.float64)
    return points.mean(axis=0)


def is_convex_polygon(polygon: np.ndarray) -> bool:
    """
    Check that a CCW polygon has no reflex vertex.

    Collinear vertices are allowed.
    """
    n = len(polygon)
    if n < 3:
        return False
    for i in range(n):
        prev_p = polygon[(i - 1) % n]
        curr_p = polygon[i]
        next_p = polygon[(i + 1) % n]
        if sign(curr_p, prev_p, next_p) > 0.0:
            return False
    return True


def segments_intersect_strict(a1, a2, b1, b2) -> bool:
    """
    Check that two segments cross or touch.

    Shared endpoints of adjacent edges must be filtered by the caller.
    """
    def cross(o, a, b):
        return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])

    def on_segment(p, q, r):
        return (min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
                and min(p[1], r[1]) <= q[1] <= max(p[1], r[1]))

    d1 = cross(b1, b2, a1)
    d2 = cross(b1, b2, a2)
    d3 = cross(a1, a2, b1)
    d4 = cross(a1, a2, b2)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and \
       ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)):
        return True

    if d1 == 0 and on_segment(b1, a1, b2):
        return True
    if d2 == 0 and on_segment(b1, a2, b2):
        return True
    if d3 == 0 and on_segment(a1, b1, a2):
        return True
    if d4 == 0 and on_segment(a1, b2, a2):
        return True
    return False


def is_simple_polygon(polygon: np.ndarray) -> bool:
    """
    Check that no two non-adjacent edges of the polygon intersect.

    O(n^2) pairwise test.
    """
    n = len(polygon)
    if n < 3:
        return False
    for i in range(n):
        a1 = polygon[i]
        a2 = polygon[(i + 1) % n]
        for j in range(i + 1, n):
            # adjacent edges share a vertex
            if j == i + 1 or (i == 0 and j == n - 1):
                continue
            if segments_intersect_strict(a1, a2, polygon[j], polygon[(j + 1) % n]):
                return False
    return True


def has_duplicate_points(polygon: np.ndarray, tolerance: float = 0.0) -> bool:
    """Check for consecutive coincident points, the closing pair included."""
    n = len(polygon)
    for i in range(n):
        j = (i + 1) % n
        if abs(polygon[i][0] - polygon[j][0]) <= tolerance and \
           abs(polygon[i][1] - polygon[j][1]) <= tolerance:
            return True
    return False


def remove_duplicate_points(polygon: np.ndarray, tolerance: float = 0.0) -> np.ndarray:
    """Drop points coinciding with their predecessor; the closing pair is checked too."""
    points = np.asarray(polygon, dtype=np.float64)
    kept: list[int] = []
    for i in range(len(points)):
        if kept:
            last = points[kept[-1]]
            if abs(points[i][0] - last[0]) <= tolerance and \
               abs(points[i][1] - last[1]) <= tolerance:
                continue
        kept.append(i)

    while len(kept) > 1:
        first = points[kept[0]]
        last = points[kept[-1]]
        if abs(first[0] - last[0]) <= tolerance and abs(first[1] - last[1]) <= tolerance:
            kept.pop()
        else:
            break

    return points[kept].copy()
