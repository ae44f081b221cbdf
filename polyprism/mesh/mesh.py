"""Prism mesh value type."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

import numpy as np

from polyprism.triangulation import TriangulationStrategy


TEX_COORDS = (0.0, 0.0)
"""The only texture coordinate; every face corner references index 0."""


@dataclass
class PrismMesh:
    """
    Extruded polygon as flat vertex and face buffers.

    Vertex layout for a polygon of n points:
    [0, n) bottom layer, [n, 2n) top layer, 2n bottom centroid,
    2n+1 top centroid.
    """

    vertices: np.ndarray
    """Vertex positions, shape (2n+2, 3), float32."""

    triangles: np.ndarray
    """Vertex indices of every triangle, shape (T, 3), int32."""

    polygon_size: int
    """Number of boundary points n."""

    depth: float = 1.0
    """Extrusion distance along Z."""

    strategy: TriangulationStrategy = TriangulationStrategy.EAR_CLIPPING
    """Cap triangulation the mesh was built with."""

    name: str = ""

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float32)
        self.triangles = np.asarray(self.triangles, dtype=np.int32).reshape(-1, 3)
        self.validate()

    def vertex_count(self) -> int:
        return len(self.vertices)

    def triangle_count(self) -> int:
        return len(self.triangles)

    def bottom_centroid_index(self) -> int:
        return 2 * self.polygon_size

    def top_centroid_index(self) -> int:
        return 2 * self.polygon_size + 1

    def validate(self) -> None:
        """Ensure that the vertex/index arrays have correct shapes and bounds."""
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise ValueError("Vertices must be a Nx3 array.")
        if self.triangles.ndim != 2 or self.triangles.shape[1] != 3:
            raise ValueError("Triangles must be a Mx3 array.")
        if len(self.vertices) != 2 * self.polygon_size + 2:
            raise ValueError(
                f"Expected {2 * self.polygon_size + 2} vertices for a polygon of "
                f"{self.polygon_size} points, got {len(self.vertices)}."
            )
        if self.triangles.size and (
            self.triangles.min() < 0 or self.triangles.max() >= len(self.vertices)
        ):
            raise ValueError("Triangle index out of vertex range.")

    def faces(self) -> np.ndarray:
        """Faces as (vertex, texcoord) pairs, shape (T, 6)."""
        faces = np.zeros((len(self.triangles), 6), dtype=np.int32)
        faces[:, 0::2] = self.triangles
        return faces

    def points_buffer(self) -> np.ndarray:
        """Flat x, y, z buffer."""
        return self.vertices.reshape(-1).copy()

    def faces_buffer(self) -> np.ndarray:
        """Flat v0, t0, v1, t1, v2, t2 buffer."""
        return self.faces().reshape(-1)

    def tex_coords(self) -> np.ndarray:
        return np.array(TEX_COORDS, dtype=np.float32)

    def signed_volume(self) -> float:
        """
        Volume by the divergence theorem.

        Negative when faces are wound clockwise seen from outside in a
        right-handed frame.
        """
        v = self.vertices.astype(np.float64)
        a = v[self.triangles[:, 0]]
        b = v[self.triangles[:, 1]]
        c = v[self.triangles[:, 2]]
        return float(np.einsum("ij,ij->i", a, np.cross(b, c)).sum() / 6.0)

    def directed_edge_counts(self) -> Counter:
        """Multiset of directed triangle edges (i, j)."""
        edges: Counter = Counter()
        for i, j, k in self.triangles.tolist():
            edges[(i, j)] += 1
            edges[(j, k)] += 1
            edges[(k, i)] += 1
        return edges

    def is_closed(self) -> bool:
        """Every directed edge is used once and its reverse once."""
        edges = self.directed_edge_counts()
        for (i, j), count in edges.items():
            if count != 1 or edges.get((j, i), 0) != 1:
                return False
        return True

    def flipped(self) -> "PrismMesh":
        """Copy with every triangle wound the other way."""
        return PrismMesh(
            vertices=self.vertices.copy(),
            triangles=self.triangles[:, [0, 2, 1]].copy(),
            polygon_size=self.polygon_size,
            depth=self.depth,
            strategy=self.strategy,
            name=self.name,
        )

    def copy(self) -> "PrismMesh":
        return PrismMesh(
            vertices=self.vertices.copy(),
            triangles=self.triangles.copy(),
            polygon_size=self.polygon_size,
            depth=self.depth,
            strategy=self.strategy,
            name=self.name,
        )
