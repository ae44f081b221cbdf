"""
Conversions of PrismMesh for rendering collaborators.

Two layouts are supported:
- flat TriangleMesh buffers (points, texcoords, faces with a texcoord
  index after every vertex index), as used by JavaFX-like scene graphs;
- indexed arrays (vertices Nx3 float32, triangles Mx3 uint32), as used by
  GL vertex/index buffers.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from polyprism.mesh.mesh import PrismMesh


@dataclass
class TriangleMeshBuffers:
    """Flat buffers of a textured triangle mesh."""

    points: np.ndarray
    """x0, y0, z0, x1, ... float32."""

    tex_coords: np.ndarray
    """u0, v0, ... float32. Always the single pair (0, 0)."""

    faces: np.ndarray
    """p0, t0, p1, t1, p2, t2 per triangle, int32."""

    def point_count(self) -> int:
        return len(self.points) // 3

    def face_count(self) -> int:
        return len(self.faces) // 6


def to_triangle_mesh_buffers(mesh: PrismMesh) -> TriangleMeshBuffers:
    return TriangleMeshBuffers(
        points=mesh.points_buffer(),
        tex_coords=mesh.tex_coords(),
        faces=mesh.faces_buffer(),
    )


def to_indexed_arrays(mesh: PrismMesh) -> tuple[np.ndarray, np.ndarray]:
    """Vertices (N, 3) float32 and triangles (M, 3) uint32."""
    vertices = np.ascontiguousarray(mesh.vertices, dtype=np.float32)
    triangles = np.ascontiguousarray(mesh.triangles, dtype=np.uint32)
    return vertices, triangles
