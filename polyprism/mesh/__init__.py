"""Mesh module - PrismMesh, PrismMeshBuilder and renderer adapters."""

from .mesh import PrismMesh, TEX_COORDS
from .prism import PrismMeshBuilder, build_prism_mesh, as_polygon
from .adapters import TriangleMeshBuffers, to_triangle_mesh_buffers, to_indexed_arrays

__all__ = [
    "PrismMesh",
    "TEX_COORDS",
    "PrismMeshBuilder",
    "build_prism_mesh",
    "as_polygon",
    "TriangleMeshBuffers",
    "to_triangle_mesh_buffers",
    "to_indexed_arrays",
]
