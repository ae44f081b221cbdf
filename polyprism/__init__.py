"""
Polyprism - extrusion of simple 2D polygons into closed triangular prism meshes.

Main modules:
- geometry - orientation and point-in-triangle predicates
- triangulation - Ear Clipping and centroid fan cap triangulation
- mesh - PrismMesh, PrismMeshBuilder, renderer adapters
"""

from .errors import (
    PolyPrismError,
    InvalidPolygonError,
    DegenerateGeometryError,
    TriangulationError,
)
from .triangulation import TriangulationStrategy, ear_clip
from .settings import ExtrusionSettings
from .mesh import PrismMesh, PrismMeshBuilder, build_prism_mesh

__version__ = '0.1.0'

__all__ = [
    'PolyPrismError',
    'InvalidPolygonError',
    'DegenerateGeometryError',
    'TriangulationError',
    'TriangulationStrategy',
    'ear_clip',
    'ExtrusionSettings',
    'PrismMesh',
    'PrismMeshBuilder',
    'build_prism_mesh',
]
