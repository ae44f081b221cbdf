"""Extrude a few polygons and report the resulting meshes."""

from __future__ import annotations

import logging

from polyprism import ExtrusionSettings, PrismMeshBuilder, log
from polyprism.mesh import to_triangle_mesh_buffers


SHAPES = {
    "arrow": [(0, 0), (100, 0), (100, 100), (50, 150), (0, 100)],
    "heart": [(0, 0), (-50, 50), (-100, 50), (-200, 0), (0, -200), (200, 0), (100, 50), (50, 50)],
    "complex": [
        (0, 0), (100, 0), (100, 100), (200, 100), (200, 200), (175, 200),
        (175, 125), (75, 125), (75, 25), (25, 25), (25, 100), (0, 100),
    ],
}


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    log.set_level("DEBUG")

    builder = PrismMeshBuilder(ExtrusionSettings(depth=100.0))

    for name, points in SHAPES.items():
        mesh = builder.build(points, name=name)
        buffers = to_triangle_mesh_buffers(mesh)
        print(f"{name}: {buffers.point_count()} points, {buffers.face_count()} faces, "
              f"closed={mesh.is_closed()}, volume {abs(mesh.signed_volume()):.1f}")


if __name__ == "__main__":
    main()
