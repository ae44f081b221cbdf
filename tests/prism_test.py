"""
Tests for PrismMeshBuilder and PrismMesh.
"""

import unittest
from unittest.mock import patch

import numpy as np

from polyprism import log
from polyprism.errors import (
    DegenerateGeometryError,
    InvalidPolygonError,
    TriangulationError,
)
from polyprism.geometry.predicates import signed_area_2d
from polyprism.mesh import (
    PrismMesh,
    PrismMeshBuilder,
    build_prism_mesh,
    to_indexed_arrays,
    to_triangle_mesh_buffers,
)
from polyprism.mesh.prism import as_polygon, build_side_triangles
from polyprism.settings import ExtrusionSettings
from polyprism.triangulation import TriangulationStrategy


SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]

COMPLEX = [
    (0, 0), (100, 0), (100, 100), (200, 100), (200, 200), (175, 200),
    (175, 125), (75, 125), (75, 25), (25, 25), (25, 100), (0, 100),
]

HEART = [
    (0, 0), (-50, 50), (-100, 50), (-200, 0),
    (0, -200), (200, 0), (100, 50), (50, 50),
]


class SquarePrismTest(unittest.TestCase):
    """Unit square extruded by 1."""

    def setUp(self):
        self.mesh = build_prism_mesh(SQUARE, 1.0)

    def test_counts(self):
        self.assertEqual(self.mesh.vertex_count(), 10)
        self.assertEqual(self.mesh.triangle_count(), 12)
        self.assertEqual(self.mesh.polygon_size, 4)

    def test_vertex_layout(self):
        expected = np.array([
            [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
            [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
            [0.5, 0.5, 0], [0.5, 0.5, 1],
        ], dtype=np.float32)
        np.testing.assert_array_equal(self.mesh.vertices, expected)
        self.assertEqual(self.mesh.vertices.dtype, np.float32)
        self.assertEqual(self.mesh.bottom_centroid_index(), 8)
        self.assertEqual(self.mesh.top_centroid_index(), 9)

    def test_triangles(self):
        expected = [
            [0, 1, 2], [4, 6, 5], [0, 2, 3], [4, 7, 6],
            [0, 4, 5], [0, 5, 1],
            [1, 5, 6], [1, 6, 2],
            [2, 6, 7], [2, 7, 3],
            [3, 7, 4], [3, 4, 0],
        ]
        np.testing.assert_array_equal(self.mesh.triangles, expected)

    def test_faces_carry_zero_texcoord(self):
        faces = self.mesh.faces()
        self.assertEqual(faces.shape, (12, 6))
        np.testing.assert_array_equal(faces[:, 1::2], 0)
        np.testing.assert_array_equal(faces[:, 0::2], self.mesh.triangles)
        np.testing.assert_array_equal(self.mesh.tex_coords(), [0.0, 0.0])

    def test_flat_buffers(self):
        self.assertEqual(len(self.mesh.points_buffer()), 30)
        self.assertEqual(len(self.mesh.faces_buffer()), 72)
        np.testing.assert_array_equal(self.mesh.faces_buffer()[:6], [0, 0, 1, 0, 2, 0])

    def test_closed_and_consistently_oriented(self):
        self.assertTrue(self.mesh.is_closed())

    def test_signed_volume(self):
        self.assertAlmostEqual(self.mesh.signed_volume(), -1.0, places=5)
        self.assertAlmostEqual(self.mesh.flipped().signed_volume(), 1.0, places=5)

    def test_centroids_are_not_referenced(self):
        self.assertLess(self.mesh.triangles.max(), 8)


class PrismPropertiesTest(unittest.TestCase):
    """Invariants over several shapes."""

    SHAPES = {"square": SQUARE, "complex": COMPLEX, "heart": HEART}

    def test_counts_and_index_range(self):
        for name, shape in self.SHAPES.items():
            with self.subTest(shape=name):
                n = len(shape)
                mesh = build_prism_mesh(shape, 10.0)
                self.assertEqual(mesh.vertex_count(), 2 * n + 2)
                self.assertEqual(mesh.triangle_count(), 2 * (n - 2) + 2 * n)
                self.assertLess(mesh.triangles.max(), 2 * n + 2)
                self.assertGreaterEqual(mesh.triangles.min(), 0)

    def test_top_layer_is_translated_bottom(self):
        for name, shape in self.SHAPES.items():
            with self.subTest(shape=name):
                n = len(shape)
                mesh = build_prism_mesh(shape, 7.5)
                np.testing.assert_array_equal(mesh.vertices[:n, :2], mesh.vertices[n:2 * n, :2])
                np.testing.assert_array_equal(mesh.vertices[:n, 2], 0.0)
                np.testing.assert_array_equal(mesh.vertices[n:2 * n, 2], 7.5)
                np.testing.assert_allclose(mesh.vertices[2 * n, :2], np.mean(shape, axis=0), rtol=1e-6)

    def test_closed_with_expected_volume(self):
        for name, shape in self.SHAPES.items():
            with self.subTest(shape=name):
                mesh = build_prism_mesh(shape, 3.0)
                area = signed_area_2d(np.asarray(shape, dtype=float))
                self.assertTrue(mesh.is_closed())
                self.assertAlmostEqual(mesh.signed_volume() / (area * 3.0), -1.0, places=4)

    def test_collinear_chains_build_closed_meshes(self):
        shapes = {
            "split_edge_rectangle": [(0, 0), (1, 0), (2, 0), (3, 0), (3, 1), (0, 1)],
            "split_base_triangle": [(0, 0), (1, 0), (2, 0), (3, 0), (1.5, 1)],
        }
        for name, shape in shapes.items():
            with self.subTest(shape=name):
                n = len(shape)
                mesh = build_prism_mesh(shape, 2.0)
                area = signed_area_2d(np.asarray(shape, dtype=float))
                self.assertEqual(mesh.triangle_count(), 2 * (n - 2) + 2 * n)
                self.assertTrue(mesh.is_closed())
                self.assertAlmostEqual(mesh.signed_volume(), -area * 2.0, places=4)

    def test_negative_depth_reflects_vertices(self):
        for name, shape in self.SHAPES.items():
            with self.subTest(shape=name):
                up = build_prism_mesh(shape, 4.0)
                down = build_prism_mesh(shape, -4.0)
                np.testing.assert_array_equal(up.vertices[:, :2], down.vertices[:, :2])
                np.testing.assert_array_equal(up.vertices[:, 2], -down.vertices[:, 2])
                self.assertEqual(up.triangle_count(), down.triangle_count())
                np.testing.assert_array_equal(up.triangles, down.triangles)
                # same indices on reflected vertices: the mesh turns inside out
                self.assertTrue(down.is_closed())
                self.assertAlmostEqual(down.signed_volume(), -up.signed_volume(), places=3)

    def test_zero_depth_is_allowed(self):
        mesh = build_prism_mesh(SQUARE, 0.0)
        self.assertEqual(mesh.triangle_count(), 12)

    def test_side_triangles(self):
        sides = build_side_triangles(3)
        np.testing.assert_array_equal(sides, [
            [0, 3, 4], [0, 4, 1],
            [1, 4, 5], [1, 5, 2],
            [2, 5, 3], [2, 3, 0],
        ])


class CentroidFanPrismTest(unittest.TestCase):
    """Legacy centroid fan strategy."""

    def test_square_fan(self):
        mesh = build_prism_mesh(SQUARE, 1.0, strategy=TriangulationStrategy.CENTROID_FAN)
        self.assertEqual(mesh.strategy, TriangulationStrategy.CENTROID_FAN)
        self.assertEqual(mesh.triangle_count(), 16)
        self.assertEqual(mesh.vertex_count(), 10)
        self.assertIn(8, mesh.triangles)
        self.assertIn(9, mesh.triangles)
        self.assertTrue(mesh.is_closed())
        self.assertAlmostEqual(mesh.signed_volume(), -1.0, places=5)

    def test_regular_polygon_fan(self):
        angles = np.linspace(0.0, 2.0 * np.pi, 9)[:-1]
        octagon = np.stack([np.cos(angles), np.sin(angles)], axis=1)
        mesh = build_prism_mesh(octagon, 2.0, strategy="centroid_fan")
        self.assertEqual(mesh.triangle_count(), 4 * 8)

    def test_fan_rejects_concave(self):
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh(COMPLEX, 1.0, strategy="centroid_fan")

    def test_strategy_from_settings(self):
        builder = PrismMeshBuilder(ExtrusionSettings(strategy="centroid_fan"))
        self.assertEqual(builder.build(SQUARE).triangle_count(), 16)

    def test_builder_resolves_strategy_through_settings(self):
        settings = ExtrusionSettings()
        with patch.object(
            settings, "triangulation_strategy", return_value=TriangulationStrategy.CENTROID_FAN
        ) as resolve:
            mesh = PrismMeshBuilder(settings).build(SQUARE)
        resolve.assert_called_once_with()
        self.assertEqual(mesh.strategy, TriangulationStrategy.CENTROID_FAN)
        self.assertEqual(mesh.triangle_count(), 16)


class PrismErrorsTest(unittest.TestCase):
    """Invalid input handling."""

    def test_too_few_points(self):
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh([(0, 0), (1, 0)], 1.0)

    def test_bad_shape(self):
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh([(0, 0, 0), (1, 0, 0), (1, 1, 0)], 1.0)
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh([0, 0, 1, 0, 1], 1.0)

    def test_non_finite(self):
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh([(0, 0), (1, np.nan), (1, 1)], 1.0)
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh(SQUARE, float("inf"))

    def test_invalid_polygon_is_value_error(self):
        with self.assertRaises(ValueError):
            build_prism_mesh([(0, 0)], 1.0)

    def test_clockwise_polygon(self):
        with self.assertRaises(TriangulationError):
            build_prism_mesh(SQUARE[::-1], 1.0)
        with self.assertRaises(TriangulationError):
            build_prism_mesh(COMPLEX[::-1], 1.0)

    def test_auto_orient(self):
        builder = PrismMeshBuilder(ExtrusionSettings(auto_orient=True))
        mesh = builder.build(SQUARE[::-1], 1.0)
        self.assertEqual(mesh.triangle_count(), 12)
        np.testing.assert_array_equal(mesh.vertices[:4, :2], SQUARE)
        self.assertTrue(mesh.is_closed())

    def test_self_intersecting(self):
        bowtie = [(0, 0), (4, 2), (4, 0), (0, 3)]
        with self.assertRaises(InvalidPolygonError):
            build_prism_mesh(bowtie, 1.0)

        builder = PrismMeshBuilder(ExtrusionSettings(check_simple=False))
        with self.assertRaises(TriangulationError):
            builder.build(bowtie, 1.0)

    def test_duplicate_points_rejected(self):
        with self.assertRaises(DegenerateGeometryError):
            build_prism_mesh([(0, 0), (1, 0), (1, 0), (1, 1), (0, 1)], 1.0)
        with self.assertRaises(DegenerateGeometryError):
            build_prism_mesh([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)], 1.0)

    def test_duplicate_points_merged(self):
        messages = []
        log.set_callback(lambda level, msg: messages.append((level, msg)))
        try:
            builder = PrismMeshBuilder(ExtrusionSettings(merge_duplicates=True))
            mesh = builder.build([(0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (0, 0)], 1.0)
        finally:
            log.set_callback(None)

        self.assertEqual(mesh.polygon_size, 4)
        self.assertEqual(mesh.vertex_count(), 10)
        self.assertEqual(mesh.triangle_count(), 12)
        self.assertTrue(any(level == "WARNING" and "merged" in msg for level, msg in messages))

    def test_merge_leaving_too_few_points(self):
        builder = PrismMeshBuilder(ExtrusionSettings(merge_duplicates=True))
        with self.assertRaises(InvalidPolygonError):
            builder.build([(0, 0), (0, 0), (1, 1), (1, 1)], 1.0)


class PrismBuilderOptionsTest(unittest.TestCase):
    """Builder settings and input forms."""

    def test_flat_point_list(self):
        mesh = build_prism_mesh([0, 0, 1, 0, 1, 1, 0, 1], 1.0)
        np.testing.assert_array_equal(mesh.vertices[:4, :2], SQUARE)

    def test_depth_from_settings(self):
        builder = PrismMeshBuilder(ExtrusionSettings(depth=2.5))
        mesh = builder.build(SQUARE, name="plate")
        self.assertEqual(mesh.depth, 2.5)
        self.assertEqual(mesh.name, "plate")
        np.testing.assert_array_equal(mesh.vertices[4:8, 2], 2.5)

    def test_flip_winding(self):
        builder = PrismMeshBuilder(ExtrusionSettings(flip_winding=True))
        mesh = builder.build(SQUARE, 1.0)
        default = build_prism_mesh(SQUARE, 1.0)
        np.testing.assert_array_equal(mesh.triangles, default.triangles[:, [0, 2, 1]])
        self.assertAlmostEqual(mesh.signed_volume(), 1.0, places=5)
        self.assertTrue(mesh.is_closed())

    def test_as_polygon(self):
        polygon = as_polygon(SQUARE)
        self.assertEqual(polygon.shape, (4, 2))
        self.assertEqual(polygon.dtype, np.float64)
        with self.assertRaises(InvalidPolygonError):
            as_polygon([("a", "b"), (1, 2), (3, 4)])


class PrismMeshTypeTest(unittest.TestCase):
    """PrismMesh value type and adapters."""

    def test_validate_vertex_count(self):
        with self.assertRaises(ValueError):
            PrismMesh(vertices=np.zeros((5, 3)), triangles=np.zeros((0, 3)), polygon_size=4)

    def test_validate_index_range(self):
        with self.assertRaises(ValueError):
            PrismMesh(vertices=np.zeros((8, 3)), triangles=[[0, 1, 8]], polygon_size=3)

    def test_copy_is_independent(self):
        mesh = build_prism_mesh(SQUARE, 1.0)
        other = mesh.copy()
        other.vertices[0, 0] = 42.0
        self.assertEqual(mesh.vertices[0, 0], 0.0)

    def test_triangle_mesh_buffers(self):
        mesh = build_prism_mesh(COMPLEX, 10.0)
        buffers = to_triangle_mesh_buffers(mesh)
        self.assertEqual(buffers.point_count(), 26)
        self.assertEqual(buffers.face_count(), 2 * 10 + 24)
        self.assertEqual(buffers.points.dtype, np.float32)
        self.assertEqual(buffers.faces.dtype, np.int32)
        np.testing.assert_array_equal(buffers.tex_coords, [0.0, 0.0])

    def test_indexed_arrays(self):
        mesh = build_prism_mesh(SQUARE, 1.0)
        vertices, triangles = to_indexed_arrays(mesh)
        self.assertEqual(vertices.shape, (10, 3))
        self.assertEqual(triangles.dtype, np.uint32)
        self.assertTrue(vertices.flags["C_CONTIGUOUS"])


if __name__ == "__main__":
    unittest.main()
