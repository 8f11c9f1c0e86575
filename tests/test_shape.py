import pytest

from pathtracer.shape import Shape, SurfaceIntersection
from pathtracer.vecmath import Vec3

UP = Vec3(0.0, 0.0, 1.0)


def _triangle_shape():
    shape = Shape(name="tri")
    shape.add_vertex(Vec3(0.0, 0.0, 0.0), UP)
    shape.add_vertex(Vec3(1.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0))
    shape.add_vertex(Vec3(0.0, 1.0, 0.0), Vec3(0.0, 1.0, 0.0))
    return shape


def test_add_vertex_builds_sequential_indices():
    shape = _triangle_shape()
    assert shape.indices == [0, 1, 2]
    assert shape.num_vertices() == 3
    assert shape.num_faces() == 1


def test_get_face_returns_added_vertices():
    shape = _triangle_shape()
    assert shape.get_face(0) == (
        Vec3(0.0, 0.0, 0.0),
        Vec3(1.0, 0.0, 0.0),
        Vec3(0.0, 1.0, 0.0),
    )


def test_get_vertex_out_of_range_face():
    shape = _triangle_shape()
    with pytest.raises(IndexError):
        shape.get_vertex(1, 0)


def test_get_vertex_id_found_and_missing():
    shape = _triangle_shape()
    assert shape.get_vertex_id(Vec3(1.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0)) == 1
    assert shape.get_vertex_id(Vec3(1.0, 0.0, 0.0), UP) is None


def test_area_of_right_triangle():
    assert _triangle_shape().compute_area() == pytest.approx(0.5)


def test_sample_uniform_with_zero_u_is_first_vertex():
    shape = _triangle_shape()
    point = shape.sample_uniform(0, (0.0, 0.7))
    assert list(point) == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)


def test_barycentric_of_corners():
    shape = _triangle_shape()
    assert shape.barycentric(Vec3(0.0, 0.0, 0.0), 0) == pytest.approx((0.0, 0.0))
    assert shape.barycentric(Vec3(1.0, 0.0, 0.0), 0) == pytest.approx((1.0, 0.0))
    assert shape.barycentric(Vec3(0.0, 1.0, 0.0), 0) == pytest.approx((0.0, 1.0))


@pytest.mark.parametrize("u", [(0.25, 0.5), (0.9, 0.1), (0.5, 0.5)])
def test_sampled_point_reconstructs_from_barycentric(u):
    shape = _triangle_shape()
    p = shape.sample_uniform(0, u)
    bu, bv = shape.barycentric(p, 0)
    a, b, c = shape.get_face(0)
    assert bu >= -1e-12 and bv >= -1e-12 and bu + bv <= 1.0 + 1e-12
    rebuilt = a + bu * (b - a) + bv * (c - a)
    assert list(rebuilt) == pytest.approx(list(p), abs=1e-9)


def test_barycentric_degenerate_face():
    shape = Shape()
    for _ in range(3):
        shape.add_vertex(Vec3(1.0, 1.0, 1.0), UP)
    with pytest.raises(ValueError):
        shape.barycentric(Vec3(1.0, 1.0, 1.0), 0)


def test_interpolate_normal_at_corners():
    shape = _triangle_shape()
    assert list(shape.interpolate_normal(0, 0.0, 0.0)) == pytest.approx([0.0, 0.0, 1.0], abs=1e-9)
    assert list(shape.interpolate_normal(0, 1.0, 0.0)) == pytest.approx([1.0, 0.0, 0.0], abs=1e-9)
    assert list(shape.interpolate_normal(0, 0.0, 1.0)) == pytest.approx([0.0, 1.0, 0.0], abs=1e-9)


def test_surface_intersection_defaults_to_miss():
    si = SurfaceIntersection()
    assert si.shape is None
    assert si.pos == Vec3(0.0, 0.0, 0.0)