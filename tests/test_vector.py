"""Tests for Vector3: construction, arithmetic, normalization and rotations."""

import math

import numpy as np
import pytest

from xyzprim import Axis, DiagnosticLog, InvalidAxisError, InvalidValueError, NullInputError, Vector3


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


def _random_vectors(rng, n=50, scale=100.0):
    return [Vector3.from_array(row) for row in rng.uniform(-scale, scale, size=(n, 3))]


# ---- Construction ----


class TestConstruction:
    def test_components_are_floats(self):
        v = Vector3(1, 2, 3)
        assert (v.x, v.y, v.z) == (1.0, 2.0, 3.0)
        assert isinstance(v.x, float)

    def test_of_matches_constructor(self):
        assert Vector3.of(1, -2, 3.5) == Vector3(1.0, -2.0, 3.5)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(InvalidValueError):
            Vector3(0.0, bad, 0.0)

    def test_none_rejected(self):
        with pytest.raises(NullInputError) as exc:
            Vector3(None, 0.0, 0.0)
        assert exc.value.parameter == "x"

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidValueError):
            Vector3("abc", 0.0, 0.0)

    def test_array_round_trip_is_exact(self, rng):
        for v in _random_vectors(rng, scale=1e6):
            assert Vector3.from_array(v.to_array()) == v

    def test_to_array_is_float64_copy(self):
        v = Vector3(1.0, 2.0, 3.0)
        arr = v.to_array()
        assert arr.dtype == np.float64
        arr[0] = 99.0
        assert v.x == 1.0

    @pytest.mark.parametrize("values", [[1.0, 2.0], [1.0, 2.0, 3.0, 4.0], [[1.0, 2.0, 3.0]]])
    def test_from_array_wrong_length(self, values):
        with pytest.raises(InvalidValueError):
            Vector3.from_array(values)

    def test_from_array_non_finite(self):
        with pytest.raises(InvalidValueError):
            Vector3.from_array([0.0, np.nan, 1.0])

    def test_from_array_none(self):
        with pytest.raises(NullInputError):
            Vector3.from_array(None)

    def test_units(self):
        assert Vector3.unit_x() == Vector3(1.0, 0.0, 0.0)
        assert Vector3.unit_y() == Vector3(0.0, 1.0, 0.0)
        assert Vector3.unit("Z") == Vector3(0.0, 0.0, 1.0)

    def test_repr_six_decimals(self):
        assert repr(Vector3(1.0, -0.5, 2.0)) == "Vector3(1.000000, -0.500000, 2.000000)"

    def test_immutable(self):
        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            v.x = 5.0

    def test_hashable_and_equal(self):
        assert len({Vector3(1.0, 2.0, 3.0), Vector3(1, 2, 3)}) == 1

    def test_iterable(self):
        assert list(Vector3(1.0, 2.0, 3.0)) == [1.0, 2.0, 3.0]


# ---- Arithmetic and products ----


class TestArithmetic:
    def test_add_subtract(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(0.5, -1.0, 2.0)
        assert a.add(b) == Vector3(1.5, 1.0, 5.0)
        assert a - b == Vector3(0.5, 3.0, 1.0)
        assert a + b == a.add(b)

    def test_add_accepts_sequence(self):
        assert Vector3(1.0, 1.0, 1.0).add((1, 2, 3)) == Vector3(2.0, 3.0, 4.0)

    def test_operators_reject_non_vectors(self):
        with pytest.raises(TypeError):
            _ = Vector3(1.0, 1.0, 1.0) + 1

    def test_scale_and_mul(self):
        v = Vector3(1.0, -2.0, 3.0)
        assert v.scale(2.0) == Vector3(2.0, -4.0, 6.0)
        assert v * 2 == 2 * v == v.scale(2.0)
        assert -v == v.negate() == Vector3(-1.0, 2.0, -3.0)

    def test_scale_zero_reports(self):
        log = DiagnosticLog()
        assert Vector3(1.0, 2.0, 3.0).scale(0.0, sink=log).is_zero()
        assert log.codes() == ["zero_scale"]

    def test_scale_rejects_nan(self):
        with pytest.raises(InvalidValueError):
            Vector3(1.0, 0.0, 0.0).scale(float("nan"))

    def test_translate(self):
        assert Vector3(1.0, 1.0, 1.0).translate(1.0, -1.0, 0.5) == Vector3(2.0, 0.0, 1.5)

    def test_dot_cross(self):
        x, y, z = Vector3.unit_x(), Vector3.unit_y(), Vector3.unit_z()
        assert x.dot(y) == 0.0
        assert x.cross(y) == z
        assert y.cross(z) == x
        assert z.cross(x) == y
        assert y.cross(x) == -z

    def test_magnitude_and_distances(self):
        v = Vector3(3.0, 4.0, 12.0)
        assert v.magnitude() == pytest.approx(13.0)
        assert v.distance_to_origin() == v.magnitude()
        assert Vector3(1.0, 1.0, 1.0).distance_to((4.0, 5.0, 1.0)) == pytest.approx(5.0)

    def test_is_zero(self):
        assert Vector3.zero().is_zero()
        assert Vector3(1e-13, -1e-13, 0.0).is_zero()
        assert not Vector3(1e-12, 0.0, 0.0).is_zero()
        assert Vector3(0.01, 0.0, 0.0).is_zero(epsilon=0.1)


# ---- Normalization ----


class TestNormalize:
    def test_unit_length(self, rng):
        for v in _random_vectors(rng):
            assert v.normalize().magnitude() == pytest.approx(1.0, abs=1e-12)

    def test_tiny_vector(self):
        v = Vector3(1e-200, 0.0, 0.0)
        # squares underflow to zero; returned unchanged
        assert v.normalize() is v

    def test_zero_vector_returned_unchanged(self):
        v = Vector3.zero()
        log = DiagnosticLog()
        out = v.normalize(sink=log)
        assert out is v
        assert log.codes() == ["degenerate_vector"]

    def test_overflowing_magnitude_returned_unchanged(self):
        v = Vector3(1e308, 1e308, 0.0)
        assert v.normalize() is v


# ---- Rotations ----


class TestRotation:
    def test_quarter_turn_about_z(self):
        r = Vector3.unit_x().rotate_around_axis(Axis.Z, math.pi / 2)
        assert r.epsilon_equals(Vector3(0.0, 1.0, 0.0), 1e-12)

    def test_half_turn_about_z(self):
        r = Vector3.unit_x().rotate_around_axis(Vector3.unit_z(), math.pi)
        assert r.epsilon_equals(Vector3(-1.0, 0.0, 0.0), 1e-12)

    @pytest.mark.parametrize(
        "axis, start, expected",
        [
            ("x", (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)),
            ("y", (0.0, 0.0, 1.0), (1.0, 0.0, 0.0)),
            ("z", (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
        ],
    )
    def test_world_axis_rotations_are_right_handed(self, axis, start, expected):
        v = Vector3.from_array(start)
        assert v.rotate_axis(axis, math.pi / 2).epsilon_equals(expected, 1e-12)
        assert v.rotate_around_axis(axis, math.pi / 2).epsilon_equals(expected, 1e-12)

    def test_named_rotations_match_rotate_axis(self):
        v = Vector3(1.0, 2.0, 3.0)
        assert v.rotate_x(0.3) == v.rotate_axis(Axis.X, 0.3)
        assert v.rotate_y(0.3) == v.rotate_axis(Axis.Y, 0.3)
        assert v.rotate_z(0.3) == v.rotate_axis(Axis.Z, 0.3)

    def test_norm_preserved(self, rng):
        vectors = _random_vectors(rng)
        axes = _random_vectors(rng, scale=5.0)
        angles = rng.uniform(-2 * math.pi, 2 * math.pi, size=len(vectors))
        for v, axis, theta in zip(vectors, axes, angles):
            r = v.rotate_around_axis(axis, float(theta))
            assert r.magnitude() == pytest.approx(v.magnitude(), rel=1e-12)

    def test_non_unit_axis_renormalized(self):
        log = DiagnosticLog()
        r = Vector3.unit_x().rotate_around_axis((0.0, 0.0, 2.0), math.pi / 2, sink=log)
        assert r.epsilon_equals(Vector3.unit_y(), 1e-12)
        assert log.codes() == ["axis_renormalized"]
        assert log.records[0].details["length"] == pytest.approx(2.0)

    def test_unit_axis_not_reported(self):
        log = DiagnosticLog()
        Vector3.unit_x().rotate_around_axis(Vector3.unit_z(), 1.0, sink=log)
        assert len(log) == 0

    def test_zero_axis_raises(self):
        with pytest.raises(InvalidAxisError):
            Vector3.unit_x().rotate_around_axis(Vector3.zero(), 1.0)

    def test_non_finite_axis_raises(self):
        with pytest.raises(InvalidAxisError):
            Vector3.unit_x().rotate_around_axis([np.inf, 0.0, 0.0], 1.0)

    def test_unknown_axis_name_raises(self):
        with pytest.raises(InvalidAxisError) as exc:
            Vector3.unit_x().rotate_axis("w", 1.0)
        # still a ValueError for generic callers
        assert isinstance(exc.value, ValueError)

    def test_non_finite_angle_raises(self):
        with pytest.raises(InvalidValueError):
            Vector3.unit_x().rotate_around_axis("z", float("nan"))


# ---- Interpolation and comparison ----


class TestInterpolation:
    def test_lerp_endpoints(self, rng):
        vs = _random_vectors(rng, n=20)
        for a, b in zip(vs[::2], vs[1::2]):
            assert a.lerp(b, 0.0) == a
            assert a.lerp(b, 1.0).epsilon_equals(b, 1e-9)
            assert a.midpoint(b) == a.lerp(b, 0.5)

    def test_lerp_extrapolation_reported(self):
        log = DiagnosticLog()
        out = Vector3.zero().lerp((1.0, 0.0, 0.0), 2.0, sink=log)
        assert out == Vector3(2.0, 0.0, 0.0)
        assert log.codes() == ["extrapolation"]

    def test_lerp_rejects_nan(self):
        with pytest.raises(InvalidValueError):
            Vector3.zero().lerp(Vector3.unit_x(), float("nan"))

    def test_epsilon_equals(self):
        a = Vector3(1.0, 2.0, 3.0)
        assert a.epsilon_equals((1.0 + 1e-10, 2.0, 3.0 - 1e-10), 1e-9)
        assert not a.epsilon_equals((1.1, 2.0, 3.0), 1e-9)
        assert a.epsilon_equals(a, 0.0)

    @pytest.mark.parametrize("eps", [-1e-9, float("nan")])
    def test_epsilon_equals_rejects_bad_tolerance(self, eps):
        with pytest.raises(InvalidValueError):
            Vector3.zero().epsilon_equals(Vector3.zero(), eps)

    def test_equality_is_exact(self):
        assert Vector3(0.1 + 0.2, 0.0, 0.0) != Vector3(0.3, 0.0, 0.0)
        assert Vector3(-0.0, 0.0, 0.0) == Vector3(0.0, 0.0, 0.0)
