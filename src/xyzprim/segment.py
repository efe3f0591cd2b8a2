"""Line segments in 3D and closest-point queries.

Segment parameterization: ``P(t) = p0 + t (p1 - p0)`` with t in [0, 1] on
the segment. The infinite-line helpers use the same P(t) with t
unrestricted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .diagnostics import DEGENERATE_SEGMENT, DEGENERATE_VECTOR, EXTRAPOLATION, DiagnosticSink, emit
from .errors import InvalidValueError, require_epsilon, require_finite, require_present
from .parameters import DEFAULT_TOLERANCES
from .vector import Vector3, VectorLike, as_vector

logger = logging.getLogger(__name__)

EPS = DEFAULT_TOLERANCES.degenerate


def _clamp01(t: float) -> float:
    if t < 0.0:
        return 0.0
    if t > 1.0:
        return 1.0
    return t


class ClosestPoints(NamedTuple):
    """Closest pair between two segments.

    ``point_a = a.point_at(s)`` lies on the segment the query was called
    on, ``point_b = b.point_at(t)`` on the other one.
    """

    point_a: Vector3
    point_b: Vector3
    s: float
    t: float

    @property
    def distance(self) -> float:
        return self.point_a.distance_to(self.point_b)


@dataclass(frozen=True)
class Segment3:
    """An immutable segment between two endpoints.

    Zero-length (degenerate) segments are allowed; queries on them fall
    back to the start point instead of failing.
    """

    p0: Vector3
    p1: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "p0", as_vector(self.p0, "Segment3", "p0"))
        object.__setattr__(self, "p1", as_vector(self.p1, "Segment3", "p1"))

    @classmethod
    def of(cls, p0: VectorLike, p1: VectorLike, *, sink: Optional[DiagnosticSink] = None) -> "Segment3":
        """Create a segment, reporting a degenerate one through *sink*."""
        segment = cls(p0, p1)
        if segment.p0 == segment.p1:
            emit(
                sink,
                DEGENERATE_SEGMENT,
                "Segment3.of",
                f"p0 equals p1 ({segment.p0}); zero-length segment",
                log=logger,
            )
        return segment

    @classmethod
    def from_point_and_direction(
        cls,
        point: VectorLike,
        direction: VectorLike,
        length: float,
    ) -> "Segment3":
        """Segment ``[point, point + unit(direction) * length]``.

        Raises
        ------
        InvalidValueError
            If *length* is negative or NaN, or *direction* is the zero vector.
        """
        op = "Segment3.from_point_and_direction"
        point = as_vector(point, op, "point")
        direction = as_vector(direction, op, "direction")
        length = require_finite(length, op, "length")
        if length < 0.0:
            raise InvalidValueError(op, "length", f"must be >= 0, got {length}")
        unit = direction.normalize()
        if unit.is_zero(EPS):
            raise InvalidValueError(op, "direction", "must be non-zero")
        return cls(point, point + unit * length)

    def __repr__(self) -> str:
        return f"Segment3[{self.p0} -> {self.p1}]"

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------

    def direction(self) -> Vector3:
        """Raw direction ``p1 - p0`` (zero for a degenerate segment)."""
        return self.p1 - self.p0

    def unit_direction(self, *, sink: Optional[DiagnosticSink] = None) -> Vector3:
        """Normalized direction; the zero vector stays zero."""
        d = self.direction()
        if d.is_zero(EPS):
            emit(
                sink,
                DEGENERATE_VECTOR,
                "Segment3.unit_direction",
                "zero-length segment; returning zero direction",
                log=logger,
            )
            return d
        return d.normalize()

    def length(self) -> float:
        return self.p0.distance_to(self.p1)

    def is_degenerate(self) -> bool:
        return self.direction().is_zero(EPS)

    def reversed(self) -> "Segment3":
        return Segment3(self.p1, self.p0)

    def point_at(self, t: float, *, sink: Optional[DiagnosticSink] = None) -> Vector3:
        """``p0 + t (p1 - p0)``. Values outside [0, 1] extrapolate the line."""
        op = "Segment3.point_at"
        t = require_finite(t, op, "t")
        if t < 0.0 or t > 1.0:
            emit(sink, EXTRAPOLATION, op, f"t={t:.6f} outside [0, 1]; extrapolating", log=logger, t=t)
        d = self.direction()
        return self.p0.translate(d.x * t, d.y * t, d.z * t)

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def _project_parameter(self, point: Vector3, operation: str, sink: Optional[DiagnosticSink]) -> Optional[float]:
        """Clamped parameter of the closest point, or None for a degenerate segment."""
        v = self.direction()
        vv = v.dot(v)
        if vv < EPS:
            emit(
                sink,
                DEGENERATE_SEGMENT,
                operation,
                "degenerate segment; using p0 as closest point",
                log=logger,
            )
            return None
        t = (point - self.p0).dot(v) / vv
        logger.debug("%s: projection t=%.6f (clamped %.6f)", operation, t, _clamp01(t))
        return _clamp01(t)

    def closest_point_to_point(self, point: VectorLike, *, sink: Optional[DiagnosticSink] = None) -> Vector3:
        op = "Segment3.closest_point_to_point"
        point = as_vector(point, op, "point")
        t = self._project_parameter(point, op, sink)
        if t is None:
            return self.p0
        return self.point_at(t)

    def distance_to_point(self, point: VectorLike, *, sink: Optional[DiagnosticSink] = None) -> float:
        """Shortest distance from the segment to *point*."""
        op = "Segment3.distance_to_point"
        point = as_vector(point, op, "point")
        t = self._project_parameter(point, op, sink)
        if t is None:
            return self.p0.distance_to(point)
        return self.point_at(t).distance_to(point)

    # ------------------------------------------------------------------
    # Segment / line queries
    # ------------------------------------------------------------------

    def distance_to_infinite_line(self, other: "Segment3", *, sink: Optional[DiagnosticSink] = None) -> float:
        """Distance between the infinite lines through this and *other*.

        Let ``u``, ``v`` be the two directions and ``w0 = other.p0 - p0``.
        Parallel lines (``|u x v| ~ 0``) reduce to point-to-line distance
        ``|w0 x u| / |u|``; skew lines use ``|w0 . (u x v)| / |u x v|``.
        """
        op = "Segment3.distance_to_infinite_line"
        other = _require_segment(other, op)
        u = self.direction()
        v = other.direction()
        if u.is_zero(EPS) or v.is_zero(EPS):
            emit(
                sink,
                DEGENERATE_SEGMENT,
                op,
                "degenerate direction(s); falling back to point-to-line distance",
                log=logger,
            )
        w0 = other.p0 - self.p0
        uxv = u.cross(v)
        n = uxv.magnitude()
        if n < EPS:
            un = u.magnitude()
            if un < EPS:
                # this segment is a point: distance from p0 to the other line
                vn = v.magnitude()
                if vn < EPS:
                    return w0.magnitude()
                return w0.cross(v).magnitude() / vn
            return w0.cross(u).magnitude() / un
        return abs(w0.dot(uxv)) / n

    def closest_points_on_segments(
        self,
        other: "Segment3",
        *,
        sink: Optional[DiagnosticSink] = None,
    ) -> ClosestPoints:
        """Closest pair of points between this segment and *other*.

        Minimizes ``|P(s) - Q(t)|^2`` over ``(s, t)`` in [0, 1]^2 by the
        normal-equations reduction from Ericson, *Real-Time Collision
        Detection* (5.1.9), with

        - ``d1, d2`` the two directions and ``r = p0 - q0``
        - ``a = d1.d1``, ``e = d2.d2``, ``b = d1.d2``, ``c = d1.r``, ``f = d2.r``

        Degenerate segments are projected onto the other one. When the
        segments are parallel (``a e - b^2`` vanishes relative to ``a e``)
        ``s`` starts at 0. Otherwise ``s`` is solved and clamped, ``t`` is
        resolved from ``s`` and clamped, then ``s`` is re-resolved from the
        clamped ``t``.

        Returns
        -------
        ClosestPoints
            ``(point_a, point_b, s, t)`` with ``point_a`` on this segment.
        """
        op = "Segment3.closest_points_on_segments"
        other = _require_segment(other, op)

        d1 = self.direction()
        d2 = other.direction()
        r = self.p0 - other.p0
        a = d1.dot(d1)
        e = d2.dot(d2)
        f = d2.dot(r)

        if a < EPS and e < EPS:
            emit(sink, DEGENERATE_SEGMENT, op, "both segments are degenerate; returning (p0, q0)", log=logger)
            return ClosestPoints(self.p0, other.p0, 0.0, 0.0)

        if a < EPS:
            s = 0.0
            t = _clamp01(f / e)
        else:
            c = d1.dot(r)
            if e < EPS:
                t = 0.0
                s = _clamp01(-c / a)
            else:
                b = d1.dot(d2)
                denom = a * e - b * b
                if denom > EPS * a * e:
                    s = _clamp01((b * f - c * e) / denom)
                else:
                    s = 0.0

                t_nom = b * s + f
                if t_nom < 0.0:
                    t = 0.0
                elif t_nom > e:
                    t = 1.0
                else:
                    t = t_nom / e

                s_nom = b * t - c
                if s_nom < 0.0:
                    s = 0.0
                elif s_nom > a:
                    s = 1.0
                else:
                    s = s_nom / a

        result = ClosestPoints(self.point_at(s), other.point_at(t), s, t)
        logger.debug("%s: s=%.6f, t=%.6f -> (%s, %s)", op, s, t, result.point_a, result.point_b)
        return result

    def shortest_distance_segment(self, other: "Segment3", *, sink: Optional[DiagnosticSink] = None) -> float:
        return self.closest_points_on_segments(other, sink=sink).distance

    def segments_intersect(self, other: "Segment3", epsilon: float = EPS) -> bool:
        """True when the closest pair coincides within *epsilon* on every axis."""
        epsilon = require_epsilon(epsilon, "Segment3.segments_intersect")
        cp = self.closest_points_on_segments(other)
        return cp.point_a.epsilon_equals(cp.point_b, epsilon)

    def infinite_lines_intersect(self, other: "Segment3", epsilon: float = EPS) -> bool:
        """True when the infinite lines come within *epsilon* of each other."""
        epsilon = require_epsilon(epsilon, "Segment3.infinite_lines_intersect")
        return self.distance_to_infinite_line(other) <= epsilon

    def is_parallel_to(self, other: "Segment3", epsilon: float = EPS) -> bool:
        """``|u x v| <= epsilon`` for the raw directions."""
        op = "Segment3.is_parallel_to"
        other = _require_segment(other, op)
        epsilon = require_epsilon(epsilon, op)
        return self.direction().cross(other.direction()).magnitude() <= epsilon

    def is_colinear_with(self, other: "Segment3", epsilon: float = EPS) -> bool:
        """Parallel, and the vector between the start points lies along the line."""
        if not self.is_parallel_to(other, epsilon):
            return False
        w = other.p0 - self.p0
        return w.cross(self.direction()).magnitude() <= epsilon


def _require_segment(other: Segment3, operation: str) -> Segment3:
    require_present(other, operation, "other")
    if not isinstance(other, Segment3):
        raise InvalidValueError(operation, "other", f"must be a Segment3, got {type(other).__name__}")
    return other
