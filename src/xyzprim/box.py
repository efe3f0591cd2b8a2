"""Oriented cubes.

A cube is stored as its center, edge length ``a`` and a right-handed
orthonormal local basis ``(ux, uy, uz)``. Every factory and transform
returns a box whose basis satisfies that invariant; arbitrary candidate
frames are repaired with Gram-Schmidt by :func:`orthonormalize_basis`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Tuple

import networkx as nx
import numpy as np

from .diagnostics import BASIS_REPAIRED, BASIS_UY_COLINEAR, BASIS_UZ_REPLACED, DiagnosticSink, emit
from .errors import InvalidValueError, require_epsilon, require_positive
from .parameters import DEFAULT_TOLERANCES, Tolerances
from .segment import Segment3
from .vector import Axis, AxisLike, Vector3, VectorLike, as_vector

logger = logging.getLogger(__name__)

# Signs of the half-edge offsets along (ux, uy, uz) for each vertex index:
# bottom face (-uz) then top face (+uz), each counter-clockwise seen from +uz.
VERTEX_SIGNS: Tuple[Tuple[int, int, int], ...] = (
    (-1, -1, -1),
    (1, -1, -1),
    (1, 1, -1),
    (-1, 1, -1),
    (-1, -1, 1),
    (1, -1, 1),
    (1, 1, 1),
    (-1, 1, 1),
)

# Vertex index pairs for the 12 edges.
EDGE_TABLE: Tuple[Tuple[int, int], ...] = (
    # bottom square
    (0, 1), (1, 2), (2, 3), (3, 0),
    # top square
    (4, 5), (5, 6), (6, 7), (7, 4),
    # verticals
    (0, 4), (1, 5), (2, 6), (3, 7),
)


class OrthonormalBasis(NamedTuple):
    """Result of :func:`orthonormalize_basis`."""

    ux: Vector3
    uy: Vector3
    uz: Vector3
    repaired: bool  # True if the output differs from the supplied frame


def _rescaled(v: Vector3) -> Vector3:
    """*v* divided by its largest absolute component (keeps squares finite)."""
    m = max(abs(v.x), abs(v.y), abs(v.z))
    if m == 0.0:
        return v
    return Vector3(v.x / m, v.y / m, v.z / m)


def _unit(v: Vector3) -> Vector3:
    return _rescaled(v).normalize()


def orthogonal_fallback(v: Vector3) -> Vector3:
    """Deterministic unit vector perpendicular to the unit vector *v*."""
    k = Vector3.unit_x() if abs(v.x) < 0.9 else Vector3.unit_y()
    u = v.cross(k)
    if u.is_zero():
        u = v.cross(Vector3.unit_z())
    return u.normalize()


def orthonormalize_basis(
    ux: VectorLike,
    uy: VectorLike,
    uz: VectorLike,
    *,
    tolerances: Optional[Tolerances] = None,
    sink: Optional[DiagnosticSink] = None,
) -> OrthonormalBasis:
    """Repair a candidate frame into an orthonormal right-handed basis.

    Gram-Schmidt on ``ux`` then ``uy``; ``uz`` is always recomputed as
    ``ux x uy``. Corrections are reported, never raised.

    Parameters
    ----------
    ux, uy, uz : Vector3 or sequence of 3 floats
        Candidate axes. Only ``ux`` must be non-zero.
    tolerances : Tolerances, optional
        ``basis_alignment`` bounds how far the supplied ``uz`` may deviate
        from ``ux x uy`` before it is reported as replaced.
    sink : callable, optional
        Receives ``basis_uy_colinear``, ``basis_uz_replaced`` and
        ``basis_repaired`` diagnostics.

    Returns
    -------
    OrthonormalBasis
        ``(ux, uy, uz, repaired)``.

    Raises
    ------
    InvalidValueError
        If ``ux`` is the zero vector.
    """
    op = "orthonormalize_basis"
    tol = tolerances or DEFAULT_TOLERANCES
    ux = as_vector(ux, op, "ux")
    uy = as_vector(uy, op, "uy")
    uz = as_vector(uz, op, "uz")

    ex = _unit(ux)
    if ex.is_zero(tol.degenerate):
        raise InvalidValueError(op, "ux", "must be non-zero")

    # Remove the ex component from uy
    uy_r = _rescaled(uy)
    uy_proj = uy_r - ex * uy_r.dot(ex)
    if uy_proj.is_zero(tol.degenerate):
        emit(
            sink,
            BASIS_UY_COLINEAR,
            op,
            "uy is zero or colinear with ux; substituting an orthogonal axis",
            log=logger,
        )
        uy_proj = orthogonal_fallback(ex)
    ey = uy_proj.normalize()
    # second pass: a nearly colinear uy leaves a residual dominated by rounding
    ey = (ey - ex * ey.dot(ex)).normalize()
    ez = ex.cross(ey).normalize()

    uz_unit = _unit(uz)
    deviation = uz_unit.cross(ez).magnitude()
    if uz_unit.is_zero(tol.degenerate) or deviation > tol.basis_alignment or uz_unit.dot(ez) < 0.0:
        emit(
            sink,
            BASIS_UZ_REPLACED,
            op,
            f"supplied uz is not ux x uy (|uz x ez|={deviation:.3g}); using computed uz",
            log=logger,
            deviation=deviation,
        )

    repaired = not all(
        out.epsilon_equals(given, tol.basis_check) for out, given in ((ex, ux), (ey, uy), (ez, uz))
    )
    if repaired:
        emit(sink, BASIS_REPAIRED, op, "basis adjusted to be orthonormal and right-handed", log=logger)
    return OrthonormalBasis(ex, ey, ez, repaired)


def _check_basis(ux: Vector3, uy: Vector3, uz: Vector3, eps: float) -> bool:
    """Unit length, pairwise orthogonal and ``uz = ux x uy`` within *eps*."""
    for u in (ux, uy, uz):
        if abs(u.magnitude() - 1.0) > eps:
            return False
    if abs(ux.dot(uy)) > eps or abs(uy.dot(uz)) > eps or abs(uz.dot(ux)) > eps:
        return False
    return ux.cross(uy).epsilon_equals(uz, eps)


@dataclass(frozen=True)
class OrientedBox3:
    """A cube with center, edge length and a right-handed orthonormal basis.

    The constructor checks the basis and raises if it is not orthonormal;
    use :meth:`oriented` to build a box from an arbitrary candidate frame.
    """

    center: Vector3
    edge: float
    ux: Vector3 = field(default_factory=Vector3.unit_x)
    uy: Vector3 = field(default_factory=Vector3.unit_y)
    uz: Vector3 = field(default_factory=Vector3.unit_z)

    def __post_init__(self) -> None:
        op = "OrientedBox3"
        object.__setattr__(self, "center", as_vector(self.center, op, "center"))
        object.__setattr__(self, "edge", require_positive(self.edge, op, "edge"))
        for name in ("ux", "uy", "uz"):
            object.__setattr__(self, name, as_vector(getattr(self, name), op, name))
        if not _check_basis(self.ux, self.uy, self.uz, DEFAULT_TOLERANCES.basis_check):
            raise InvalidValueError(
                op, "basis", "must be orthonormal and right-handed; use OrientedBox3.oriented() to repair it"
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, center: VectorLike, edge: float) -> "OrientedBox3":
        """World-aligned cube."""
        op = "OrientedBox3.of"
        center = as_vector(center, op, "center")
        edge = require_positive(edge, op, "edge")
        return cls(center, edge)

    @classmethod
    def oriented(
        cls,
        center: VectorLike,
        edge: float,
        ux: VectorLike,
        uy: VectorLike,
        uz: VectorLike,
        *,
        tolerances: Optional[Tolerances] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "OrientedBox3":
        """Cube with a custom local frame, repaired to be orthonormal and right-handed."""
        op = "OrientedBox3.oriented"
        center = as_vector(center, op, "center")
        edge = require_positive(edge, op, "edge")
        basis = orthonormalize_basis(ux, uy, uz, tolerances=tolerances, sink=sink)
        logger.debug("%s: center=%s, edge=%.6f, repaired=%s", op, center, edge, basis.repaired)
        return cls(center, edge, basis.ux, basis.uy, basis.uz)

    def __repr__(self) -> str:
        return f"OrientedBox3(center={self.center}, edge={self.edge:.6f})"

    @property
    def axes(self) -> Tuple[Vector3, Vector3, Vector3]:
        return (self.ux, self.uy, self.uz)

    @property
    def half_edge(self) -> float:
        return self.edge / 2.0

    # ------------------------------------------------------------------
    # Topology
    # ------------------------------------------------------------------

    def vertices(self) -> Tuple[Vector3, ...]:
        """The 8 corners ``center + h (sx ux + sy uy + sz uz)`` in VERTEX_SIGNS order."""
        h = self.half_edge
        ex, ey, ez = self.ux * h, self.uy * h, self.uz * h
        return tuple(self.center + ex * sx + ey * sy + ez * sz for sx, sy, sz in VERTEX_SIGNS)

    def edges(self) -> Tuple[Segment3, ...]:
        """The 12 edges as segments, in EDGE_TABLE order."""
        v = self.vertices()
        return tuple(Segment3(v[i], v[j]) for i, j in EDGE_TABLE)

    def to_graph(self) -> nx.Graph:
        """Cube topology as a graph.

        Nodes are vertex indices with ``position`` (x, y, z) and ``signs``
        attributes; edges carry their ``length``.
        """
        G = nx.Graph(center=self.center.to_tuple(), edge=self.edge)
        v = self.vertices()
        for idx, (vertex, signs) in enumerate(zip(v, VERTEX_SIGNS)):
            G.add_node(idx, position=vertex.to_tuple(), signs=signs)
        for i, j in EDGE_TABLE:
            G.add_edge(i, j, length=v[i].distance_to(v[j]))
        return G

    def face_centers(self) -> Tuple[Vector3, ...]:
        """Face centers ordered +ux, -ux, +uy, -uy, +uz, -uz."""
        h = self.half_edge
        out = []
        for u in self.axes:
            out.append(self.center + u * h)
            out.append(self.center + u * -h)
        return tuple(out)

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------

    def perimeter_length(self) -> float:
        """Sum of all 12 edge lengths."""
        return 12.0 * self.edge

    def surface_area(self) -> float:
        return 6.0 * self.edge * self.edge

    def volume(self) -> float:
        return self.edge * self.edge * self.edge

    def face_diagonal(self) -> float:
        return self.edge * math.sqrt(2.0)

    def space_diagonal(self) -> float:
        return self.edge * math.sqrt(3.0)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def translate(self, delta: VectorLike) -> "OrientedBox3":
        """Shift the center; the basis is unchanged."""
        delta = as_vector(delta, "OrientedBox3.translate", "delta")
        return OrientedBox3(self.center + delta, self.edge, self.ux, self.uy, self.uz)

    def scale(self, factor: float) -> "OrientedBox3":
        """Scale about the center. Zero or negative factors are rejected."""
        factor = require_positive(factor, "OrientedBox3.scale", "factor")
        return OrientedBox3(self.center, self.edge * factor, self.ux, self.uy, self.uz)

    def _rotated_axes(self, axis: AxisLike, radians: float, sink: Optional[DiagnosticSink]):
        return [u.rotate_around_axis(axis, radians, sink=sink).normalize() for u in self.axes]

    def rotate_around_center(
        self,
        axis: AxisLike,
        radians: float,
        *,
        sink: Optional[DiagnosticSink] = None,
    ) -> "OrientedBox3":
        """Rotate the basis about an axis through the center.

        The rotated frame goes through :func:`orthonormalize_basis` again so
        drift does not accumulate over repeated rotations.
        """
        rux, ruy, ruz = self._rotated_axes(axis, radians, sink)
        return OrientedBox3.oriented(self.center, self.edge, rux, ruy, ruz, sink=sink)

    def rotate_around_origin(
        self,
        axis: AxisLike,
        radians: float,
        *,
        sink: Optional[DiagnosticSink] = None,
    ) -> "OrientedBox3":
        """Rotate center and basis together about an axis through the world origin."""
        center = self.center.rotate_around_axis(axis, radians, sink=sink)
        rux, ruy, ruz = self._rotated_axes(axis, radians, sink)
        logger.debug("OrientedBox3.rotate_around_origin: center %s -> %s", self.center, center)
        return OrientedBox3.oriented(center, self.edge, rux, ruy, ruz, sink=sink)

    def rotate_x(self, radians: float) -> "OrientedBox3":
        return self.rotate_around_center(Axis.X, radians)

    def rotate_y(self, radians: float) -> "OrientedBox3":
        return self.rotate_around_center(Axis.Y, radians)

    def rotate_z(self, radians: float) -> "OrientedBox3":
        return self.rotate_around_center(Axis.Z, radians)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains(self, point: VectorLike, epsilon: float = 0.0) -> bool:
        """True if *point* is inside or on the cube (within *epsilon*).

        Projects ``point - center`` onto each local axis and compares with
        ``edge / 2 + epsilon``.
        """
        op = "OrientedBox3.contains"
        point = as_vector(point, op, "point")
        epsilon = require_epsilon(epsilon, op)
        h = self.half_edge + epsilon
        d = point - self.center
        px, py, pz = d.dot(self.ux), d.dot(self.uy), d.dot(self.uz)
        inside = abs(px) <= h and abs(py) <= h and abs(pz) <= h
        logger.debug("%s: proj=(%.6f, %.6f, %.6f), h=%.6f -> %s", op, px, py, pz, h, inside)
        return inside

    def axis_aligned_bounding_box(self) -> Tuple[Vector3, Vector3]:
        """World-aligned ``(min, max)`` corners enclosing the cube."""
        coords = np.array([v.to_array() for v in self.vertices()])
        return Vector3.from_array(coords.min(axis=0)), Vector3.from_array(coords.max(axis=0))
