"""Immutable 3D point/vector.

Components are always finite floats; every operation returns a new
instance. Angles are radians and rotations are right-handed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .diagnostics import (
    AXIS_RENORMALIZED,
    DEGENERATE_VECTOR,
    EXTRAPOLATION,
    ZERO_SCALE,
    DiagnosticSink,
    emit,
)
from .errors import (
    InvalidAxisError,
    InvalidValueError,
    require_epsilon,
    require_finite,
    require_present,
)
from .parameters import DEFAULT_TOLERANCES

logger = logging.getLogger(__name__)

VectorLike = Union["Vector3", Sequence[float], np.ndarray]
AxisLike = Union["Axis", str, VectorLike]


class Axis(str, Enum):
    """World axis names accepted by the axis rotations."""

    X = "x"
    Y = "y"
    Z = "z"

    @classmethod
    def parse(cls, value: Union["Axis", str], operation: str = "Axis.parse") -> "Axis":
        """Accept an Axis member or one of ``"x"``, ``"y"``, ``"z"`` (any case)."""
        if isinstance(value, Axis):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidAxisError(operation, "axis", f"must be one of x, y, z; got {value!r}")


def _components(values, operation: str, parameter: str) -> Tuple[float, float, float]:
    """Strict length-3 conversion of a sequence or array."""
    require_present(values, operation, parameter)
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(operation, parameter, f"must be a sequence of 3 numbers, got {values!r}") from e
    if arr.shape != (3,):
        raise InvalidValueError(operation, parameter, f"must have exactly 3 elements, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidValueError(operation, parameter, "must contain only finite values")
    return float(arr[0]), float(arr[1]), float(arr[2])


def as_vector(value: VectorLike, operation: str, parameter: str) -> "Vector3":
    """Return *value* as a Vector3, validating plain sequences on the way."""
    require_present(value, operation, parameter)
    if isinstance(value, Vector3):
        return value
    return Vector3(*_components(value, operation, parameter))


@dataclass(frozen=True)
class Vector3:
    """A point or free vector in 3D space.

    Equality is exact component equality. Use :meth:`epsilon_equals` for
    comparisons after floating-point arithmetic.
    """

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            object.__setattr__(self, name, require_finite(getattr(self, name), "Vector3", name))

    # ------------------------------------------------------------------
    # Construction and conversion
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, x: float, y: float, z: float) -> "Vector3":
        return cls(x, y, z)

    @classmethod
    def from_array(cls, values: Union[Sequence[float], np.ndarray]) -> "Vector3":
        """Build from exactly three finite numbers."""
        return cls(*_components(values, "Vector3.from_array", "values"))

    @classmethod
    def zero(cls) -> "Vector3":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit(cls, axis: Union[Axis, str]) -> "Vector3":
        """Unit vector along a world axis."""
        axis = Axis.parse(axis, "Vector3.unit")
        if axis is Axis.X:
            return cls(1.0, 0.0, 0.0)
        if axis is Axis.Y:
            return cls(0.0, 1.0, 0.0)
        return cls(0.0, 0.0, 1.0)

    @classmethod
    def unit_x(cls) -> "Vector3":
        return cls.unit(Axis.X)

    @classmethod
    def unit_y(cls) -> "Vector3":
        return cls.unit(Axis.Y)

    @classmethod
    def unit_z(cls) -> "Vector3":
        return cls.unit(Axis.Z)

    def to_array(self) -> np.ndarray:
        """Return a new float64 array ``[x, y, z]``."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __repr__(self) -> str:
        return f"Vector3({self.x:.6f}, {self.y:.6f}, {self.z:.6f})"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: VectorLike) -> "Vector3":
        other = as_vector(other, "Vector3.add", "other")
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: VectorLike) -> "Vector3":
        other = as_vector(other, "Vector3.subtract", "other")
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def negate(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def scale(self, factor: float, *, sink: Optional[DiagnosticSink] = None) -> "Vector3":
        """Multiply every component by *factor*.

        A factor of 0 is legal and collapses the vector to the origin.
        """
        factor = require_finite(factor, "Vector3.scale", "factor")
        if factor == 0.0:
            emit(sink, ZERO_SCALE, "Vector3.scale", "scaling by 0 collapses the vector to the origin", log=logger)
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def translate(self, dx: float, dy: float, dz: float) -> "Vector3":
        op = "Vector3.translate"
        return Vector3(
            self.x + require_finite(dx, op, "dx"),
            self.y + require_finite(dy, op, "dy"),
            self.z + require_finite(dz, op, "dz"),
        )

    def __add__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: float) -> "Vector3":
        if not isinstance(factor, Real):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return self.negate()

    # ------------------------------------------------------------------
    # Products and metrics
    # ------------------------------------------------------------------

    def dot(self, other: VectorLike) -> float:
        other = as_vector(other, "Vector3.dot", "other")
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: VectorLike) -> "Vector3":
        """Right-handed cross product ``self x other``."""
        other = as_vector(other, "Vector3.cross", "other")
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Euclidean norm. May be ``inf`` when the squared components overflow."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to_origin(self) -> float:
        return self.magnitude()

    def distance_to(self, other: VectorLike) -> float:
        other = as_vector(other, "Vector3.distance_to", "other")
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def is_zero(self, epsilon: float = DEFAULT_TOLERANCES.degenerate) -> bool:
        """True when every component is strictly below *epsilon* in magnitude."""
        return abs(self.x) < epsilon and abs(self.y) < epsilon and abs(self.z) < epsilon

    def normalize(self, *, sink: Optional[DiagnosticSink] = None) -> "Vector3":
        """Unit vector in the same direction.

        Returns ``self`` unchanged when the magnitude is exactly zero or
        not finite; normalization is undefined there and NaNs must not
        leak into later results.
        """
        m = self.magnitude()
        if m == 0.0 or not math.isfinite(m):
            emit(
                sink,
                DEGENERATE_VECTOR,
                "Vector3.normalize",
                f"cannot normalize vector with magnitude {m}; returning it unchanged",
                log=logger,
                magnitude=m,
            )
            return self
        return Vector3(self.x / m, self.y / m, self.z / m)

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------

    def rotate_axis(self, axis: Union[Axis, str], radians: float) -> "Vector3":
        """Rotate about a world axis through the origin.

        Parameters
        ----------
        axis : Axis or str
            ``Axis.X``/``"x"``, ``Axis.Y``/``"y"`` or ``Axis.Z``/``"z"``.
        radians : float
            Rotation angle, right-handed about *axis*.
        """
        op = "Vector3.rotate_axis"
        axis = Axis.parse(axis, op)
        radians = require_finite(radians, op, "radians")
        c = math.cos(radians)
        s = math.sin(radians)
        x, y, z = self.x, self.y, self.z
        if axis is Axis.X:
            return Vector3(x, y * c - z * s, y * s + z * c)
        if axis is Axis.Y:
            return Vector3(x * c + z * s, y, -x * s + z * c)
        return Vector3(x * c - y * s, x * s + y * c, z)

    def rotate_x(self, radians: float) -> "Vector3":
        return self.rotate_axis(Axis.X, radians)

    def rotate_y(self, radians: float) -> "Vector3":
        return self.rotate_axis(Axis.Y, radians)

    def rotate_z(self, radians: float) -> "Vector3":
        return self.rotate_axis(Axis.Z, radians)

    def rotate_around_axis(
        self,
        axis: AxisLike,
        radians: float,
        *,
        sink: Optional[DiagnosticSink] = None,
    ) -> "Vector3":
        """Rotate about an arbitrary axis through the origin (Rodrigues' formula).

        ``v' = v cos(a) + (u x v) sin(a) + u (u . v)(1 - cos(a))``

        Parameters
        ----------
        axis : Vector3, sequence of 3 floats, Axis or str
            Rotation axis. A non-unit axis is renormalized before use and
            reported through *sink*.
        radians : float
            Rotation angle, right-handed about *axis*.
        sink : callable, optional
            Receives an ``axis_renormalized`` diagnostic when applicable.

        Raises
        ------
        InvalidAxisError
            If the axis is zero-length or not finite.
        """
        op = "Vector3.rotate_around_axis"
        ux, uy, uz = _axis_components(axis, op)
        radians = require_finite(radians, op, "radians")

        length = math.sqrt(ux * ux + uy * uy + uz * uz)
        if length == 0.0 or not math.isfinite(length):
            raise InvalidAxisError(op, "axis", "must be finite and non-zero length")
        if abs(length - 1.0) > DEFAULT_TOLERANCES.unit_axis:
            emit(
                sink,
                AXIS_RENORMALIZED,
                op,
                f"axis length {length:.6g} is not 1; normalizing",
                log=logger,
                length=length,
            )
            ux, uy, uz = ux / length, uy / length, uz / length

        c = math.cos(radians)
        s = math.sin(radians)
        x, y, z = self.x, self.y, self.z
        k = (ux * x + uy * y + uz * z) * (1.0 - c)
        return Vector3(
            x * c + (uy * z - uz * y) * s + ux * k,
            y * c + (uz * x - ux * z) * s + uy * k,
            z * c + (ux * y - uy * x) * s + uz * k,
        )

    # ------------------------------------------------------------------
    # Interpolation and comparison
    # ------------------------------------------------------------------

    def lerp(self, other: VectorLike, t: float, *, sink: Optional[DiagnosticSink] = None) -> "Vector3":
        """``self + t (other - self)``. Values of *t* outside [0, 1] extrapolate."""
        op = "Vector3.lerp"
        other = as_vector(other, op, "other")
        t = require_finite(t, op, "t")
        if t < 0.0 or t > 1.0:
            emit(sink, EXTRAPOLATION, op, f"t={t:.6f} outside [0, 1]; extrapolating", log=logger, t=t)
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def midpoint(self, other: VectorLike) -> "Vector3":
        return self.lerp(other, 0.5)

    def epsilon_equals(self, other: VectorLike, epsilon: float) -> bool:
        """Component-wise ``|a - b| <= epsilon`` on all three axes."""
        op = "Vector3.epsilon_equals"
        other = as_vector(other, op, "other")
        epsilon = require_epsilon(epsilon, op)
        return (
            abs(self.x - other.x) <= epsilon
            and abs(self.y - other.y) <= epsilon
            and abs(self.z - other.z) <= epsilon
        )


def _axis_components(axis: AxisLike, operation: str) -> Tuple[float, float, float]:
    """Raw (possibly non-unit) axis components; failures are InvalidAxisError."""
    require_present(axis, operation, "axis")
    if isinstance(axis, Vector3):
        return axis.x, axis.y, axis.z
    if isinstance(axis, str):
        return Vector3.unit(Axis.parse(axis, operation)).to_tuple()
    try:
        return _components(axis, operation, "axis")
    except InvalidValueError as e:
        raise InvalidAxisError(operation, "axis", "must be a finite 3-vector") from e
