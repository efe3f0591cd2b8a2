"""Type-safe numerical tolerances for the geometry core.

The defaults are the thresholds the closest-point and basis-repair
routines are tuned against; changing them shifts which inputs count as
degenerate or parallel.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Tolerances:
    """Thresholds for degeneracy checks and basis repair."""

    degenerate: float = 1e-12
    """Squared lengths, cross-product norms and components below this are zero."""

    unit_axis: float = 1e-12
    """Rotation axes with |length - 1| above this are renormalized."""

    basis_alignment: float = 1e-6
    """Max |uz x computed_uz| (unit vectors) before a supplied uz is replaced."""

    basis_check: float = 1e-9
    """Max deviation from orthonormality accepted by the OrientedBox3 constructor."""

    @classmethod
    def relaxed(cls) -> "Tolerances":
        """Permissive thresholds for noisy frames (e.g. measured orientations)."""
        return cls(basis_alignment=1e-3)

    @classmethod
    def strict(cls) -> "Tolerances":
        """Default thresholds. For explicit intent."""
        return cls()


DEFAULT_TOLERANCES = Tolerances()
