"""Advisory diagnostics for numerical fallbacks.

Operations that silently degrade (zero-vector normalization, degenerate
segments, basis repair, extrapolated parameters) report what happened
through an optional *sink*: any callable accepting a :class:`Diagnostic`.
Sinks observe only; results never depend on them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)

ZERO_SCALE = "zero_scale"
DEGENERATE_VECTOR = "degenerate_vector"
AXIS_RENORMALIZED = "axis_renormalized"
EXTRAPOLATION = "extrapolation"
DEGENERATE_SEGMENT = "degenerate_segment"
BASIS_UY_COLINEAR = "basis_uy_colinear"
BASIS_UZ_REPLACED = "basis_uz_replaced"
BASIS_REPAIRED = "basis_repaired"

DIAGNOSTIC_CODES = [
    ZERO_SCALE,
    DEGENERATE_VECTOR,
    AXIS_RENORMALIZED,
    EXTRAPOLATION,
    DEGENERATE_SEGMENT,
    BASIS_UY_COLINEAR,
    BASIS_UZ_REPLACED,
    BASIS_REPAIRED,
]


@dataclass(frozen=True)
class Diagnostic:
    """A single advisory event."""

    code: str  # one of DIAGNOSTIC_CODES
    operation: str  # e.g. "Vector3.normalize"
    message: str
    details: dict[str, Any] = field(default_factory=dict, compare=False)


DiagnosticSink = Callable[[Diagnostic], None]


def emit(
    sink: Optional[DiagnosticSink],
    code: str,
    operation: str,
    message: str,
    *,
    log: logging.Logger = logger,
    **details: Any,
) -> Diagnostic:
    """Build a Diagnostic, write it to *log* at DEBUG and forward it to *sink*."""
    diagnostic = Diagnostic(code=code, operation=operation, message=message, details=details)
    log.debug("%s [%s]: %s", operation, code, message)
    if sink is not None:
        sink(diagnostic)
    return diagnostic


class DiagnosticLog:
    """Collecting sink. Pass an instance wherever a ``sink`` is accepted.

    Examples
    --------
    >>> from xyzprim import Vector3
    >>> log = DiagnosticLog()
    >>> _ = Vector3.zero().normalize(sink=log)
    >>> log.codes()
    ['degenerate_vector']
    """

    def __init__(self) -> None:
        self.records: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.records.append(diagnostic)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.records)

    def codes(self) -> list[str]:
        """Codes in emission order."""
        return [d.code for d in self.records]

    def has(self, code: str) -> bool:
        return any(d.code == code for d in self.records)

    def clear(self) -> None:
        self.records.clear()
