from importlib.metadata import version
__version__ = version("xyzprim")

# Errors and configuration
from .errors import GeometryError, InvalidAxisError, InvalidValueError, NullInputError
from .parameters import DEFAULT_TOLERANCES, Tolerances
from .diagnostics import Diagnostic, DiagnosticLog, DiagnosticSink

# Primitives (bottom-up: vector -> segment -> box)
from .vector import Axis, Vector3
from .segment import ClosestPoints, Segment3
from .box import OrientedBox3, OrthonormalBasis, orthonormalize_basis

# Utilities
from .utils import box_report, box_to_dict

__all__ = [
    # Primitives
    'Vector3',
    'Axis',
    'Segment3',
    'ClosestPoints',
    'OrientedBox3',
    'OrthonormalBasis',
    'orthonormalize_basis',

    # Errors
    'GeometryError',
    'NullInputError',
    'InvalidValueError',
    'InvalidAxisError',

    # Configuration
    'Tolerances',
    'DEFAULT_TOLERANCES',

    # Diagnostics
    'Diagnostic',
    'DiagnosticLog',
    'DiagnosticSink',

    # Reports
    'box_report',
    'box_to_dict',
]
