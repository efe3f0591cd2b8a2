import logging
from typing import List, Optional, Tuple, Union

from .box import EDGE_TABLE, OrientedBox3
from .diagnostics import Diagnostic
from .errors import InvalidValueError
from .segment import ClosestPoints, Segment3
from .vector import Axis, Vector3


def configure_debug_logging(level: int = logging.DEBUG) -> logging.Handler:
    """Send xyzprim log records to stderr. Returns the attached handler."""
    pkg_logger = logging.getLogger("xyzprim")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s: %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    return handler


def _parse_vector(text: str) -> Vector3:
    """Parse ``"x,y,z"`` into a Vector3."""
    parts = [p for p in text.replace(" ", "").split(",") if p]
    if len(parts) != 3:
        raise InvalidValueError("parse_vector", "text", f"expected 'x,y,z', got {text!r}")
    try:
        values = [float(p) for p in parts]
    except ValueError as e:
        raise InvalidValueError("parse_vector", "text", f"invalid number in {text!r}") from e
    return Vector3.from_array(values)


def _parse_segment(text: str) -> Segment3:
    """Parse ``"x0,y0,z0:x1,y1,z1"`` into a Segment3."""
    ends = text.split(":")
    if len(ends) != 2:
        raise InvalidValueError("parse_segment", "text", f"expected 'x0,y0,z0:x1,y1,z1', got {text!r}")
    return Segment3(_parse_vector(ends[0]), _parse_vector(ends[1]))


def _parse_rotation(text: str) -> Tuple[Union[Axis, Vector3], float]:
    """Parse ``"axis:radians"`` where axis is x, y, z or a vector ``"ax,ay,az"``."""
    axis, sep, angle = text.rpartition(":")
    if not sep or not axis:
        raise InvalidValueError("parse_rotation", "text", f"expected 'axis:radians', got {text!r}")
    try:
        radians = float(angle)
    except ValueError as e:
        raise InvalidValueError("parse_rotation", "text", f"invalid angle in {text!r}") from e
    if "," in axis:
        return _parse_vector(axis), radians
    return Axis.parse(axis, "parse_rotation"), radians


def _fmt(v: Vector3) -> str:
    return f"({v.x:>10.6f}, {v.y:>10.6f}, {v.z:>10.6f})"


# -----------------------------
# Text and dict representations
# -----------------------------
def box_report(box: OrientedBox3) -> str:
    """Tabular listing of a box: frame, measures, vertices, edges, faces, AABB."""
    lines = []
    lines.append(f"# OrientedBox3: center={_fmt(box.center)}  edge={box.edge:.6f}")
    lines.append(f"# ux={_fmt(box.ux)}")
    lines.append(f"# uy={_fmt(box.uy)}")
    lines.append(f"# uz={_fmt(box.uz)}")
    lines.append(
        f"# volume={box.volume():.6f}  surface_area={box.surface_area():.6f}  "
        f"perimeter={box.perimeter_length():.6f}"
    )
    lines.append(f"# face_diagonal={box.face_diagonal():.6f}  space_diagonal={box.space_diagonal():.6f}")
    lines.append("")
    lines.append("# Vertices [idx] (x, y, z)")
    for idx, v in enumerate(box.vertices()):
        lines.append(f"[{idx}] {_fmt(v)}")
    lines.append("")
    lines.append("# Edges [i-j]: length")
    for (i, j), seg in zip(EDGE_TABLE, box.edges()):
        lines.append(f"[{i}-{j}]: {seg.length():.6f}")
    lines.append("")
    lines.append("# Face centers (+ux, -ux, +uy, -uy, +uz, -uz)")
    for c in box.face_centers():
        lines.append(_fmt(c))
    lo, hi = box.axis_aligned_bounding_box()
    lines.append("")
    lines.append(f"# AABB min={_fmt(lo)}")
    lines.append(f"# AABB max={_fmt(hi)}")
    return "\n".join(lines)


def box_to_dict(box: OrientedBox3) -> dict:
    """JSON-serialisable description of a box."""
    lo, hi = box.axis_aligned_bounding_box()
    return {
        "center": list(box.center.to_tuple()),
        "edge": box.edge,
        "axes": [list(u.to_tuple()) for u in box.axes],
        "vertices": [list(v.to_tuple()) for v in box.vertices()],
        "edges": [list(e) for e in EDGE_TABLE],
        "face_centers": [list(c.to_tuple()) for c in box.face_centers()],
        "aabb": {"min": list(lo.to_tuple()), "max": list(hi.to_tuple())},
        "volume": box.volume(),
        "surface_area": box.surface_area(),
    }


def closest_points_report(a: Segment3, b: Segment3, cp: Optional[ClosestPoints] = None) -> str:
    """One-block summary of the closest pair between two segments."""
    cp = cp or a.closest_points_on_segments(b)
    lines = [
        f"# Segments {a} | {b}",
        f"closest on A (s={cp.s:.6f}): {_fmt(cp.point_a)}",
        f"closest on B (t={cp.t:.6f}): {_fmt(cp.point_b)}",
        f"distance={cp.distance:.6f}  parallel={a.is_parallel_to(b)}  line_distance={a.distance_to_infinite_line(b):.6f}",
    ]
    return "\n".join(lines)


def diagnostics_report(records: List[Diagnostic]) -> str:
    if not records:
        return "# Diagnostics: none"
    lines = [f"# Diagnostics: {len(records)}"]
    for d in records:
        lines.append(f"[{d.code}] {d.operation}: {d.message}")
    return "\n".join(lines)
