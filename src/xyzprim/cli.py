import argparse
import json

from . import __version__
from .box import OrientedBox3
from .diagnostics import DiagnosticLog
from .errors import GeometryError
from .parameters import Tolerances
from .utils import (
    _parse_rotation,
    _parse_segment,
    _parse_vector,
    box_report,
    box_to_dict,
    closest_points_report,
    configure_debug_logging,
    diagnostics_report,
)


def build_box(args, sink=None) -> OrientedBox3:
    """Apply the construction and transform flags in a fixed order.

    scale -> rotations about the center -> rotations about the origin -> translation
    """
    center = _parse_vector(args.center)
    if args.axes:
        ux, uy, uz = (_parse_vector(a) for a in args.axes)
        tolerances = Tolerances.relaxed() if args.relaxed else Tolerances.strict()
        box = OrientedBox3.oriented(center, args.edge, ux, uy, uz, tolerances=tolerances, sink=sink)
    else:
        box = OrientedBox3.of(center, args.edge)

    if args.scale is not None:
        box = box.scale(args.scale)
    for text in args.rotate or []:
        axis, radians = _parse_rotation(text)
        box = box.rotate_around_center(axis, radians, sink=sink)
    for text in args.orbit or []:
        axis, radians = _parse_rotation(text)
        box = box.rotate_around_origin(axis, radians, sink=sink)
    if args.translate:
        box = box.translate(_parse_vector(args.translate))
    return box


def main(argv=None):
    p = argparse.ArgumentParser(
        description="Inspect an oriented cube: vertices, edges, bounding box, containment and segment distances.",
        epilog="Vectors are written x,y,z. Use --flag=-1,0,0 for values starting with a minus sign.",
    )
    p.add_argument("--version", action="store_true",
                   help="Print version information and exit")

    # Construction
    p.add_argument("-c", "--center", default="0,0,0",
                   help="Cube center (default: 0,0,0)")
    p.add_argument("-e", "--edge", type=float, default=1.0,
                   help="Edge length (default: 1.0)")
    p.add_argument("--axes", nargs=3, metavar=("UX", "UY", "UZ"),
                   help="Local frame; repaired to an orthonormal right-handed basis if needed")
    p.add_argument("--relaxed", action="store_true",
                   help="Relaxed mode: accept a supplied uz up to 1e-3 off ux x uy without reporting it")

    # Transforms
    p.add_argument("-s", "--scale", type=float,
                   help="Scale the edge length by this factor (> 0)")
    p.add_argument("-r", "--rotate", action="append", metavar="AXIS:RAD",
                   help="Rotate about an axis through the center. AXIS is x, y, z or ax,ay,az. Repeatable")
    p.add_argument("--orbit", action="append", metavar="AXIS:RAD",
                   help="Rotate about an axis through the world origin. Repeatable")
    p.add_argument("-t", "--translate",
                   help="Translate the center by dx,dy,dz")

    # Queries
    p.add_argument("-p", "--contains", action="append", metavar="X,Y,Z",
                   help="Test whether a point lies inside the cube. Repeatable")
    p.add_argument("--eps", type=float, default=0.0,
                   help="Tolerance for --contains (default: 0.0)")
    p.add_argument("--segments", nargs=2, action="append", metavar=("A", "B"),
                   help="Closest points between two segments written x0,y0,z0:x1,y1,z1. Repeatable")

    # Output control
    p.add_argument("--json", action="store_true",
                   help="Print the cube as JSON instead of the text report")
    p.add_argument("-d", "--debug", action="store_true",
                   help="Enable debug logging and list diagnostics (basis repairs, degenerate inputs)")

    args = p.parse_args(argv)

    if args.version:
        print(f"xyzprim v{__version__}")
        return 0

    if args.debug:
        configure_debug_logging()

    sink = DiagnosticLog()
    try:
        box = build_box(args, sink=sink)
        containment = [(pt, box.contains(_parse_vector(pt), args.eps)) for pt in args.contains or []]
        pairs = [(_parse_segment(a), _parse_segment(b)) for a, b in args.segments or []]
    except GeometryError as e:
        p.error(str(e))

    if args.json:
        print(json.dumps(box_to_dict(box), indent=2))
    else:
        print(box_report(box))

    if containment:
        print(f"\n{'=' * 80}\n# Containment (eps={args.eps})\n{'=' * 80}")
        for pt, inside in containment:
            print(f"{pt}: {'inside' if inside else 'outside'}")

    for a, b in pairs:
        print(f"\n{'=' * 80}")
        print(closest_points_report(a, b, a.closest_points_on_segments(b, sink=sink)))

    if args.debug:
        print(f"\n{diagnostics_report(sink.records)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
