"""Tests for parsing helpers and text/dict reports."""

import json
import logging

import pytest

from xyzprim import Axis, DiagnosticLog, InvalidAxisError, InvalidValueError, OrientedBox3, Segment3, Vector3
from xyzprim.utils import (
    _parse_rotation,
    _parse_segment,
    _parse_vector,
    box_report,
    box_to_dict,
    closest_points_report,
    configure_debug_logging,
    diagnostics_report,
)


# ---- Parsing ----


def test_parse_vector():
    assert _parse_vector("1,2,3") == Vector3(1.0, 2.0, 3.0)
    assert _parse_vector(" -1.5, 0 , 2e3") == Vector3(-1.5, 0.0, 2000.0)


@pytest.mark.parametrize("text", ["1,2", "1,2,3,4", "a,b,c", "1,nan,2"])
def test_parse_vector_rejects(text):
    with pytest.raises(InvalidValueError):
        _parse_vector(text)


def test_parse_segment():
    s = _parse_segment("0,0,0:1,1,1")
    assert s == Segment3((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
    with pytest.raises(InvalidValueError):
        _parse_segment("0,0,0")


def test_parse_rotation_named_axis():
    axis, radians = _parse_rotation("Z:1.5")
    assert axis is Axis.Z
    assert radians == 1.5


def test_parse_rotation_vector_axis():
    axis, radians = _parse_rotation("1,1,0:-0.25")
    assert axis == Vector3(1.0, 1.0, 0.0)
    assert radians == -0.25


@pytest.mark.parametrize("text", ["z", ":1.0", "z:fast"])
def test_parse_rotation_rejects(text):
    with pytest.raises(InvalidValueError):
        _parse_rotation(text)


def test_parse_rotation_unknown_axis():
    with pytest.raises(InvalidAxisError):
        _parse_rotation("w:1.0")


# ---- Reports ----


@pytest.fixture
def cube():
    return OrientedBox3.of((0.0, 0.0, 0.0), 2.0)


def test_box_report_lists_everything(cube):
    report = box_report(cube)
    assert "edge=2.000000" in report
    assert "volume=8.000000" in report
    assert "[7]" in report and "[8]" not in report
    assert "[3-7]: 2.000000" in report
    assert "# AABB min=" in report


def test_box_to_dict_is_json(cube):
    data = json.loads(json.dumps(box_to_dict(cube)))
    assert data["edge"] == 2.0
    assert len(data["vertices"]) == 8
    assert len(data["edges"]) == 12
    assert data["vertices"][6] == [1.0, 1.0, 1.0]
    assert data["aabb"] == {"min": [-1.0, -1.0, -1.0], "max": [1.0, 1.0, 1.0]}


def test_closest_points_report():
    a = Segment3((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    b = Segment3((0.5, -1.0, 1.0), (0.5, 1.0, 1.0))
    report = closest_points_report(a, b)
    assert "distance=1.000000" in report
    assert "parallel=False" in report


def test_diagnostics_report():
    assert diagnostics_report([]) == "# Diagnostics: none"
    log = DiagnosticLog()
    Vector3.zero().normalize(sink=log)
    report = diagnostics_report(log.records)
    assert report.startswith("# Diagnostics: 1")
    assert "[degenerate_vector] Vector3.normalize" in report


def test_configure_debug_logging():
    pkg_logger = logging.getLogger("xyzprim")
    handler = configure_debug_logging()
    try:
        assert handler in pkg_logger.handlers
        assert pkg_logger.level == logging.DEBUG
    finally:
        pkg_logger.removeHandler(handler)
        pkg_logger.setLevel(logging.NOTSET)
