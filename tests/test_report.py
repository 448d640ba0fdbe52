import io
import csv

import pytest

from hitproc.config import ReportCfg
from hitproc.detector import Hit, TerminationReason
from hitproc.report import format_hit, hit_to_dict, write_csv


HIT = Hit(1, 2_000_000, 2_000_100, 1000, 4000.0, TerminationReason.MAX_DURATION)


def test_unit_conversion():
    d = hit_to_dict(HIT, ReportCfg())
    assert d["channel"] == 1
    assert d["start_s"] == pytest.approx(1.0)
    assert d["end_s"] == pytest.approx(1.00005)
    assert d["peak_v"] == pytest.approx(1.2)
    assert d["len_us"] == pytest.approx(50.0)
    # counts*samples at 2 MHz: 4000 * 0.0012 / 2 uV*s
    assert d["integral_uvs"] == pytest.approx(2.4)
    assert d["reason"] == "MAX_DURATION"


def test_format_hit_layout():
    text = format_hit(HIT, ReportCfg())
    lines = text.splitlines()
    assert lines[0] == "chan   1"
    assert lines[1] == "start  1(s)"
    assert lines[3] == "max    1.2(v)"
    assert lines[-1] == "reason MAX_DURATION"


def test_write_csv():
    out = io.StringIO()
    assert write_csv([HIT, HIT], ReportCfg(), out) == 2
    rows = list(csv.DictReader(io.StringIO(out.getvalue())))
    assert len(rows) == 2
    assert rows[0]["reason"] == "MAX_DURATION"


def test_length_uses_hit_span():
    assert HIT.length == 100
    cfg = ReportCfg(sample_rate=1_000_000.0)
    assert hit_to_dict(HIT, cfg)["len_us"] == pytest.approx(100.0)
