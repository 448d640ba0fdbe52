import json

from hitproc.logs import NdjsonLogger


def _lines(path):
    return [json.loads(l) for l in path.read_text(encoding="utf-8").splitlines() if l.strip()]


def test_records_are_stamped(tmp_path):
    logger = NdjsonLogger(str(tmp_path), "run_smoke")
    logger.event("info", "run_summary", hits=3)
    logger.close()
    files = list(tmp_path.glob("run_smoke_*.ndjson"))
    assert files == [logger.path]
    entry = _lines(logger.path)[0]
    assert entry["msg"] == "run_summary"
    assert entry["data"] == {"hits": 3}
    for key in ("hms", "seq", "schema", "session_id", "pid"):
        assert key in entry
    assert entry["seq"] == 1


def test_regular_mode_filters_debug_unless_whitelisted(tmp_path):
    logger = NdjsonLogger(str(tmp_path), "run", mode="regular", verbose_whitelist=["hit_end"])
    logger.event("debug", "hit_start", channel=0)
    logger.event("debug", "hit_end", channel=0)
    logger.event("warn", "registry_full", capacity=1)
    logger.close()
    assert [r["msg"] for r in _lines(logger.path)] == ["hit_end", "registry_full"]


def test_dual_file_keeps_everything_in_debug(tmp_path):
    with NdjsonLogger(str(tmp_path), "run", dual_file=True, mode="regular", verbose_whitelist=[]) as logger:
        logger.event("info", "op_info", a=1)
        logger.event("debug", "op_debug", a=2)
    assert [r["msg"] for r in _lines(logger.path)] == ["op_info"]
    assert logger.debug_path.parent == tmp_path / "debug"
    assert [r["msg"] for r in _lines(logger.debug_path)] == ["op_info", "op_debug"]
