import io
import json

from conftest import interleave, pack_u16
from hitproc.config import AppCfg
from hitproc.logs import NdjsonLogger
from hitproc.stream import process
from tools.summarize_hits import summarize


def test_summarize_run_log(tmp_path):
    cfg = AppCfg()
    cfg.stream.block_size = 4
    ch0 = [0, 2000, 0, 2000, 0, 0]
    ch1 = [0, 0, 0, 3000, 3000, 0]
    logger = NdjsonLogger(str(tmp_path), "hitproc", mode="verbose")
    process(io.BytesIO(pack_u16(interleave(ch0, ch1))), cfg, logger=logger)
    logger.close()

    s = summarize(logger.path)
    assert s["hits_by_channel"] == {0: 2, 1: 1}
    assert s["hits_by_reason"] == {"BELOW_THRESHOLD": 3}
    assert s["runs"][0]["samples"] == 6
    assert s["counts"]["debug"] == 6


def test_summarize_skips_bad_lines(tmp_path, capsys):
    p = tmp_path / "log.ndjson"
    p.write_text("not json\n" + json.dumps({"type": "info", "msg": "x", "session_id": "a"}) + "\n", encoding="utf-8")
    s = summarize(p, session_filter="a")
    assert s["counts"] == {"info": 1}
    assert "Failed to parse line 1" in capsys.readouterr().out
