from __future__ import annotations
import csv
from typing import Any, Dict, IO, Iterable

from .config import ReportCfg
from .detector import Hit

CSV_FIELDS = ["channel", "start_s", "end_s", "peak_v", "len_us", "integral_uvs", "reason"]


def hit_to_dict(hit: Hit, cfg: ReportCfg) -> Dict[str, Any]:
    """Convert sample indices to seconds and counts to volts."""
    start_s = hit.start / cfg.sample_rate
    end_s = hit.end / cfg.sample_rate
    return {
        "channel": hit.channel,
        "start_s": start_s,
        "end_s": end_s,
        "peak_v": hit.peak * cfg.volts_per_count,
        "len_us": 1_000_000 * hit.length / cfg.sample_rate,
        # counts*samples -> V*s -> uV*s
        "integral_uvs": hit.integral * cfg.volts_per_count / cfg.sample_rate * 1e6,
        "reason": hit.reason.value,
    }


def format_hit(hit: Hit, cfg: ReportCfg) -> str:
    d = hit_to_dict(hit, cfg)
    return "\n".join([
        f"chan   {d['channel']}",
        f"start  {d['start_s']:.6g}(s)",
        f"end    {d['end_s']:.6g}(s)",
        f"max    {d['peak_v']:.6g}(v)",
        f"len    {d['len_us']:.6g}(us)",
        f"integ  {d['integral_uvs']:.6g}(uVs)",
        f"reason {d['reason']}",
    ])


def write_csv(hits: Iterable[Hit], cfg: ReportCfg, out: IO[str]) -> int:
    w = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    w.writeheader()
    n = 0
    for hit in hits:
        w.writerow(hit_to_dict(hit, cfg))
        n += 1
    return n
