import argparse
import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, Optional


def parse_ndjson_lines(path: Path) -> Iterable[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        for ln, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                print(f"WARN: Failed to parse line {ln}: {e}")


def summarize(path: Path, session_filter: Optional[str] = None) -> Dict[str, Any]:
    counts = Counter()
    by_msg = Counter()
    hits_by_channel = Counter()
    hits_by_reason = Counter()
    runs = []
    for rec in parse_ndjson_lines(path):
        if session_filter is not None and rec.get("session_id") != session_filter:
            continue
        counts[rec.get("type")] += 1
        msg = rec.get("msg")
        if msg:
            by_msg[msg] += 1
        data = rec.get("data") if isinstance(rec.get("data"), dict) else {}
        if msg == "hit_end":
            hits_by_channel[data.get("channel")] += 1
            hits_by_reason[data.get("reason")] += 1
        elif msg == "run_summary":
            runs.append(data)
    return {
        "counts": dict(counts),
        "by_msg": dict(by_msg),
        "hits_by_channel": dict(hits_by_channel),
        "hits_by_reason": dict(hits_by_reason),
        "runs": runs,
    }


def print_summary(path: Path, s: Dict[str, Any]) -> None:
    print(f"File: {path}")
    print("Counts by type:")
    for k in sorted(s["counts"], key=str):
        print(f"  {k}: {s['counts'][k]}")
    if s["hits_by_channel"]:
        print("Closed hits by channel (debug traces):")
        for k in sorted(s["hits_by_channel"], key=str):
            print(f"  ch{k}: {s['hits_by_channel'][k]}")
        print("Closed hits by reason:")
        for k, v in Counter(s["hits_by_reason"]).most_common():
            print(f"  {k}: {v}")
    for r in s["runs"]:
        print(f"run: {r.get('samples')} samples, {r.get('hits')} hits, {r.get('dropped')} dropped"
              f"{' (stopped)' if r.get('stopped') else ''}")


def main() -> None:
    ap = argparse.ArgumentParser(description="Summarize hitproc NDJSON event logs")
    ap.add_argument("path", type=Path, help="Path to hitproc_YYYYMMDD_HHMMSS.ndjson")
    ap.add_argument("--session", type=str, default=None, help="Only include records with this session_id")
    args = ap.parse_args()
    print_summary(args.path, summarize(args.path, session_filter=args.session))


if __name__ == "__main__":
    main()
