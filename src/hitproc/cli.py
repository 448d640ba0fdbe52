from __future__ import annotations
import argparse, signal, sys, threading
from typing import List, Optional

from .config import AppCfg, ConfigError, load_config
from .logs import NdjsonLogger
from .report import format_hit, write_csv
from .stream import HitProcessor


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hitproc", description="Find hits in an interleaved digitizer sample stream")
    ap.add_argument("--config", help="YAML config file; flags below override it")
    ap.add_argument("-0", dest="chan0_zero", type=int, help="channel 0 offset")
    ap.add_argument("-1", dest="chan1_zero", type=int, help="channel 1 offset")
    ap.add_argument("-s", dest="start_thresh", type=int, help="start thresh")
    ap.add_argument("-e", dest="end_thresh", type=int, help="end thresh")
    ap.add_argument("-p", dest="pre_trigger", type=int, help="number of samples hit starts before threshold")
    ap.add_argument("-m", dest="max_duration", type=int, help="maximum hit length in samples")
    ap.add_argument("-i", dest="filename", default="-", help="filename ('-' reads stdin)")
    ap.add_argument("-b", dest="block_size", type=int, help="samples to read per block")
    ap.add_argument("-c", dest="capacity", type=int, help="maximum number of hits kept")
    ap.add_argument("--hold", dest="end_hold", type=int, help="samples below end thresh needed to end a hit")
    ap.add_argument("--flush-open", action="store_true", default=None, help="report hits still open at end of stream")
    ap.add_argument("--csv", help="also write hits as CSV to this path")
    ap.add_argument("--log-dir", help="write an NDJSON event log to this directory")
    ap.add_argument("--verbose", action="store_true", help="keep per-hit debug traces in the event log")
    return ap


def apply_overrides(cfg: AppCfg, args: argparse.Namespace) -> AppCfg:
    det, st = cfg.detector, cfg.stream
    for key in ("start_thresh", "end_thresh", "pre_trigger", "max_duration", "end_hold"):
        val = getattr(args, key)
        if val is not None:
            setattr(det, key, val)
    for ch, key in ((0, "chan0_zero"), (1, "chan1_zero")):
        val = getattr(args, key)
        if val is None:
            continue
        if ch >= len(st.zero_offsets):
            raise ConfigError(f"channel {ch} offset given but stream has {st.channels} channel(s)")
        st.zero_offsets[ch] = val
    if args.block_size is not None:
        st.block_size = args.block_size
    if args.flush_open:
        st.flush_open = True
    if args.capacity is not None:
        cfg.registry.capacity = args.capacity
    if args.log_dir:
        cfg.logging.dir = args.log_dir
    if args.verbose:
        cfg.logging.mode = "verbose"
    return cfg


def _make_logger(cfg: AppCfg) -> Optional[NdjsonLogger]:
    lc = cfg.logging
    if not lc.dir:
        return None
    return NdjsonLogger(lc.dir, lc.file_prefix, dual_file=lc.dual_file, debug_subdir=lc.debug_subdir,
                        mode=lc.mode, verbose_whitelist=lc.verbose_whitelist)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        cfg = load_config(args.config) if args.config else AppCfg()
        apply_overrides(cfg, args).validate()
    except ConfigError as e:
        print(f"\n{e}\n", file=sys.stderr)
        ap.print_usage(sys.stderr)
        return 2

    # Ctrl-C / SIGTERM only ask the loop to stop after the current block
    stop = threading.Event()

    def _stop(*_a):
        stop.set()

    try:
        logger = _make_logger(cfg)
    except OSError as e:
        print(f"Unable to open log directory: {e}", file=sys.stderr)
        return 1

    prev_int = signal.signal(signal.SIGINT, _stop)
    prev_term = signal.signal(signal.SIGTERM, _stop)
    try:
        proc = HitProcessor(cfg, logger)
        if args.filename != "-":
            try:
                fh = open(args.filename, "rb")
            except OSError as e:
                print(f"Unable to open file: {e}", file=sys.stderr)
                return 1
            with fh:
                result = proc.process(fh, stop)
        else:
            print("reading from stdin")
            result = proc.process(sys.stdin.buffer, stop)
    finally:
        signal.signal(signal.SIGINT, prev_int)
        signal.signal(signal.SIGTERM, prev_term)
        if logger is not None:
            logger.close()

    print(f"finished reading {result.samples} records")
    if result.dropped:
        print(f"ran out of hits: {result.dropped} dropped after {cfg.registry.capacity}")
    print(f"found {len(result.registry)} hits:")
    for hit in result.hits:
        print(format_hit(hit, cfg.report))
    if args.csv:
        with open(args.csv, "w", newline="", encoding="utf-8") as out:
            write_csv(result.hits, cfg.report, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
