from __future__ import annotations
import os, json, time, pathlib, uuid
from typing import IO, Iterable, Optional


class NdjsonLogger:
    """One JSON object per line, written to a time-coded run file.

    Records carry `type` (info/warn/error/debug), `msg` and `data`; the logger
    stamps `hms`, `seq`, `schema`, `session_id` and `pid`. In 'regular' mode
    debug records are kept out of the main file unless their `msg` is
    whitelisted. With `dual_file` every record also goes to a debug file under
    `debug_subdir`.
    """

    SCHEMA = "hitproc.v1"

    def __init__(self, directory: str, file_prefix: str, *, dual_file: bool = False,
                 debug_subdir: Optional[str] = None, mode: Optional[str] = None,
                 verbose_whitelist: Optional[Iterable[str]] = None):
        self.dir = pathlib.Path(directory)
        self.dir.mkdir(parents=True, exist_ok=True)
        self.prefix = file_prefix
        self.dual_file = bool(dual_file)
        self.debug_subdir = debug_subdir or "debug"
        self.mode: str = mode or os.getenv("LOG_MODE", "regular")
        # Comma-separated env var, or passed in from LoggingCfg
        if verbose_whitelist is None:
            wl = os.getenv("LOG_VERBOSE_WHITELIST", "")
            verbose_whitelist = [s.strip() for s in wl.split(",") if s.strip()]
        self.verbose_whitelist = set(verbose_whitelist)
        self.session_id: str = os.getenv("SESSION_ID") or uuid.uuid4().hex[:12]
        self.pid: int = os.getpid()
        self.seq = 0
        self._fh: Optional[IO[str]] = None
        self._debug_fh: Optional[IO[str]] = None
        self.path: Optional[pathlib.Path] = None
        self.debug_path: Optional[pathlib.Path] = None
        self._open()

    def _open(self):
        # e.g. hitproc_YYYYMMDD_HHMMSS.ndjson
        stamp = time.strftime("%Y%m%d_%H%M%S", time.localtime())
        self.path = self.dir / f"{self.prefix}_{stamp}.ndjson"
        self._fh = open(self.path, "a", buffering=1, encoding="utf-8")
        if self.dual_file:
            debug_dir = self.dir / self.debug_subdir
            debug_dir.mkdir(parents=True, exist_ok=True)
            self.debug_path = debug_dir / f"{self.prefix}_debug_{stamp}.ndjson"
            self._debug_fh = open(self.debug_path, "a", buffering=1, encoding="utf-8")

    def _keep_in_main(self, obj: dict) -> bool:
        if self.mode != "regular":
            return True
        if obj.get("type") != "debug":
            return True
        return obj.get("msg") in self.verbose_whitelist

    def write(self, obj: dict):
        self.seq += 1
        now = time.time()
        msec = int((now % 1.0) * 1000)
        obj.setdefault("hms", time.strftime("%H:%M:%S", time.localtime(now)) + f".{msec:03d}")
        obj.setdefault("seq", self.seq)
        obj.setdefault("schema", self.SCHEMA)
        obj.setdefault("session_id", self.session_id)
        obj.setdefault("pid", self.pid)
        line = json.dumps(obj) + "\n"

        if self._debug_fh:
            self._debug_fh.write(line)
        if self._fh and self._keep_in_main(obj):
            self._fh.write(line)

    def event(self, typ: str, msg: str, **data):
        self.write({"type": typ, "msg": msg, "data": data})

    def close(self):
        for fh in (self._fh, self._debug_fh):
            if fh:
                fh.close()
        self._fh = None
        self._debug_fh = None

    def __enter__(self) -> "NdjsonLogger":
        return self

    def __exit__(self, *exc):
        self.close()
