from __future__ import annotations
import yaml
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from .detector import DetectorParams


class ConfigError(ValueError):
    """Raised for settings that must be rejected before processing starts."""


@dataclass
class DetectorCfg:
    start_thresh: int = 1000
    end_thresh: int = 500
    pre_trigger: int = 0
    # in sample-index steps (one step per channel frame)
    max_duration: int = 1_000_000
    end_hold: int = 1

    def params(self) -> DetectorParams:
        return DetectorParams(**self.__dict__)


@dataclass
class StreamCfg:
    channels: int = 2
    # per-channel baseline, indexed by channel id
    zero_offsets: List[int] = field(default_factory=lambda: [0, 0])
    # samples per block, across all channels
    block_size: int = 1024
    sample_width: int = 2
    byte_order: str = "little"
    # emit hits still open at end of stream with reason STREAM_END
    flush_open: bool = False


@dataclass
class RegistryCfg:
    capacity: int = 100


@dataclass
class ReportCfg:
    sample_rate: float = 2_000_000.0
    volts_per_count: float = 0.0012


@dataclass
class LoggingCfg:
    # None disables the NDJSON event log
    dir: Optional[str] = None
    file_prefix: str = "hitproc"
    # 'regular' keeps per-hit debug traces out of the main file; 'verbose' keeps all
    mode: str = "regular"
    verbose_whitelist: Optional[List[str]] = None
    dual_file: bool = False
    debug_subdir: Optional[str] = "debug"


@dataclass
class AppCfg:
    detector: DetectorCfg = field(default_factory=DetectorCfg)
    stream: StreamCfg = field(default_factory=StreamCfg)
    registry: RegistryCfg = field(default_factory=RegistryCfg)
    report: ReportCfg = field(default_factory=ReportCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)

    def validate(self) -> "AppCfg":
        d, s = self.detector, self.stream
        if d.start_thresh <= 0:
            raise ConfigError("start threshold must be more than 0")
        if d.end_thresh <= 0:
            raise ConfigError("end threshold must be more than 0")
        if d.pre_trigger < 0:
            raise ConfigError("pre-trigger sample count must not be negative")
        if d.max_duration <= 0:
            raise ConfigError("max duration must be more than 0")
        if d.end_hold < 1:
            raise ConfigError("end hold must be at least 1 sample")
        if s.channels < 1:
            raise ConfigError("channel count must be at least 1")
        if len(s.zero_offsets) != s.channels:
            raise ConfigError(f"expected {s.channels} zero offsets, got {len(s.zero_offsets)}")
        if s.block_size <= 0 or s.block_size % s.channels != 0:
            raise ConfigError(f"samples_to_read must be a positive multiple of {s.channels}")
        if s.sample_width not in (1, 2, 4):
            raise ConfigError(f"unsupported sample width: {s.sample_width}")
        if s.byte_order not in ("little", "big"):
            raise ConfigError(f"unsupported byte order: {s.byte_order}")
        if self.registry.capacity <= 0:
            raise ConfigError("registry capacity must be more than 0")
        return self


def _as_int(d: Dict[str, Any], key: str, default: int) -> int:
    v = d.get(key, default)
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {v!r}")


def _as_float(d: Dict[str, Any], key: str, default: float) -> float:
    v = d.get(key, default)
    try:
        return float(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {v!r}")


def _as_bool(d: Dict[str, Any], key: str, default: bool) -> bool:
    v = d.get(key, default)
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)


def config_from_dict(raw: Optional[Dict[str, Any]]) -> AppCfg:
    raw = raw or {}
    # Coerce numeric fields so YAML/ENV strings don't leak into the detector
    det_raw = dict(raw.get("detector") or {})
    det = DetectorCfg(
        start_thresh=_as_int(det_raw, "start_thresh", DetectorCfg.start_thresh),
        end_thresh=_as_int(det_raw, "end_thresh", DetectorCfg.end_thresh),
        pre_trigger=_as_int(det_raw, "pre_trigger", DetectorCfg.pre_trigger),
        max_duration=_as_int(det_raw, "max_duration", DetectorCfg.max_duration),
        end_hold=_as_int(det_raw, "end_hold", DetectorCfg.end_hold),
    )

    st_raw = dict(raw.get("stream") or {})
    channels = _as_int(st_raw, "channels", StreamCfg.channels)
    offsets_raw = st_raw.get("zero_offsets")
    if offsets_raw is None:
        offsets = [0] * channels
    else:
        try:
            offsets = [int(o) for o in offsets_raw]
        except (TypeError, ValueError):
            raise ConfigError(f"zero_offsets must be a list of integers, got {offsets_raw!r}")
    stream = StreamCfg(
        channels=channels,
        zero_offsets=offsets,
        block_size=_as_int(st_raw, "block_size", StreamCfg.block_size),
        sample_width=_as_int(st_raw, "sample_width", StreamCfg.sample_width),
        byte_order=str(st_raw.get("byte_order", StreamCfg.byte_order)),
        flush_open=_as_bool(st_raw, "flush_open", StreamCfg.flush_open),
    )

    reg_raw = dict(raw.get("registry") or {})
    reg = RegistryCfg(capacity=_as_int(reg_raw, "capacity", RegistryCfg.capacity))

    rep_raw = dict(raw.get("report") or {})
    rep = ReportCfg(
        sample_rate=_as_float(rep_raw, "sample_rate", ReportCfg.sample_rate),
        volts_per_count=_as_float(rep_raw, "volts_per_count", ReportCfg.volts_per_count),
    )

    log_raw = raw.get("logging") or {}
    if not isinstance(log_raw, dict):
        raise ConfigError(f"logging must be a mapping, got {log_raw!r}")
    unknown = sorted(set(log_raw) - {f.name for f in fields(LoggingCfg)})
    if unknown:
        raise ConfigError(f"unknown logging setting(s): {', '.join(map(str, unknown))}")
    log = LoggingCfg(**log_raw)
    return AppCfg(detector=det, stream=stream, registry=reg, report=rep, logging=log)


def load_config(path: str) -> AppCfg:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}")
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return config_from_dict(raw)
