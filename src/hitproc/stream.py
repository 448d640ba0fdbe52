from __future__ import annotations
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Protocol

from .calibration import ChannelCalibrator
from .config import AppCfg
from .decoder import SampleDecoder
from .detector import Hit, HitStateMachine
from .logs import NdjsonLogger
from .registry import AppendResult, HitRegistry


class StopFlag(Protocol):
    def is_set(self) -> bool: ...


@dataclass
class RunResult:
    registry: HitRegistry
    # global sample index reached (one step per channel frame)
    samples: int
    blocks: int
    truncated_bytes: int
    stopped: bool

    @property
    def hits(self) -> List[Hit]:
        return self.registry.hits

    @property
    def dropped(self) -> int:
        return self.registry.dropped


class HitProcessor:
    """Drives the per-channel hit detectors over an interleaved sample stream."""

    def __init__(self, cfg: AppCfg, logger: Optional[NdjsonLogger] = None):
        self.cfg = cfg.validate()
        self.logger = logger
        st = cfg.stream
        self.channels = st.channels
        self.calibrator = ChannelCalibrator(st.zero_offsets)
        params = cfg.detector.params()
        self.detectors = [HitStateMachine(ch, params) for ch in range(self.channels)]
        self.registry = HitRegistry(cfg.registry.capacity)
        self.sample_number = 0
        self._warned_full = False

    def _log(self, typ: str, msg: str, **data):
        if self.logger is not None:
            self.logger.event(typ, msg, **data)

    def _store(self, hit: Hit):
        self._log("debug", "hit_end", channel=hit.channel, index=hit.end,
                  peak=hit.peak, reason=hit.reason.value)
        if self.registry.append(hit) is AppendResult.CAPACITY_EXCEEDED:
            if not self._warned_full:
                self._warned_full = True
                self._log("warn", "registry_full", capacity=self.registry.capacity, index=hit.end)

    def feed_block(self, block) -> None:
        channels = self.channels
        for pos, raw in enumerate(block):
            channel = pos % channels
            sample = self.calibrator.apply(channel, raw)
            det = self.detectors[channel]
            was_open = det.open
            hit = det.feed(sample, self.sample_number)
            if hit is not None:
                self._store(hit)
            elif det.open and not was_open:
                self._log("debug", "hit_start", channel=channel, index=self.sample_number, val=sample)
            # only advance once the whole channel frame is consumed
            if channel == channels - 1:
                self.sample_number += 1

    def flush(self) -> None:
        for det in self.detectors:
            hit = det.flush()
            if hit is not None:
                self._store(hit)

    def process(self, stream: BinaryIO, stop: Optional[StopFlag] = None) -> RunResult:
        st = self.cfg.stream
        decoder = SampleDecoder(stream, st.block_size, st.sample_width, st.byte_order)
        blocks = 0
        stopped = False
        while True:
            if stop is not None and stop.is_set():
                stopped = True
                break
            block = decoder.read_block()
            if block is None:
                break
            self.feed_block(block)
            blocks += 1

        open_channels = [d.channel for d in self.detectors if d.open]
        if st.flush_open:
            self.flush()
        elif open_channels:
            self._log("info", "open_hits_discarded", channels=open_channels)

        result = RunResult(
            registry=self.registry,
            samples=self.sample_number,
            blocks=blocks,
            truncated_bytes=decoder.truncated_bytes,
            stopped=stopped,
        )
        self._log("info", "run_summary", samples=result.samples, blocks=blocks,
                  hits=len(self.registry), dropped=self.registry.dropped,
                  truncated_bytes=result.truncated_bytes, stopped=stopped)
        return result


def process(stream: BinaryIO, cfg: AppCfg, stop: Optional[StopFlag] = None,
            logger: Optional[NdjsonLogger] = None) -> RunResult:
    return HitProcessor(cfg, logger).process(stream, stop)
