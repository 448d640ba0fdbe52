from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .integrate import triangle_integral


class TerminationReason(str, Enum):
    BELOW_THRESHOLD = "BELOW_THRESHOLD"
    MAX_DURATION = "MAX_DURATION"
    # only emitted when open hits are flushed at end of stream
    STREAM_END = "STREAM_END"


@dataclass(frozen=True)
class Hit:
    channel: int
    # threshold crossing minus pre-trigger; may be negative near stream start
    start: int
    end: int
    peak: int
    integral: float
    reason: TerminationReason

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class DetectorParams:
    start_thresh: int = 1000
    end_thresh: int = 500
    # samples the recorded start is moved ahead of the crossing
    pre_trigger: int = 0
    # longest allowed hit, in sample-index steps from the crossing
    max_duration: int = 1_000_000
    # consecutive samples below end_thresh needed to close a hit
    end_hold: int = 1


class HitStateMachine:
    """Threshold + hysteresis hit detector for a single channel.

    Feed calibrated samples with their global sample index. A hit opens when a
    sample exceeds `start_thresh` and closes when the signal stays below
    `end_thresh` for `end_hold` samples, or when it has been open for
    `max_duration` samples. Max duration wins when both fire on one sample.
    """

    def __init__(self, channel: int, p: DetectorParams):
        self.channel = channel
        self.p = p
        self.state = "idle"
        self.start_index = 0
        self.running_max = 0
        self.running_integral = 0.0
        self.last_sample = 0
        self.below_count = 0
        self.last_index: Optional[int] = None

    @property
    def open(self) -> bool:
        return self.state == "active"

    def _close(self, index: int, reason: TerminationReason) -> Hit:
        hit = Hit(
            channel=self.channel,
            start=self.start_index - self.p.pre_trigger,
            end=index,
            peak=self.running_max,
            integral=self.running_integral,
            reason=reason,
        )
        self.state = "idle"
        self.below_count = 0
        return hit

    def feed(self, sample: int, index: int) -> Optional[Hit]:
        self.last_index = index

        if self.state == "idle":
            if sample > self.p.start_thresh:
                self.state = "active"
                self.start_index = index
                self.running_max = 0
                self.running_integral = 0.0
                self.last_sample = sample
                self.below_count = 0
            return None

        self.running_integral += triangle_integral(self.last_sample, sample)
        if sample > self.running_max:
            self.running_max = sample
        self.last_sample = sample

        if sample < self.p.end_thresh:
            self.below_count += 1
        else:
            self.below_count = 0

        if index - self.start_index >= self.p.max_duration:
            return self._close(index, TerminationReason.MAX_DURATION)
        if self.below_count >= self.p.end_hold:
            return self._close(index, TerminationReason.BELOW_THRESHOLD)
        return None

    def flush(self) -> Optional[Hit]:
        """Close an open hit at the last index seen, e.g. at end of stream."""
        if self.state != "active" or self.last_index is None:
            return None
        return self._close(self.last_index, TerminationReason.STREAM_END)
