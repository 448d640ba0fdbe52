from __future__ import annotations
from typing import List, Sequence


def calibrate(raw: int, offset: int) -> int:
    """Subtract the channel baseline, flooring at zero."""
    if raw < offset:
        return 0
    return raw - offset


class ChannelCalibrator:
    """Holds the static zero offset of every channel."""

    def __init__(self, offsets: Sequence[int]):
        self.offsets: List[int] = [int(o) for o in offsets]

    @property
    def channels(self) -> int:
        return len(self.offsets)

    def apply(self, channel: int, raw: int) -> int:
        return calibrate(raw, self.offsets[channel])
