from __future__ import annotations
from enum import Enum
from typing import Iterator, List

from .detector import Hit


class AppendResult(str, Enum):
    ACCEPTED = "ACCEPTED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"


class HitRegistry:
    """Append-only store of finalized hits with a hard capacity.

    Once full, further hits are refused (and counted in `dropped`); nothing is
    ever stored past `capacity`.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = int(capacity)
        self._hits: List[Hit] = []
        self.dropped = 0

    def append(self, hit: Hit) -> AppendResult:
        if len(self._hits) >= self.capacity:
            self.dropped += 1
            return AppendResult.CAPACITY_EXCEEDED
        self._hits.append(hit)
        return AppendResult.ACCEPTED

    @property
    def full(self) -> bool:
        return len(self._hits) >= self.capacity

    @property
    def hits(self) -> List[Hit]:
        return list(self._hits)

    def for_channel(self, channel: int) -> List[Hit]:
        return [h for h in self._hits if h.channel == channel]

    def __len__(self) -> int:
        return len(self._hits)

    def __iter__(self) -> Iterator[Hit]:
        return iter(list(self._hits))
