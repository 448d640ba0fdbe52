import struct
from typing import List, Sequence


def interleave(*channels: Sequence[int]) -> List[int]:
    out: List[int] = []
    for frame in zip(*channels):
        out.extend(frame)
    return out


def pack_u16(samples: Sequence[int], order: str = "<") -> bytes:
    return struct.pack(order + "H" * len(samples), *samples)
