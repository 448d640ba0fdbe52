import io
import struct

import pytest

from hitproc.decoder import SampleDecoder


class TrickleStream:
    """Returns at most one byte per read, like a slow pipe."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def read(self, n: int) -> bytes:
        return self._buf.read(min(n, 1))


def test_reads_full_blocks_and_discards_remainder():
    data = struct.pack("<6H", 1, 2, 3, 4, 5, 6) + b"\x07\x00\x08"
    dec = SampleDecoder(io.BytesIO(data), 4)
    assert dec.read_block() == (1, 2, 3, 4)
    assert dec.read_block() is None
    assert dec.truncated_bytes == 2 * 2 + 3
    assert dec.read_block() is None


def test_iteration_and_partial_reads():
    data = struct.pack("<8H", *range(8))
    blocks = list(SampleDecoder(TrickleStream(data), 4))
    assert blocks == [(0, 1, 2, 3), (4, 5, 6, 7)]


def test_big_endian_and_widths():
    data = struct.pack(">2H", 0x0102, 0xFFFF)
    assert SampleDecoder(io.BytesIO(data), 2, byte_order="big").read_block() == (0x0102, 0xFFFF)
    assert SampleDecoder(io.BytesIO(b"\x01\x02"), 2, sample_width=1).read_block() == (1, 2)
    data = struct.pack("<2I", 70000, 1)
    assert SampleDecoder(io.BytesIO(data), 2, sample_width=4).read_block() == (70000, 1)


def test_rejects_unknown_width():
    with pytest.raises(ValueError):
        SampleDecoder(io.BytesIO(b""), 2, sample_width=3)
