from __future__ import annotations
import struct
from typing import BinaryIO, Iterator, Optional, Tuple

# unsigned struct codes by sample width in bytes
_WIDTH_CODES = {1: "B", 2: "H", 4: "I"}
_ORDER_CODES = {"little": "<", "big": ">"}


class SampleDecoder:
    """Reads fixed-size blocks of unsigned samples from a byte stream.

    A block is `block_size` samples of `sample_width` bytes each. A trailing
    remainder shorter than one block ends the stream and is discarded; its
    length is kept in `truncated_bytes`.
    """

    def __init__(self, stream: BinaryIO, block_size: int, sample_width: int = 2, byte_order: str = "little"):
        if sample_width not in _WIDTH_CODES:
            raise ValueError(f"unsupported sample width: {sample_width}")
        if byte_order not in _ORDER_CODES:
            raise ValueError(f"unsupported byte order: {byte_order}")
        self.stream = stream
        self.block_size = int(block_size)
        self.sample_width = int(sample_width)
        self.block_bytes = self.block_size * self.sample_width
        self._fmt = struct.Struct(_ORDER_CODES[byte_order] + _WIDTH_CODES[sample_width] * self.block_size)
        self.truncated_bytes = 0
        self.eof = False

    def _read_exact(self) -> bytes:
        # pipes can hand back partial reads; keep going until a block or EOF
        buf = bytearray()
        while len(buf) < self.block_bytes:
            chunk = self.stream.read(self.block_bytes - len(buf))
            if not chunk:
                break
            buf += chunk
        return bytes(buf)

    def read_block(self) -> Optional[Tuple[int, ...]]:
        if self.eof:
            return None
        data = self._read_exact()
        if len(data) < self.block_bytes:
            self.eof = True
            self.truncated_bytes += len(data)
            return None
        return self._fmt.unpack(data)

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        while True:
            block = self.read_block()
            if block is None:
                return
            yield block
