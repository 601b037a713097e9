"""
Deflate-family TextCompressor backed by zlib.

Produces RFC 1950 zlib streams, the same framing as the browser's
CompressionStream("deflate"), so tokens made by either side decode on the other.
"""

import asyncio
import zlib
from typing import Optional

from shared.interfaces.capabilities import TextCompressor


class ZlibTextCompressor(TextCompressor):
    """
    zlib deflate/inflate, run off the event loop.

    max_output_bytes caps what inflate may produce; None means unbounded.
    """

    def __init__(self, level: int = zlib.Z_DEFAULT_COMPRESSION, max_output_bytes: Optional[int] = None):
        self.level = level
        self.max_output_bytes = max_output_bytes

    async def deflate(self, data: bytes) -> bytes:
        return await asyncio.to_thread(zlib.compress, data, self.level)

    async def inflate(self, data: bytes) -> bytes:
        return await asyncio.to_thread(self._inflate_complete, data)

    def _inflate_complete(self, data: bytes) -> bytes:
        limit = self.max_output_bytes
        decompressor = zlib.decompressobj()
        try:
            # One byte past the limit is enough to tell "fits" from "too large"
            out = decompressor.decompress(data, limit + 1 if limit else 0)
            if limit and (len(out) > limit or decompressor.unconsumed_tail):
                raise ValueError(f"inflated payload exceeds {limit} bytes")
            out += decompressor.flush()
        except zlib.error as e:
            raise ValueError(f"corrupt deflate stream: {e}") from e
        if not decompressor.eof:
            raise ValueError("truncated deflate stream")
        if decompressor.unused_data:
            raise ValueError("trailing bytes after deflate stream")
        return out
