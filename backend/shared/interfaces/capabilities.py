"""
Host capabilities injected into Sortly services

Compression and key-value persistence are interface boundaries so that the
parse/sort/codec logic can run and be tested without a particular host.
"""

from abc import ABC, abstractmethod
from typing import Optional


class TextCompressor(ABC):
    """
    Deflate/inflate over byte buffers.

    Implementations may suspend (streaming codecs, thread offload), so both
    operations are coroutines.
    """

    @abstractmethod
    async def deflate(self, data: bytes) -> bytes:
        """
        Compress raw bytes.

        Args:
            data: Uncompressed bytes

        Returns:
            Compressed bytes
        """
        raise NotImplementedError

    @abstractmethod
    async def inflate(self, data: bytes) -> bytes:
        """
        Decompress bytes produced by `deflate`.

        Raises:
            ValueError: if the stream is corrupt, truncated or has trailing data
        """
        raise NotImplementedError


class KeyValueStore(ABC):
    """String key to string value store (get/set/delete)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Release any held resources."""
        return None
