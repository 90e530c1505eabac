"""Chunk batching and accounting for streamed model output."""

from collections.abc import AsyncGenerator, AsyncIterator, Generator, Iterator
from dataclasses import dataclass, field

Chunk = str | bytes


@dataclass
class ChunkBatcher:
    """Coalesces small chunks so each push carries at least ``batch_size`` units."""

    batch_size: int = 1
    _parts: list[Chunk] = field(default_factory=list, init=False, repr=False)
    _size: int = field(default=0, init=False, repr=False)

    def add(self, chunk: Chunk) -> Chunk | None:
        """Buffer a chunk, return the joined batch once it is large enough."""
        if self._parts and type(chunk) is not type(self._parts[0]):
            raise TypeError("Cannot mix str and bytes chunks in one batch")
        self._parts.append(chunk)
        self._size += len(chunk)
        if self._size >= self.batch_size:
            return self._take()
        return None

    def flush(self) -> Chunk | None:
        """Return whatever is buffered."""
        if self._parts:
            return self._take()
        return None

    def _take(self) -> Chunk:
        first = self._parts[0]
        batch = first[:0].join(self._parts)
        self._parts = []
        self._size = 0
        return batch


@dataclass
class StreamCounter:
    """Track chunk statistics."""

    count: int = 0
    chars: int = 0

    def track(self, chunk: Chunk) -> None:
        """Record chunk."""
        self.count += 1
        self.chars += len(chunk)

    def reset(self) -> tuple[int, int]:
        """Reset and return counts."""
        result = (self.count, self.chars)
        self.count = 0
        self.chars = 0
        return result


async def batch_chunks(
    stream: AsyncIterator[Chunk], batch_size: int = 1
) -> AsyncGenerator[Chunk, None]:
    """
    Batch chunks from an async stream.

    Args:
        stream: Async chunk iterator
        batch_size: Minimum characters (or bytes) per batch

    Yields:
        Batched chunks
    """
    batcher = ChunkBatcher(batch_size=batch_size)

    async for chunk in stream:
        if batch := batcher.add(chunk):
            yield batch

    if final := batcher.flush():
        yield final


def batch_chunks_sync(stream: Iterator[Chunk], batch_size: int = 1) -> Generator[Chunk, None, None]:
    """
    Batch chunks from a sync stream.

    Args:
        stream: Chunk iterator
        batch_size: Minimum characters (or bytes) per batch

    Yields:
        Batched chunks
    """
    batcher = ChunkBatcher(batch_size=batch_size)

    for chunk in stream:
        if batch := batcher.add(chunk):
            yield batch

    if final := batcher.flush():
        yield final
