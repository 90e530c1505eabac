"""
Stream Compilation
Drive a compiler from an iterator of model output chunks.
"""

import uuid
from collections.abc import AsyncGenerator, AsyncIterator, Generator, Iterable

from .catalog import Catalog
from .compiler import SpecStreamCompiler
from .core.config import Settings, get_settings
from .core.logging_config import LogContext, get_logger
from .core.stream import Chunk, StreamCounter, batch_chunks, batch_chunks_sync
from .differ import diff
from .models import PushResult

logger = get_logger(__name__)


async def compile_stream(
    stream: AsyncIterator[Chunk],
    catalog: Catalog,
    settings: Settings | None = None,
    batch_size: int | None = None,
) -> AsyncGenerator[PushResult, None]:
    """
    Compile an async chunk stream, yielding one result per push.

    Stops consuming the stream at the first fatal error; the failing result
    is the last one yielded. The final yield after a clean stream carries
    whatever ``finish`` released (e.g. a trailing root-level value).

    Args:
        stream: Async iterator of text or UTF-8 byte chunks
        catalog: Component catalog
        settings: Compiler settings (defaults to environment)
        batch_size: Minimum chunk size per push (defaults to settings)

    Yields:
        PushResult after every push
    """
    settings = settings or get_settings()
    compiler = SpecStreamCompiler(catalog, settings)
    counter = StreamCounter()

    with LogContext(stream_id=uuid.uuid4().hex[:12]):
        logger.info("stream_started", components=len(catalog))
        async for chunk in batch_chunks(stream, batch_size or settings.stream_batch_size):
            counter.track(chunk)
            update = compiler.push(chunk)
            yield update
            if update.error is not None:
                break
        else:
            yield _finish(compiler)

        count, chars = counter.reset()
        logger.info("stream_finished", pushes=count, chars=chars, failed=compiler.error is not None)


def compile_stream_sync(
    stream: Iterable[Chunk],
    catalog: Catalog,
    settings: Settings | None = None,
    batch_size: int | None = None,
) -> Generator[PushResult, None, None]:
    """
    Compile a chunk iterator, yielding one result per push.

    Same contract as ``compile_stream``.
    """
    settings = settings or get_settings()
    compiler = SpecStreamCompiler(catalog, settings)
    counter = StreamCounter()

    with LogContext(stream_id=uuid.uuid4().hex[:12]):
        logger.info("stream_started", components=len(catalog))
        for chunk in batch_chunks_sync(iter(stream), batch_size or settings.stream_batch_size):
            counter.track(chunk)
            update = compiler.push(chunk)
            yield update
            if update.error is not None:
                break
        else:
            yield _finish(compiler)

        count, chars = counter.reset()
        logger.info("stream_finished", pushes=count, chars=chars, failed=compiler.error is not None)


def _finish(compiler: SpecStreamCompiler) -> PushResult:
    previous = compiler.get_result()
    final = compiler.finish()
    if compiler.error is not None:
        return PushResult(previous, [], compiler.error)

    return PushResult(final, diff(previous, final))
