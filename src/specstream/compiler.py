"""Spec Stream Compiler - push chunks in, get valid snapshots and patches out."""

import codecs
from typing import Callable

from .catalog import Catalog
from .core.config import Settings, get_settings
from .core.json import decode_document
from .core.logging_config import get_logger
from .differ import diff
from .errors import CompileError, MalformedSyntaxError, StreamClosedError
from .materializer import Materializer
from .models import Diagnostics, PushResult, Spec
from .parser import IncrementalParser, from_value

logger = get_logger(__name__)


class SpecStreamCompiler:
    """
    Compiles one streamed JSON document into a Spec.

    Every ``push`` runs parse, validate, materialize and diff to completion
    and returns the current valid Spec with the patches since the previous
    push. A fatal error freezes the compiler on the last valid Spec and is
    reported on ``PushResult.error``; the caller decides whether to stop.

    Examples:
        >>> compiler = SpecStreamCompiler(catalog)
        >>> for chunk in chunks:
        ...     update = compiler.push(chunk)
        ...     if update.new_patches:
        ...         render(update.result)
        >>> final = compiler.finish()
    """

    def __init__(self, catalog: Catalog, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.catalog = catalog
        self.diagnostics = Diagnostics()

        self._parser = IncrementalParser(
            max_depth=settings.max_depth, skip_preamble=settings.skip_preamble
        )
        self._materializer = Materializer(catalog, self.diagnostics)
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._result = Spec()
        self._error: CompileError | None = None
        self._closed = False
        self._pushes = 0

    @property
    def error(self) -> CompileError | None:
        return self._error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def document_complete(self) -> bool:
        return self._parser.document_complete

    def get_result(self) -> Spec:
        """Latest valid snapshot."""
        return self._result

    def push(self, chunk: str | bytes) -> PushResult:
        """
        Feed the next fragment of the document.

        Args:
            chunk: Text fragment, or UTF-8 bytes (may split a character)

        Returns:
            Current valid Spec, patches since the prior push, and any error

        Raises:
            StreamClosedError: If finish() was already called
        """
        if self._closed:
            raise StreamClosedError("push() called after finish()")
        if self._error is not None:
            return PushResult(self._result, [], self._error)

        self._pushes += 1
        return self._advance(lambda: self._parser.feed(self._decode(chunk)))

    def finish(self) -> Spec:
        """
        Signal the end of the stream and freeze the result.

        A document that never completed keeps its last valid snapshot.
        """
        if self._closed:
            return self._result

        if self._error is None:
            self._advance(self._flush)

        self._closed = True
        if self._error is None and not self._parser.document_complete:
            logger.info("stream_incomplete", pushes=self._pushes)
        logger.info(
            "compile_finished",
            pushes=self._pushes,
            elements=len(self._result.elements),
            complete=self._parser.document_complete,
            failed=self._error is not None,
            diagnostics=self.diagnostics.total,
        )
        return self._result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _decode(self, chunk: str | bytes) -> str:
        if isinstance(chunk, str):
            return chunk
        try:
            return self._decoder.decode(chunk)
        except UnicodeDecodeError as e:
            raise MalformedSyntaxError(f"Invalid UTF-8: {e.reason}") from e

    def _flush(self) -> None:
        try:
            tail = self._decoder.decode(b"", final=True)
        except UnicodeDecodeError:
            # A character cut off by the end of the stream is truncation
            tail = ""
        if tail:
            self._parser.feed(tail)
        self._parser.finish()

    def _advance(self, step: Callable[[], None]) -> PushResult:
        previous = self._result
        try:
            step()
            dirty = self._materializer.sync(self._parser.root, self._parser.generation)
        except CompileError as e:
            self._fail(e)
            return PushResult(previous, [], e)

        self.diagnostics.trailing_chars = self._parser.trailing_chars
        if not dirty and self._materializer.root == previous.root:
            return PushResult(previous, [])

        current = self._materializer.snapshot()
        patches = diff(previous, current, dirty)
        self._result = current
        logger.debug(
            "push_applied",
            push=self._pushes,
            patches=len(patches),
            elements=len(current.elements),
        )
        return PushResult(current, patches)

    def _fail(self, error: CompileError) -> None:
        self._error = error
        logger.warning(
            "compile_failed",
            kind=error.kind,
            error=error.message,
            offset=error.offset,
            push=self._pushes,
        )


def create_spec_stream_compiler(
    catalog: Catalog, settings: Settings | None = None
) -> SpecStreamCompiler:
    """Create a compiler for one document."""
    return SpecStreamCompiler(catalog, settings)


def compile_spec(text: str, catalog: Catalog, settings: Settings | None = None) -> Spec:
    """
    Compile a complete document in one push.

    Raises:
        CompileError: On a fatal document error
    """
    compiler = SpecStreamCompiler(catalog, settings)
    update = compiler.push(text)
    if update.error is not None:
        raise update.error
    return compiler.finish()


def compile_document(text: str, catalog: Catalog, settings: Settings | None = None) -> Spec:
    """
    Materialize a complete document from a full msgspec decode.

    Independent of the incremental parser. Preamble and trailing text are cut
    away by the same rules, so for any complete document streamed results
    converge to this.

    Raises:
        CompileError: On a fatal document error, or if the text holds no
            complete JSON object
    """
    settings = settings or get_settings()
    tree = from_value(decode_document(text, settings.skip_preamble), stamp=1)
    materializer = Materializer(catalog)
    materializer.sync(tree, generation=1)
    return materializer.snapshot()
