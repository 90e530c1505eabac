"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .stream import ChunkBatcher, StreamCounter, batch_chunks, batch_chunks_sync
from .json import extract_document_boundaries, decode_document, safe_json_dumps


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # Streaming
    "ChunkBatcher",
    "StreamCounter",
    "batch_chunks",
    "batch_chunks_sync",
    # JSON
    "extract_document_boundaries",
    "decode_document",
    "safe_json_dumps",
]
