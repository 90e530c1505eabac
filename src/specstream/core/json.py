"""Fast JSON decoding and encoding for complete documents."""

from typing import Any
import json

import msgspec
import orjson

from ..errors import MalformedSyntaxError


_decoder = msgspec.json.Decoder()

_WHITESPACE = " \t\n\r"


def extract_document_boundaries(text: str, skip_preamble: bool = True) -> tuple[int, int] | None:
    """
    Locate the first top-level JSON value in model output.

    Text before the value (a markdown fence, a sentence of preamble) is
    skipped when ``skip_preamble`` is set; anything after the value closes is
    ignored. An unclosed value runs to the end of the text.

    Args:
        text: Model output
        skip_preamble: Start at the first '{' rather than the first non-space

    Returns:
        (start, end) of the value, or None if no value starts
    """
    if skip_preamble:
        start = text.find("{")
    else:
        stripped = text.lstrip(_WHITESPACE)
        start = len(text) - len(stripped) if stripped else -1
    if start == -1:
        return None
    if text[start] not in "{[":
        return (start, len(text))

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        c = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
        elif c == '"':
            in_string = True
        elif c in "{[":
            depth += 1
        elif c in "}]":
            depth -= 1
            if depth == 0:
                return (start, index + 1)
    return (start, len(text))


def decode_document(text: str, skip_preamble: bool = True) -> dict[str, Any]:
    """
    Decode one complete JSON object with msgspec.

    The object is cut out of the surrounding text by the same rules the
    incremental parser applies.

    Args:
        text: Complete document text
        skip_preamble: Skip text before the first '{'

    Returns:
        Decoded dictionary

    Raises:
        MalformedSyntaxError: If the text holds no single complete JSON object
    """
    boundaries = extract_document_boundaries(text, skip_preamble)
    if boundaries is None:
        raise MalformedSyntaxError("No JSON object found in text")

    start, end = boundaries
    try:
        result = _decoder.decode(text[start:end].encode("utf-8"))
    except msgspec.DecodeError as e:
        raise MalformedSyntaxError(f"Invalid JSON: {e}") from e

    if not isinstance(result, dict):
        raise MalformedSyntaxError(f"Expected object, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent") or 0

    # Use orjson for compact output (fastest)
    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

    # Use stdlib for pretty-printed output or as fallback (most compatible)
    return json.dumps(obj, indent=indent if indent > 0 else None, ensure_ascii=False)
