"""Error hierarchy tests."""

import pytest

from specstream.errors import (
    CompileError,
    DuplicateKeyError,
    InvalidReferenceError,
    MalformedSyntaxError,
    StreamClosedError,
    UnknownComponentTypeError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "error, kind",
    [
        (MalformedSyntaxError("Unexpected 'x' at offset 3", 3), "malformed_syntax"),
        (DuplicateKeyError("a", 7), "duplicate_key"),
        (UnknownComponentTypeError("a", "Bogus"), "unknown_component_type"),
        (InvalidReferenceError("p", "c", "cycle"), "invalid_reference"),
    ],
)
def test_compile_errors_share_base(error, kind):
    """Test every fatal error is a CompileError with its kind."""
    assert isinstance(error, CompileError)
    assert error.kind == kind
    assert error.to_dict()["kind"] == kind


@pytest.mark.unit
def test_error_messages():
    """Test messages name the offending keys."""
    assert DuplicateKeyError("a", 7).to_dict() == {
        "kind": "duplicate_key",
        "message": "Duplicate key 'a'",
        "offset": 7,
    }
    assert str(UnknownComponentTypeError("a", None)) == "Element 'a' has no type"
    assert str(UnknownComponentTypeError("a", "Bogus")) == "Element 'a' has unknown type 'Bogus'"
    assert str(InvalidReferenceError("p", "c", "cycle")) == "Element 'p' cannot reference 'c': cycle"


@pytest.mark.unit
def test_stream_closed_is_not_a_compile_error():
    """Test the caller-contract error is separate from document errors."""
    assert issubclass(StreamClosedError, RuntimeError)
    assert not issubclass(StreamClosedError, CompileError)
