"""Compile errors raised while turning a token stream into a Spec."""


class CompileError(Exception):
    """Fatal document error. The compile halts on the first one."""

    kind = "compile_error"

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset

    def to_dict(self) -> dict[str, object]:
        """Export as dictionary."""
        return {"kind": self.kind, "message": self.message, "offset": self.offset}


class MalformedSyntaxError(CompileError):
    """Input cannot be a prefix of any valid document."""

    kind = "malformed_syntax"


class DuplicateKeyError(CompileError):
    """The same member name appeared twice in one object."""

    kind = "duplicate_key"

    def __init__(self, key: str, offset: int | None = None) -> None:
        super().__init__(f"Duplicate key {key!r}", offset)
        self.key = key


class UnknownComponentTypeError(CompileError):
    """An element named a type the catalog does not declare."""

    kind = "unknown_component_type"

    def __init__(self, element_key: str, type_name: str | None) -> None:
        if type_name is None:
            message = f"Element {element_key!r} has no type"
        else:
            message = f"Element {element_key!r} has unknown type {type_name!r}"
        super().__init__(message)
        self.element_key = element_key
        self.type_name = type_name


class InvalidReferenceError(CompileError):
    """A child reference would break the single-parent tree."""

    kind = "invalid_reference"

    def __init__(self, parent: str, child: str, reason: str) -> None:
        super().__init__(f"Element {parent!r} cannot reference {child!r}: {reason}")
        self.parent = parent
        self.child = child
        self.reason = reason


class StreamClosedError(RuntimeError):
    """push() was called after finish()."""
