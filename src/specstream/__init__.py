"""
Spec Stream
Compiles streamed model output into a validated, incrementally renderable
element graph plus additive patches.
"""

from .catalog import (
    ActionDef,
    Catalog,
    ComponentDef,
    FieldKind,
    FieldSchema,
    array_of,
    boolean,
    define_catalog,
    enum,
    number,
    object_of,
    string,
)
from .compiler import (
    SpecStreamCompiler,
    compile_document,
    compile_spec,
    create_spec_stream_compiler,
)
from .differ import apply_patches, diff
from .errors import (
    CompileError,
    DuplicateKeyError,
    InvalidReferenceError,
    MalformedSyntaxError,
    StreamClosedError,
    UnknownComponentTypeError,
)
from .models import (
    AppendChild,
    Diagnostics,
    Element,
    FinalizeElement,
    InsertElement,
    Patch,
    PushResult,
    SetRoot,
    Spec,
    UpdateProps,
    parse_patch,
)
from .prompt import compile_prompt
from .stream import compile_stream, compile_stream_sync

__version__ = "0.1.0"

__all__ = [
    # Catalog
    "ActionDef",
    "Catalog",
    "ComponentDef",
    "FieldKind",
    "FieldSchema",
    "array_of",
    "boolean",
    "define_catalog",
    "enum",
    "number",
    "object_of",
    "string",
    "compile_prompt",
    # Compiler
    "SpecStreamCompiler",
    "create_spec_stream_compiler",
    "compile_spec",
    "compile_document",
    "compile_stream",
    "compile_stream_sync",
    # Models
    "Element",
    "Spec",
    "Patch",
    "InsertElement",
    "UpdateProps",
    "AppendChild",
    "SetRoot",
    "FinalizeElement",
    "parse_patch",
    "PushResult",
    "Diagnostics",
    "diff",
    "apply_patches",
    # Errors
    "CompileError",
    "MalformedSyntaxError",
    "DuplicateKeyError",
    "UnknownComponentTypeError",
    "InvalidReferenceError",
    "StreamClosedError",
]
