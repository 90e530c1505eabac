"""Incremental JSON parser tolerant of truncation.

Feed arbitrary chunks of one document. After every chunk ``root`` holds the
parse tree of everything that can be interpreted without guessing: open
strings expose the characters received so far, numbers and literals appear
only once they are complete, and open containers expose the members resolved
so far.
"""

import re

from ..core.logging_config import get_logger
from ..errors import DuplicateKeyError, MalformedSyntaxError
from .nodes import ArrayNode, Node, ObjectNode, ScalarNode, StringNode

logger = get_logger(__name__)

WHITESPACE = frozenset(" \t\n\r")
NUMBER_CHARS = frozenset("0123456789+-.eE")
LITERALS = {"true": True, "false": False, "null": None}
ESCAPES = {'"': '"', "\\": "\\", "/": "/", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}
DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_STRING_SPECIAL = re.compile(r'["\\\x00-\x1f]')

# What the innermost container accepts next
KEY_OR_END = 0
KEY = 1
COLON = 2
VALUE = 3
VALUE_OR_END = 4
COMMA_OR_END = 5

# Token being read across chunk boundaries
STRUCTURE = 0
STRING = 1
OBJECT_KEY = 2
NUMBER = 3
LITERAL = 4


class _Frame:
    __slots__ = ("node", "expect", "key")

    def __init__(self, node: ObjectNode | ArrayNode, expect: int) -> None:
        self.node = node
        self.expect = expect
        self.key: str | None = None


class IncrementalParser:
    """
    Chunk-at-a-time parser for one JSON document.

    Examples:
        >>> parser = IncrementalParser()
        >>> parser.feed('{"a": [1, 2')
        >>> parser.root.to_value()
        {'a': [1]}
        >>> parser.feed('3]}')
        >>> parser.root.to_value()
        {'a': [1, 23]}
    """

    def __init__(self, max_depth: int = 64, skip_preamble: bool = True) -> None:
        self.max_depth = max_depth
        self.skip_preamble = skip_preamble
        self.root: Node | None = None
        self.generation = 0
        self.trailing_chars = 0
        self.finished = False

        self._stack: list[_Frame] = []
        self._mode = STRUCTURE
        self._done = False
        self._base = 0
        self._pos = 0

        # string state
        self._string: StringNode | None = None
        self._key_parts: list[str] = []
        self._escape: str | None = None
        self._high_surrogate: int | None = None

        # number / literal state
        self._token: list[str] = []

    @property
    def document_complete(self) -> bool:
        return self._done

    @property
    def depth(self) -> int:
        return len(self._stack)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def feed(self, chunk: str) -> None:
        """
        Consume the next chunk.

        Raises:
            MalformedSyntaxError: If the input cannot be a document prefix
            DuplicateKeyError: If an object repeats a member name
        """
        if self.finished:
            raise RuntimeError("parser already finished")

        self.generation += 1
        text = chunk
        n = len(text)
        i = 0

        while i < n:
            self._pos = i
            mode = self._mode

            if mode == STRING or mode == OBJECT_KEY:
                i = self._scan_string(text, i)
                continue

            c = text[i]

            if mode == NUMBER:
                if c in NUMBER_CHARS:
                    self._token.append(c)
                    i += 1
                    continue
                self._finish_number()
            elif mode == LITERAL:
                self._read_literal(c)
                i += 1
                continue

            if self._done:
                if c not in WHITESPACE:
                    self.trailing_chars += 1
            elif c not in WHITESPACE:
                self._structural(c)
            i += 1

        self._base += n
        self._pos = 0
        for frame in self._stack:
            frame.node.stamp = self.generation

    def finish(self) -> None:
        """Mark end of input. An unfinished document stays incomplete."""
        if self.finished:
            return
        if self._mode == NUMBER and not self._stack:
            self._finish_number()
        self.finished = True
        if self.trailing_chars:
            logger.warning("trailing_text_ignored", chars=self.trailing_chars)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _error(self, message: str) -> MalformedSyntaxError:
        offset = self._base + self._pos
        return MalformedSyntaxError(f"{message} at offset {offset}", offset)

    def _structural(self, c: str) -> None:
        if not self._stack:
            if self.root is None:
                if self.skip_preamble and c != "{":
                    return
                self._start_value(c)
                return
            raise self._error(f"Unexpected {c!r}")

        frame = self._stack[-1]
        expect = frame.expect

        if expect == VALUE or expect == VALUE_OR_END:
            if c == "]" and expect == VALUE_OR_END:
                self._close_container()
            else:
                self._start_value(c)
        elif expect == KEY or expect == KEY_OR_END:
            if c == '"':
                self._mode = OBJECT_KEY
                self._key_parts = []
            elif c == "}" and expect == KEY_OR_END:
                self._close_container()
            else:
                raise self._error(f"Expected object key, got {c!r}")
        elif expect == COLON:
            if c != ":":
                raise self._error(f"Expected ':', got {c!r}")
            frame.expect = VALUE
        else:
            is_object = isinstance(frame.node, ObjectNode)
            if c == ",":
                frame.expect = KEY if is_object else VALUE
            elif (c == "}" and is_object) or (c == "]" and not is_object):
                self._close_container()
            else:
                raise self._error(f"Expected ',' or closing bracket, got {c!r}")

    def _start_value(self, c: str) -> None:
        if self._stack:
            self._stack[-1].expect = COMMA_OR_END

        if c == "{" or c == "[":
            if len(self._stack) >= self.max_depth:
                raise self._error(f"Nesting depth exceeds maximum {self.max_depth}")
            node: ObjectNode | ArrayNode
            if c == "{":
                node = ObjectNode(self.generation)
                expect = KEY_OR_END
            else:
                node = ArrayNode(self.generation)
                expect = VALUE_OR_END
            self._attach(node)
            self._stack.append(_Frame(node, expect))
        elif c == '"':
            self._string = StringNode(self.generation)
            self._attach(self._string)
            self._mode = STRING
        elif c == "-" or c in DIGITS:
            self._token = [c]
            self._mode = NUMBER
        elif c in "tfn":
            self._token = [c]
            self._mode = LITERAL
        else:
            raise self._error(f"Unexpected {c!r}")

    def _attach(self, node: Node) -> None:
        if not self._stack:
            self.root = node
            return
        frame = self._stack[-1]
        if isinstance(frame.node, ObjectNode):
            assert frame.key is not None
            frame.node.entries[frame.key] = node
        else:
            frame.node.items.append(node)

    def _value_closed(self) -> None:
        if not self._stack:
            self._done = True

    def _close_container(self) -> None:
        frame = self._stack.pop()
        frame.node.complete = True
        frame.node.stamp = self.generation
        self._value_closed()

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def _finish_number(self) -> None:
        text = "".join(self._token)
        if not _NUMBER.fullmatch(text):
            raise self._error(f"Invalid number {text!r}")
        if any(ch in text for ch in ".eE"):
            value: int | float = float(text)
        else:
            value = int(text)
        self._mode = STRUCTURE
        self._token = []
        self._attach(ScalarNode(self.generation, value))
        self._value_closed()

    def _read_literal(self, c: str) -> None:
        self._token.append(c)
        text = "".join(self._token)
        if text in LITERALS:
            self._mode = STRUCTURE
            self._token = []
            self._attach(ScalarNode(self.generation, LITERALS[text]))
            self._value_closed()
        elif not any(literal.startswith(text) for literal in LITERALS):
            raise self._error(f"Invalid literal {text!r}")

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _scan_string(self, text: str, i: int) -> int:
        n = len(text)
        while i < n:
            if self._escape is not None:
                self._pos = i
                self._read_escape(text[i])
                i += 1
                continue

            match = _STRING_SPECIAL.search(text, i)
            end = match.start() if match else n
            if end > i:
                self._emit(text[i:end])
            if match is None:
                return n

            self._pos = end
            c = text[end]
            if c == '"':
                self._close_string()
                return end + 1
            if c == "\\":
                self._escape = ""
                i = end + 1
                continue
            raise self._error("Control character in string")
        return i

    def _read_escape(self, c: str) -> None:
        if self._escape == "":
            if c == "u":
                self._escape = "u"
            elif c in ESCAPES:
                self._escape = None
                self._emit(ESCAPES[c])
            else:
                raise self._error(f"Invalid escape \\{c}")
            return

        if c not in HEX_DIGITS:
            raise self._error(f"Invalid unicode escape digit {c!r}")
        assert self._escape is not None
        self._escape += c
        if len(self._escape) < 5:
            return

        code = int(self._escape[1:], 16)
        self._escape = None
        if 0xDC00 <= code <= 0xDFFF and self._high_surrogate is not None:
            high = self._high_surrogate
            self._high_surrogate = None
            self._emit(chr(0x10000 + ((high - 0xD800) << 10) + (code - 0xDC00)))
        elif 0xD800 <= code <= 0xDBFF:
            self._flush_surrogate()
            self._high_surrogate = code
        else:
            self._emit(chr(code))

    def _flush_surrogate(self) -> None:
        if self._high_surrogate is not None:
            lone = chr(self._high_surrogate)
            self._high_surrogate = None
            self._emit(lone)

    def _emit(self, chars: str) -> None:
        if self._high_surrogate is not None:
            chars = chr(self._high_surrogate) + chars
            self._high_surrogate = None
        if self._mode == OBJECT_KEY:
            self._key_parts.append(chars)
        else:
            assert self._string is not None
            self._string.append(chars)
            self._string.stamp = self.generation

    def _close_string(self) -> None:
        self._flush_surrogate()
        if self._mode == OBJECT_KEY:
            self._mode = STRUCTURE
            self._close_key("".join(self._key_parts))
            return

        assert self._string is not None
        self._string.complete = True
        self._string.stamp = self.generation
        self._string = None
        self._mode = STRUCTURE
        self._value_closed()

    def _close_key(self, key: str) -> None:
        frame = self._stack[-1]
        assert isinstance(frame.node, ObjectNode)
        if key in frame.node.entries:
            raise DuplicateKeyError(key, self._base + self._pos)
        frame.node.entries[key] = None
        frame.key = key
        frame.expect = COLON
