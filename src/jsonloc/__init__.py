"""
JSON parsing with source line tracking.

Decodes JSON text into Python objects and, in the same pass, builds a
location tree with the same shape as the decoded value whose leaves are the
1-based source lines on which each value began.
"""

import logging
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any
from typing import TypeAlias

from jsonloc._line_index import LineIndex
from jsonloc._line_index import LineTable
from jsonloc._line_index import build_line_table
from jsonloc._line_index import line_of

__version__ = "0.1.0"

_LOG = logging.getLogger(__name__)

# Type aliases for domain concepts - recursive definition
JsonValue = (
    str | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)
LocationTree = int | dict[str, "LocationTree"] | list["LocationTree"]
Position: TypeAlias = int

ParseFloatHook = Callable[[str], Any] | None

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSONLOC_PROFILE" in os.environ

_WHITESPACE = frozenset(" \t\n\r")
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SHORT_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars: int = 0) -> None:
            self.func_name = func_name
            self.chars = chars
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ErrorKind(Enum):
    """
    Classifies parse failures, one kind per failing production.

    Member values are the human-readable prefixes of error messages.
    """

    UNEXPECTED_END = "Unexpected end of input"
    UNEXPECTED_TOKEN = "Unexpected token"
    UNTERMINATED_STRING = "Unterminated string"
    INVALID_ESCAPE = "Invalid escape sequence"
    INVALID_UNICODE_ESCAPE = "Invalid unicode escape"
    INVALID_NUMBER = "Invalid number"
    LEADING_ZERO = "Leading zeros not allowed"
    INVALID_BOOLEAN = "Invalid boolean"
    INVALID_NULL = "Invalid null"
    EXPECTED_STRING_KEY = "Expected string key"
    EXPECTED_COLON = "Expected ':' after object key"
    EXPECTED_COMMA_OR_BRACE = "Expected ',' or '}' in object"
    UNTERMINATED_OBJECT = "Unterminated object"
    EXPECTED_COMMA_OR_BRACKET = "Expected ',' or ']' in array"
    UNTERMINATED_ARRAY = "Unterminated array"
    TRAILING_CONTENT = "Unexpected content after JSON value"
    NESTING_TOO_DEEP = "Nesting too deep"


class JSONLocDecodeError(ValueError):
    """
    Handles JSON parsing failures with precise position information.

    Carries the error kind, the offending offset and its line/column so
    callers can point at the fault in the original text.
    """

    def __init__(
        self,
        kind: ErrorKind,
        msg: str,
        doc: str = "",
        pos: Position = 0,
        index: LineIndex | None = None,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.kind = kind
        self.msg = msg
        self.doc = doc
        self.pos = pos

        if index is None:
            index = LineIndex(doc)
        self.lineno = index.line_of(pos)
        self.colno = index.column_of(pos)

        super().__init__(
            f"{msg} at line {self.lineno}, column {self.colno} (char {pos})"
        )


@dataclass(frozen=True)
class ScalarLocation:
    """Location of a string, number, boolean or null."""

    line: int

    def to_plain(self) -> LocationTree:
        return self.line


@dataclass(frozen=True)
class StructuralLocation:
    """
    Location of an object or array.

    ``line`` is where the container opens, as seen by its parent;
    ``children`` holds the locations of its members, keyed or indexed
    exactly like the decoded container.
    """

    line: int
    children: dict[str, "LocationNode"] | list["LocationNode"]

    def to_plain(self) -> LocationTree:
        """Renders the caller-facing tree: line numbers at scalar leaves."""
        if isinstance(self.children, dict):
            return {
                key: child.to_plain() for key, child in self.children.items()
            }
        return [child.to_plain() for child in self.children]


LocationNode = ScalarLocation | StructuralLocation


@dataclass(frozen=True)
class ParseResult:
    """
    Decoded value together with its congruent location tree.

    ``locations`` is navigated with the same keys and indexes as ``parsed``.
    ``root`` keeps the tagged form, which also remembers the opening line of
    every object and array.
    """

    parsed: JsonValue
    locations: LocationTree
    root: LocationNode

    def line_at(self, *path: str | int) -> int:
        """Returns the line on which the value at ``path`` begins."""
        node = self.root
        for step in path:
            if not isinstance(node, StructuralLocation):
                raise TypeError(f"cannot index into a scalar with {step!r}")
            node = node.children[step]  # type: ignore[index]
        return node.line


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    Defaults follow the loose number grammar: leading zeros are accepted and
    every number becomes a float. Without ``max_depth`` nesting is bounded
    only by the interpreter recursion limit, which is reported as
    NESTING_TOO_DEEP.
    """

    parse_float: ParseFloatHook = None
    reject_leading_zeros: bool = False
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.reject_leading_zeros, bool):
            raise TypeError("reject_leading_zeros must be a boolean")
        if self.parse_float is not None and not callable(self.parse_float):
            raise TypeError("parse_float must be callable")
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(
                self.max_depth, int
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 1:
                raise ValueError("max_depth must be at least 1")


class Cursor:
    """
    Forward-only position into the source text.

    A single instance is shared by every production of one parse.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)

    def at_end(self) -> bool:
        return self.pos >= self.length

    def peek(self) -> str:
        """Returns current character without advancing."""
        return self.text[self.pos] if self.pos < self.length else "\0"

    def advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, self.length)

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)


def _describe(cursor: Cursor) -> str:
    """Names the character under the cursor for error messages."""
    return "end of input" if cursor.at_end() else repr(cursor.peek())


class LocationDecoder:
    """
    Recursive descent decoder producing values and locations in lock-step.

    Dispatches on one character of lookahead; every production consumes
    input through the shared cursor and raises on the first malformed token.
    """

    def __init__(self, text: str, config: ParseConfig) -> None:
        self.text = text
        self.config = config
        self.cursor = Cursor(text)
        self.index = LineIndex(text)
        self.depth = 0

    def _error(
        self, kind: ErrorKind, detail: str, pos: Position
    ) -> JSONLocDecodeError:
        msg = f"{kind.value}: {detail}" if detail else kind.value
        return JSONLocDecodeError(kind, msg, self.text, pos, self.index)

    def skip_whitespace(self) -> None:
        """Skips whitespace characters according to JSON spec."""
        cursor = self.cursor
        while (
            cursor.pos < cursor.length
            and cursor.text[cursor.pos] in _WHITESPACE
        ):
            cursor.pos += 1

    def decode_document(self) -> tuple[JsonValue, LocationNode]:
        """Decodes exactly one value, allowing only whitespace around it."""
        try:
            value, location = self.decode_value()
        except RecursionError:
            raise self._error(
                ErrorKind.NESTING_TOO_DEEP,
                f"recursion limit reached at depth {self.depth}",
                self.cursor.pos,
            ) from None
        self.skip_whitespace()
        if not self.cursor.at_end():
            raise self._error(
                ErrorKind.TRAILING_CONTENT,
                f"found {_describe(self.cursor)}",
                self.cursor.pos,
            )
        return value, location

    def decode_value(self) -> tuple[JsonValue, LocationNode]:
        """Decodes any JSON value based on the lookahead character."""
        self.skip_whitespace()
        cursor = self.cursor
        start = cursor.pos
        line = self.index.line_of(start)

        if cursor.at_end():
            raise self._error(
                ErrorKind.UNEXPECTED_END, "expected a value", start
            )

        char = cursor.peek()
        if char == '"':
            return self.decode_string(), ScalarLocation(line)
        elif char == "{":
            return self.decode_object()
        elif char == "[":
            return self.decode_array()
        elif char in "tf":
            return self.decode_boolean(), ScalarLocation(line)
        elif char == "n":
            return self.decode_null(), ScalarLocation(line)
        elif char == "-" or char in _DIGITS:
            return self.decode_number(), ScalarLocation(line)
        else:
            raise self._error(ErrorKind.UNEXPECTED_TOKEN, repr(char), start)

    def decode_string(self) -> str:
        """Decodes a quoted string, resolving escape sequences."""
        with ProfileContext("decode_string"):
            cursor = self.cursor
            start = cursor.pos
            cursor.advance()  # opening quote
            chunks: list[str] = []

            while not cursor.at_end():
                char = cursor.text[cursor.pos]
                if char == '"':
                    cursor.advance()
                    return "".join(chunks)
                elif char == "\\":
                    chunks.append(self._decode_escape(start))
                else:
                    chunks.append(char)
                    cursor.advance()

            raise self._error(
                ErrorKind.UNTERMINATED_STRING,
                f"starting at line {self.index.line_of(start)}",
                start,
            )

    def _decode_escape(self, string_start: Position) -> str:
        """Resolves the escape sequence under the cursor to one character."""
        cursor = self.cursor
        escape_pos = cursor.pos
        cursor.advance()  # backslash

        if cursor.at_end():
            raise self._error(
                ErrorKind.UNTERMINATED_STRING,
                f"starting at line {self.index.line_of(string_start)}",
                string_start,
            )

        specifier = cursor.peek()
        cursor.advance()

        if specifier in _SHORT_ESCAPES:
            return _SHORT_ESCAPES[specifier]
        elif specifier == "u":
            hex_digits = cursor.text[cursor.pos : cursor.pos + 4]
            if len(hex_digits) != 4 or not all(
                c in _HEX_DIGITS for c in hex_digits
            ):
                raise self._error(
                    ErrorKind.INVALID_UNICODE_ESCAPE,
                    f"\\u{hex_digits}",
                    escape_pos,
                )
            cursor.advance(4)
            # Surrogate pairs stay as two separate code units
            return chr(int(hex_digits, 16))
        else:
            raise self._error(
                ErrorKind.INVALID_ESCAPE, f"\\{specifier}", escape_pos
            )

    def _scan_digits(self, context: str) -> None:
        """Consumes one or more ASCII digits."""
        cursor = self.cursor
        if cursor.peek() not in _DIGITS:
            raise self._error(
                ErrorKind.INVALID_NUMBER,
                f"expected digit {context}, found {_describe(cursor)}",
                cursor.pos,
            )
        while cursor.peek() in _DIGITS:
            cursor.advance()

    def decode_number(self) -> Any:
        """Decodes a number; the integer part may carry leading zeros."""
        with ProfileContext("decode_number"):
            cursor = self.cursor
            start = cursor.pos

            if cursor.peek() == "-":
                cursor.advance()

            integer_start = cursor.pos
            self._scan_digits("in integer part")
            if (
                self.config.reject_leading_zeros
                and cursor.text[integer_start] == "0"
                and cursor.pos - integer_start > 1
            ):
                raise self._error(
                    ErrorKind.LEADING_ZERO,
                    cursor.text[start : cursor.pos],
                    start,
                )

            if cursor.peek() == ".":
                cursor.advance()
                self._scan_digits("after decimal point")

            if cursor.peek() in "eE":
                cursor.advance()
                if cursor.peek() in "+-":
                    cursor.advance()
                self._scan_digits("in exponent")

            literal = cursor.text[start : cursor.pos]
            if self.config.parse_float is not None:
                return self.config.parse_float(literal)
            return float(literal)

    def decode_boolean(self) -> bool:
        cursor = self.cursor
        if cursor.startswith("true"):
            cursor.advance(4)
            return True
        elif cursor.startswith("false"):
            cursor.advance(5)
            return False
        raise self._error(
            ErrorKind.INVALID_BOOLEAN,
            repr(cursor.text[cursor.pos : cursor.pos + 5]),
            cursor.pos,
        )

    def decode_null(self) -> None:
        cursor = self.cursor
        if cursor.startswith("null"):
            cursor.advance(4)
            return None
        raise self._error(
            ErrorKind.INVALID_NULL,
            repr(cursor.text[cursor.pos : cursor.pos + 4]),
            cursor.pos,
        )

    def _enter_container(self, start: Position) -> None:
        """Tracks nesting depth against the configured limit."""
        self.depth += 1
        max_depth = self.config.max_depth
        if max_depth is not None and self.depth > max_depth:
            raise self._error(
                ErrorKind.NESTING_TOO_DEEP, f"limit is {max_depth}", start
            )

    def decode_object(self) -> tuple[dict[str, JsonValue], StructuralLocation]:
        """Decodes an object and the locations of its members."""
        with ProfileContext("decode_object"):
            cursor = self.cursor
            start = cursor.pos
            line = self.index.line_of(start)
            members: dict[str, JsonValue] = {}
            children: dict[str, LocationNode] = {}
            self._enter_container(start)
            cursor.advance()  # {
            self.skip_whitespace()

            # Handle empty object
            if cursor.peek() == "}":
                cursor.advance()
                self.depth -= 1
                return members, StructuralLocation(line, children)

            while not cursor.at_end():
                self.skip_whitespace()
                if cursor.at_end():
                    break

                if cursor.peek() == "}":
                    cursor.advance()
                    self.depth -= 1
                    return members, StructuralLocation(line, children)

                if cursor.peek() != '"':
                    raise self._error(
                        ErrorKind.EXPECTED_STRING_KEY,
                        f"found {_describe(cursor)}",
                        cursor.pos,
                    )
                key = self.decode_string()

                self.skip_whitespace()
                if cursor.at_end():
                    break
                if cursor.peek() != ":":
                    raise self._error(
                        ErrorKind.EXPECTED_COLON,
                        f"found {_describe(cursor)}",
                        cursor.pos,
                    )
                cursor.advance()

                value, child = self.decode_value()
                # Last write wins; the key keeps its first position
                members[key] = value
                children[key] = child

                self.skip_whitespace()
                if cursor.at_end():
                    break
                if cursor.peek() == "}":
                    cursor.advance()
                    self.depth -= 1
                    return members, StructuralLocation(line, children)
                if cursor.peek() != ",":
                    raise self._error(
                        ErrorKind.EXPECTED_COMMA_OR_BRACE,
                        f"found {_describe(cursor)}",
                        cursor.pos,
                    )
                cursor.advance()

            raise self._error(
                ErrorKind.UNTERMINATED_OBJECT,
                f"opened at line {line}",
                cursor.pos,
            )

    def decode_array(self) -> tuple[list[JsonValue], StructuralLocation]:
        """Decodes an array and the locations of its elements."""
        with ProfileContext("decode_array"):
            cursor = self.cursor
            start = cursor.pos
            line = self.index.line_of(start)
            elements: list[JsonValue] = []
            children: list[LocationNode] = []
            self._enter_container(start)
            cursor.advance()  # [
            self.skip_whitespace()

            # Handle empty array
            if cursor.peek() == "]":
                cursor.advance()
                self.depth -= 1
                return elements, StructuralLocation(line, children)

            while not cursor.at_end():
                self.skip_whitespace()
                if cursor.at_end():
                    break

                if cursor.peek() == "]":
                    cursor.advance()
                    self.depth -= 1
                    return elements, StructuralLocation(line, children)

                value, child = self.decode_value()
                elements.append(value)
                children.append(child)

                self.skip_whitespace()
                if cursor.at_end():
                    break
                if cursor.peek() == "]":
                    cursor.advance()
                    self.depth -= 1
                    return elements, StructuralLocation(line, children)
                if cursor.peek() != ",":
                    raise self._error(
                        ErrorKind.EXPECTED_COMMA_OR_BRACKET,
                        f"found {_describe(cursor)}",
                        cursor.pos,
                    )
                cursor.advance()

            raise self._error(
                ErrorKind.UNTERMINATED_ARRAY,
                f"opened at line {line}",
                cursor.pos,
            )


def parse(source: str, **kwargs: Any) -> ParseResult:
    """
    Parses JSON text into its value tree and congruent location tree.

    Keyword arguments build a ParseConfig. Raises JSONLocDecodeError on the
    first malformed token; no partial result is produced.
    """
    if not isinstance(source, str):
        raise TypeError(
            f"the JSON object must be str, not {type(source).__name__}"
        )

    config = ParseConfig(**kwargs)
    with ProfileContext("parse", len(source)):
        decoder = LocationDecoder(source, config)
        _LOG.debug(
            "parsing %d chars over %d lines",
            len(source),
            decoder.index.line_count,
        )
        try:
            value, root = decoder.decode_document()
        except JSONLocDecodeError as exc:
            _LOG.debug("parse failed (%s) at char %d", exc.kind.name, exc.pos)
            raise

    _LOG.debug("parsed %s rooted on line %d", type(value).__name__, root.line)
    return ParseResult(parsed=value, locations=root.to_plain(), root=root)


def load(fp: IO[str], **kwargs: Any) -> ParseResult:
    """
    Parses JSON from a file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), **kwargs)


__all__ = [
    "Cursor",
    "ErrorKind",
    "HotPathStats",
    "JSONLocDecodeError",
    "LineIndex",
    "LineTable",
    "LocationDecoder",
    "LocationNode",
    "ParseConfig",
    "ParseResult",
    "ScalarLocation",
    "StructuralLocation",
    "build_line_table",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "line_of",
    "load",
    "parse",
]
