"""Parser: APON text → value tree."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .errors import (
    FormatError,
    MissingSeparator,
    TrailingContent,
    UnclosedBlock,
    UnexpectedClosingDelimiter,
)
from .grammar import (
    CLOSING_DELIMITERS,
    COMMENT_LINE_START,
    CURLY_BRACKET_CLOSE,
    CURLY_BRACKET_OPEN,
    EMPTY_MAPPING,
    EMPTY_SEQUENCE,
    NAME_VALUE_SEPARATOR,
    ROUND_BRACKET_CLOSE,
    ROUND_BRACKET_OPEN,
    SQUARE_BRACKET_CLOSE,
    SQUARE_BRACKET_OPEN,
    TEXT_LINE_START,
    parse_scalar,
    split_type_hint,
)
from .values import Value

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")

_DELIMITER_NAMES = {
    CURLY_BRACKET_CLOSE: "brace",
    SQUARE_BRACKET_CLOSE: "bracket",
    ROUND_BRACKET_CLOSE: "parenthesis",
}

_CLOSER_FOR = {
    CURLY_BRACKET_OPEN: CURLY_BRACKET_CLOSE,
    SQUARE_BRACKET_OPEN: SQUARE_BRACKET_CLOSE,
}


# ---------------------------------------------------------------------------
# Parser state
# ---------------------------------------------------------------------------

@dataclass
class _Frame:
    """A container whose body is being read."""

    container: dict | list
    terminator: str | None
    opened_at: int | None


@dataclass
class _ParserState:
    """Physical lines of one document, the cursor into them, and open containers.

    ``index`` is the 0-based position of the next unread line, so after a
    line has been taken ``index`` is that line's 1-based number.
    """

    lines: list[str]
    index: int = 0
    frames: list[_Frame] = field(default_factory=list)

    def at_end(self) -> bool:
        return self.index >= len(self.lines)

    def peek(self) -> str | None:
        """Skip blank and comment lines; return the next trimmed line unread."""
        while self.index < len(self.lines):
            line = self.lines[self.index].strip()
            if line and not line.startswith(COMMENT_LINE_START):
                return line
            self.index += 1
        return None

    def take(self) -> str | None:
        line = self.peek()
        if line is not None:
            self.index += 1
        return line

    def take_raw(self) -> str:
        line = self.lines[self.index]
        self.index += 1
        return line

    @property
    def line_no(self) -> int:
        return self.index

    @property
    def last_line_no(self) -> int:
        return len(self.lines)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def parse(text: str | None) -> Value:
    """Parse APON *text* into a ``dict`` or ``list``.

    Empty, whitespace-only or ``None`` input gives an empty ``dict``.
    ``bytes`` are decoded as UTF-8.
    Raises a :class:`~apon.errors.FormatError` subclass on malformed input.
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(
                f"Input is not valid UTF-8 ({exc.reason} at byte {exc.start})"
            ) from exc
    if text is None or not text.strip():
        return {}

    state = _ParserState(_LINE_BREAK_RE.split(text))
    first = state.peek()
    logger.debug("parsing %d lines, first significant line %r", len(state.lines), first)

    if first is None:
        return [] if text.strip() == EMPTY_SEQUENCE else {}

    if first in (EMPTY_MAPPING, EMPTY_SEQUENCE):
        state.take()
        _ensure_no_trailing_content(state, first[-1])
        return _new_container(first)

    if first in (CURLY_BRACKET_OPEN, SQUARE_BRACKET_OPEN):
        state.take()
        root = _new_container(first)
        state.frames.append(_Frame(root, _CLOSER_FOR[first], state.line_no))
        _parse_body(state)
        _ensure_no_trailing_content(state, _CLOSER_FOR[first])
        return root

    root = {}
    state.frames.append(_Frame(root, None, None))
    _parse_body(state)
    return root


def _ensure_no_trailing_content(state: _ParserState, closer: str) -> None:
    if state.take() is not None:
        raise TrailingContent(
            f'Unexpected content after closing {_DELIMITER_NAMES[closer]} "{closer}"',
            state.line_no,
        )


# ---------------------------------------------------------------------------
# Container bodies
# ---------------------------------------------------------------------------

def _check_closing(line: str, terminator: str | None, line_no: int) -> bool:
    """Return True if *line* ends the current body; raise on a stray closer."""
    if line == terminator:
        return True
    if line in CLOSING_DELIMITERS:
        name = _DELIMITER_NAMES[line]
        if terminator is None:
            raise UnexpectedClosingDelimiter(
                f'Unexpected closing {name} "{line}" at top level', line_no
            )
        raise UnexpectedClosingDelimiter(
            f'Unexpected closing {name} "{line}", expected "{terminator}"', line_no
        )
    return False


def _new_container(token: str) -> dict | list:
    return {} if token in (CURLY_BRACKET_OPEN, EMPTY_MAPPING) else []


def _parse_body(state: _ParserState) -> None:
    """Read lines into the containers on ``state.frames`` until all are closed.

    Nested containers are pushed as new frames instead of recursing, so
    nesting depth is bounded only by memory. The bottom frame of an
    unwrapped root mapping has no terminator and ends at end of input.
    """
    while True:
        line = state.take()
        if line is None:
            break
        line_no = state.line_no
        frame = state.frames[-1]
        if _check_closing(line, frame.terminator, line_no):
            state.frames.pop()
            if not state.frames:
                return
            continue

        container = frame.container
        if isinstance(container, list):
            name, hint, value = None, None, line
            opens_text = line == ROUND_BRACKET_OPEN
        else:
            sep = line.find(NAME_VALUE_SEPARATOR)
            if sep == -1:
                raise MissingSeparator(
                    f'Missing name-value separator "{NAME_VALUE_SEPARATOR}"', line_no
                )
            name, hint = split_type_hint(line[:sep])
            value = line[sep + 1:].strip()
            opens_text = value.startswith(ROUND_BRACKET_OPEN)

        if value in (CURLY_BRACKET_OPEN, SQUARE_BRACKET_OPEN):
            item = _new_container(value)
            state.frames.append(_Frame(item, _CLOSER_FOR[value], line_no))
        elif value in (EMPTY_MAPPING, EMPTY_SEQUENCE):
            item = _new_container(value)
        elif opens_text:
            item = _read_text_block(state, line_no)
        else:
            item = parse_scalar(value, hint)

        if name is None:
            container.append(item)
        else:
            container[name] = item

    frame = state.frames[-1]
    if frame.terminator is not None:
        raise UnclosedBlock(
            f"Unclosed block opened at line {frame.opened_at}, "
            f'missing "{frame.terminator}"',
            state.last_line_no,
            opened_at=frame.opened_at,
        )


# ---------------------------------------------------------------------------
# Text blocks
# ---------------------------------------------------------------------------

def _read_text_block(state: _ParserState, opened_at: int) -> str:
    """Collect ``|`` lines verbatim up to a line that is just ``)``.

    Everything after the first ``|`` of a line is content; lines without a
    leading ``|`` are ignored. Blank and ``#`` lines are not skipped here.
    """
    parts: list[str] = []
    while not state.at_end():
        raw = state.take_raw()
        stripped = raw.strip()
        if stripped == ROUND_BRACKET_CLOSE:
            return "\n".join(parts)
        if stripped.startswith(TEXT_LINE_START):
            parts.append(raw[raw.index(TEXT_LINE_START) + 1:])
    raise UnclosedBlock(
        f"Unclosed text block opened at line {opened_at}, "
        f'missing "{ROUND_BRACKET_CLOSE}"',
        state.last_line_no,
        opened_at=opened_at,
    )
