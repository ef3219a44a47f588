"""Serializer: value tree → APON text."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import InvalidStringifyInput
from .grammar import (
    CURLY_BRACKET_CLOSE,
    CURLY_BRACKET_OPEN,
    EMPTY_MAPPING,
    EMPTY_SEQUENCE,
    NAME_VALUE_SEPARATOR,
    NULL_LITERAL,
    ROUND_BRACKET_CLOSE,
    ROUND_BRACKET_OPEN,
    SQUARE_BRACKET_CLOSE,
    SQUARE_BRACKET_OPEN,
    TEXT_LINE_START,
    format_number,
    needs_quotes,
    quote,
)
from .values import Undefined, Value, is_mapping, is_sequence

DEFAULT_INDENT = "  "


@dataclass(frozen=True)
class StringifyOptions:
    """Output settings for :func:`stringify`."""

    indent: str = DEFAULT_INDENT

    @classmethod
    def coerce(cls, options: "OptionsLike") -> "StringifyOptions":
        """Build options from an int (spaces), a str, a mapping or an instance."""
        if isinstance(options, StringifyOptions):
            return options
        if isinstance(options, int) and not isinstance(options, bool):
            return cls(indent=" " * max(options, 0))
        if isinstance(options, str):
            return cls(indent=options)
        if isinstance(options, Mapping) and isinstance(options.get("indent"), str):
            return cls(indent=options["indent"])
        return cls()


OptionsLike = Union[StringifyOptions, int, str, Mapping, None]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def stringify(value: Value, options: OptionsLike = None) -> str:
    """Render a ``dict`` or ``list`` as APON text.

    A root mapping is written without its surrounding braces, one
    ``name: value`` line per entry. A root sequence keeps its brackets.
    """
    opts = StringifyOptions.coerce(options)

    if is_mapping(value):
        pieces: list = []
        for i, (name, item) in enumerate(_kept_entries(value)):
            pieces.append(f"{_NEWLINE if i else ''}{name}{NAME_VALUE_SEPARATOR} ")
            pieces.append(_Pending(item, ""))
        return _render(pieces, opts.indent)
    if is_sequence(value):
        return _render([_Pending(value, "")], opts.indent)

    raise InvalidStringifyInput(
        f"stringify input must be a mapping or a sequence, not {type(value).__name__}"
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_NEWLINE = "\n"


@dataclass(slots=True)
class _Pending:
    """A value still to be rendered at the given indent."""

    value: Any
    indent: str


def _render(pieces: list, unit: str) -> str:
    """Join text pieces, expanding pending values with an explicit stack.

    Containers expand into more pieces rather than recursing, so nesting
    depth is bounded only by memory.
    """
    out: list[str] = []
    stack = pieces[::-1]
    while stack:
        piece = stack.pop()
        if isinstance(piece, str):
            out.append(piece)
            continue
        expanded = _expand(piece.value, piece.indent, unit)
        if isinstance(expanded, str):
            out.append(expanded)
        else:
            stack.extend(reversed(expanded))
    return "".join(out)


def _expand(value: Any, indent: str, unit: str) -> str | list:
    """Render a scalar to text, or split a container into pieces."""
    if value is None or value is Undefined:
        return NULL_LITERAL
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    if is_mapping(value):
        return _expand_mapping(value, indent, unit)
    if is_sequence(value):
        return _expand_sequence(value, indent, unit)

    text = value if isinstance(value, str) else str(value)
    if _NEWLINE in text:
        return _render_text_block(text, indent, unit)
    return quote(text) if needs_quotes(text) else text


def _render_text_block(text: str, indent: str, unit: str) -> str:
    prefix = indent + unit + TEXT_LINE_START
    lines = [ROUND_BRACKET_OPEN]
    lines.extend(prefix + line for line in text.split(_NEWLINE))
    lines.append(indent + ROUND_BRACKET_CLOSE)
    return _NEWLINE.join(lines)


def _kept_entries(mapping: Mapping) -> list[tuple[Any, Any]]:
    return [(name, value) for name, value in mapping.items() if value is not Undefined]


def _expand_mapping(mapping: Mapping, indent: str, unit: str) -> str | list:
    entries = _kept_entries(mapping)
    if not entries:
        return EMPTY_MAPPING
    inner = indent + unit
    pieces: list = [CURLY_BRACKET_OPEN]
    for name, value in entries:
        pieces.append(f"{_NEWLINE}{inner}{name}{NAME_VALUE_SEPARATOR} ")
        pieces.append(_Pending(value, inner))
    pieces.append(_NEWLINE + indent + CURLY_BRACKET_CLOSE)
    return pieces


def _expand_sequence(items, indent: str, unit: str) -> str | list:
    if not items:
        return EMPTY_SEQUENCE
    inner = indent + unit
    pieces: list = [SQUARE_BRACKET_OPEN]
    for item in items:
        pieces.append(_NEWLINE + inner)
        pieces.append(_Pending(item, inner))
    pieces.append(_NEWLINE + indent + SQUARE_BRACKET_CLOSE)
    return pieces
