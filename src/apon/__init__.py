"""APON — parser and serializer for Aspectran Parameters Object Notation."""

from __future__ import annotations

from typing import IO

from .errors import (
    AponError,
    FormatError,
    InvalidStringifyInput,
    MissingSeparator,
    TrailingContent,
    UnclosedBlock,
    UnexpectedClosingDelimiter,
)
from .parser import parse
from .serializer import OptionsLike, StringifyOptions, stringify
from .values import Undefined, Value


def load(fp: IO[str]) -> Value:
    """Parse APON from a readable text stream."""
    return parse(fp.read())


def dump(value: Value, fp: IO[str], options: OptionsLike = None) -> None:
    """Write *value* as APON to a writable text stream."""
    fp.write(stringify(value, options))


__all__ = [
    "parse",
    "stringify",
    "load",
    "dump",
    "StringifyOptions",
    "Undefined",
    "Value",
    "AponError",
    "FormatError",
    "MissingSeparator",
    "UnexpectedClosingDelimiter",
    "UnclosedBlock",
    "TrailingContent",
    "InvalidStringifyInput",
]
