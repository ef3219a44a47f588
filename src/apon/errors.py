"""Exceptions raised by the APON parser and serializer."""

from __future__ import annotations


class AponError(Exception):
    """Base class for every error raised by this package."""


class FormatError(AponError, ValueError):
    """Malformed APON text.

    ``line`` is the 1-based line where the problem was detected, or
    ``None`` when no single line applies.
    """

    def __init__(self, msg: str, line: int | None = None) -> None:
        self.msg = msg
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.msg
        return f"{self.msg} at line {self.line}"


class MissingSeparator(FormatError):
    """A mapping entry line has no ``:``."""


class UnexpectedClosingDelimiter(FormatError):
    """A ``}`` or ``]`` line that closes nothing currently open."""


class UnclosedBlock(FormatError):
    """Input ended before a ``}``, ``]`` or ``)`` terminator.

    ``line`` is the last line of input; ``opened_at`` is the line holding
    the opener that was never closed.
    """

    def __init__(
        self, msg: str, line: int | None = None, opened_at: int | None = None
    ) -> None:
        self.opened_at = opened_at
        super().__init__(msg, line)


class TrailingContent(FormatError):
    """Content after the closing delimiter of a wrapped root container."""


class InvalidStringifyInput(AponError, TypeError):
    """``stringify`` was given something other than a mapping or sequence."""
