"""Tests for apon.errors."""

import pytest

from apon.errors import (
    AponError,
    FormatError,
    InvalidStringifyInput,
    MissingSeparator,
    TrailingContent,
    UnclosedBlock,
    UnexpectedClosingDelimiter,
)


class TestFormatError:
    def test_message_with_line(self):
        err = FormatError("Bad thing", 3)
        assert str(err) == "Bad thing at line 3"
        assert err.line == 3
        assert err.msg == "Bad thing"

    def test_message_without_line(self):
        assert str(FormatError("Bad thing")) == "Bad thing"

    def test_is_value_error(self):
        assert isinstance(FormatError("x"), ValueError)

    @pytest.mark.parametrize(
        "cls",
        [MissingSeparator, UnexpectedClosingDelimiter, UnclosedBlock, TrailingContent],
    )
    def test_subclasses(self, cls):
        err = cls("oops", 1)
        assert isinstance(err, FormatError)
        assert isinstance(err, AponError)

    def test_unclosed_block_keeps_opener_line(self):
        err = UnclosedBlock("Unclosed block opened at line 2", 5, opened_at=2)
        assert err.line == 5
        assert err.opened_at == 2
        assert str(err) == "Unclosed block opened at line 2 at line 5"

    def test_unclosed_block_opener_optional(self):
        assert UnclosedBlock("oops", 1).opened_at is None


class TestInvalidStringifyInput:
    def test_is_type_error(self):
        err = InvalidStringifyInput("nope")
        assert isinstance(err, TypeError)
        assert isinstance(err, AponError)
        assert not isinstance(err, FormatError)
