"""Scalar grammar shared by the parser and the serializer.

Both directions must agree on what a bare token means: the serializer
quotes exactly the strings the parser would otherwise read as something
other than a string.
"""

from __future__ import annotations

import math
import re

from .values import Scalar


# ---------------------------------------------------------------------------
# Format tokens
# ---------------------------------------------------------------------------

COMMENT_LINE_START = "#"
NAME_VALUE_SEPARATOR = ":"
CURLY_BRACKET_OPEN = "{"
CURLY_BRACKET_CLOSE = "}"
SQUARE_BRACKET_OPEN = "["
SQUARE_BRACKET_CLOSE = "]"
ROUND_BRACKET_OPEN = "("
ROUND_BRACKET_CLOSE = ")"
TEXT_LINE_START = "|"
DOUBLE_QUOTE_CHAR = '"'
SINGLE_QUOTE_CHAR = "'"
ESCAPE_CHAR = "\\"

EMPTY_MAPPING = CURLY_BRACKET_OPEN + CURLY_BRACKET_CLOSE
EMPTY_SEQUENCE = SQUARE_BRACKET_OPEN + SQUARE_BRACKET_CLOSE
CLOSING_DELIMITERS = (CURLY_BRACKET_CLOSE, SQUARE_BRACKET_CLOSE)

NULL_LITERAL = "null"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

NUMERIC_HINTS = frozenset({"number", "int", "long", "float", "double"})
STRING_HINT = "string"
BOOLEAN_HINT = "boolean"

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_CHARS_RE = re.compile(r"[{}:#\"'\\\[\]]")
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

_UNESCAPES = {
    DOUBLE_QUOTE_CHAR: DOUBLE_QUOTE_CHAR,
    SINGLE_QUOTE_CHAR: SINGLE_QUOTE_CHAR,
    ESCAPE_CHAR: ESCAPE_CHAR,
    "n": "\n",
    "t": "\t",
}


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def is_number_literal(token: str) -> bool:
    """True if *token* is an optionally signed decimal, with optional exponent."""
    return _NUMBER_RE.fullmatch(token) is not None


def parse_number(token: str) -> int | float | None:
    """Convert a numeric literal to ``int`` or ``float``; ``None`` if it is not one.

    Literals without a ``.`` or exponent stay integers (arbitrary precision).
    A float literal that overflows to infinity is not a number.
    """
    if not is_number_literal(token):
        return None
    if "." in token or "e" in token or "E" in token:
        number = float(token)
        return number if math.isfinite(number) else None
    return _int_from_literal(token)


def format_number(value: int | float) -> str:
    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL
    if isinstance(value, int):
        return _int_to_literal(int(value))
    return repr(float(value))


# int() and str() refuse more than sys.get_int_max_str_digits() digits, so
# long integers are converted a chunk at a time.
_INT_CHUNK_DIGITS = 1000
_INT_CHUNK_BASE = 10 ** _INT_CHUNK_DIGITS


def _int_from_literal(token: str) -> int:
    digits = token.lstrip("+-")
    if len(digits) <= _INT_CHUNK_DIGITS:
        return int(token)
    value = 0
    for start in range(0, len(digits), _INT_CHUNK_DIGITS):
        chunk = digits[start:start + _INT_CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return -value if token.startswith("-") else value


def _int_to_literal(value: int) -> str:
    magnitude = abs(value)
    if magnitude < _INT_CHUNK_BASE:
        return str(value)
    chunks = []
    while magnitude:
        magnitude, chunk = divmod(magnitude, _INT_CHUNK_BASE)
        chunks.append(chunk)
    text = str(chunks.pop()) + "".join(
        str(chunk).zfill(_INT_CHUNK_DIGITS) for chunk in reversed(chunks)
    )
    return "-" + text if value < 0 else text


# ---------------------------------------------------------------------------
# Quoting and escaping
# ---------------------------------------------------------------------------

def unescape(text: str) -> str:
    r"""Resolve ``\" \' \\ \n \t`` in one pass; other escapes are kept as-is."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


def escape(text: str) -> str:
    return (
        text.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
        .replace(DOUBLE_QUOTE_CHAR, ESCAPE_CHAR + DOUBLE_QUOTE_CHAR)
        .replace("\n", ESCAPE_CHAR + "n")
    )


def quote(text: str) -> str:
    return DOUBLE_QUOTE_CHAR + escape(text) + DOUBLE_QUOTE_CHAR


def needs_quotes(text: str) -> bool:
    """Return True if *text* would not read back as the same bare string."""
    if not text:
        return True
    if text.strip() != text:
        return True
    if _SPECIAL_CHARS_RE.search(text) or text.startswith(ROUND_BRACKET_OPEN):
        return True
    if text in (NULL_LITERAL, TRUE_LITERAL, FALSE_LITERAL):
        return True
    return is_number_literal(text)


def is_quoted(token: str) -> bool:
    return (
        len(token) >= 2
        and token[0] in (DOUBLE_QUOTE_CHAR, SINGLE_QUOTE_CHAR)
        and token[-1] == token[0]
    )


# ---------------------------------------------------------------------------
# Type hints
# ---------------------------------------------------------------------------

def split_type_hint(name: str) -> tuple[str, str | None]:
    """Split ``age(int)`` into ``("age", "int")``.

    The hint is lower-cased. A name starting with ``(`` carries no hint.
    """
    name = name.strip()
    open_at = name.find(ROUND_BRACKET_OPEN)
    if open_at > 0 and name.endswith(ROUND_BRACKET_CLOSE):
        hint = name[open_at + 1:-1].strip().lower()
        return name[:open_at].strip(), hint
    return name, None


def cast_value(value: str, hint: str) -> Scalar:
    """Apply a type hint to a raw or unquoted string.

    Unknown hints leave the value untouched, as does a numeric hint on a
    value that is not a number.
    """
    if hint == STRING_HINT:
        return value
    if hint in NUMERIC_HINTS:
        number = parse_number(value.strip())
        return value if number is None else number
    if hint == BOOLEAN_HINT:
        return value.strip().lower() == TRUE_LITERAL
    return value


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def parse_scalar(token: str, hint: str | None = None) -> Scalar:
    """Convert a scalar token to a value.

    - ``"..."`` / ``'...'`` → unescaped string (then cast if hinted)
    - hinted bare token → cast per hint
    - ``null`` / ``true`` / ``false`` → ``None`` / ``True`` / ``False``
    - numeric literal → ``int`` or ``float``
    - anything else → the token itself
    """
    token = token.strip()

    if is_quoted(token):
        text = unescape(token[1:-1])
        return cast_value(text, hint) if hint else text

    if hint:
        return cast_value(token, hint)

    if token == NULL_LITERAL:
        return None
    if token == TRUE_LITERAL:
        return True
    if token == FALSE_LITERAL:
        return False

    number = parse_number(token)
    if number is not None:
        return number
    return token
