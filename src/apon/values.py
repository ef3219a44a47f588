"""Value types for APON documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union


class _Undefined:
    """Singleton for entries that have no value at all.

    Unlike ``None`` (rendered as ``null``), mapping entries holding
    ``Undefined`` are left out of the serialized text.
    """

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "Undefined"


Undefined = _Undefined()

Scalar = Union[None, bool, int, float, str]
Value = Union[Scalar, dict[str, Any], list[Any]]


def is_mapping(value: object) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))
