"""Explicit present-or-missing access to loosely typed webhook payloads.

Emitter versions disagree about which keys they send, so no payload key is
ever assumed to exist. Every lookup returns either ``Present(value)`` or
``MISSING`` and the call site states its own fallback::

    amount = lookup_int(payload, "amount").or_default(0)
    name = lookup_str(payload, "customer", "firstName")
"""

import logging
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

_INTEGER_TEXT = re.compile(r"-?\d+")


@dataclass(frozen=True)
class Present(Generic[T]):
    """A payload value that was found and had the expected shape."""

    value: T

    @property
    def is_present(self) -> bool:
        return True

    def or_default(self, default: Any) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Present[U]":
        return Present(fn(self.value))


class Missing:
    """A payload value that was absent, null, or of the wrong shape."""

    _instance: "Missing | None" = None

    def __new__(cls) -> "Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_present(self) -> bool:
        return False

    def or_default(self, default: U) -> U:
        return default

    def map(self, fn: Callable[[Any], Any]) -> "Missing":
        return self

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Missing()

Lookup: TypeAlias = Present[Any] | Missing


def lookup(payload: Any, *path: str) -> Lookup:
    """Walk ``path`` through nested mappings.

    Args:
        payload: Root object; anything that is not a mapping yields MISSING.
        *path: Keys to follow, outermost first.

    Returns:
        Present with the value found, or MISSING if any step is absent,
        not a mapping, or the final value is None.
    """
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return MISSING
        current = current.get(key)
        if current is None:
            return MISSING
    return Present(current)


def _as_text(value: Any) -> Lookup:
    if isinstance(value, bool):
        return MISSING
    if isinstance(value, str):
        text = value.strip()
        return Present(text) if text else MISSING
    if isinstance(value, int):
        return Present(str(value))
    if isinstance(value, float) and value.is_integer():
        return Present(str(int(value)))
    return MISSING


def _as_int(value: Any) -> Lookup:
    if isinstance(value, bool):
        return MISSING
    if isinstance(value, int):
        return Present(value)
    if isinstance(value, float) and value.is_integer():
        return Present(int(value))
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value.strip()):
        return Present(int(value.strip()))
    return MISSING


def lookup_str(payload: Any, *path: str) -> Lookup:
    """Look up a non-empty string; integral numbers are rendered as text."""
    found = lookup(payload, *path)
    if isinstance(found, Missing):
        return found
    return _as_text(found.value)


def lookup_int(payload: Any, *path: str) -> Lookup:
    """Look up an integer; integral floats and digit strings are accepted."""
    found = lookup(payload, *path)
    if isinstance(found, Missing):
        return found
    return _as_int(found.value)


def lookup_cents(payload: Any, *path: str) -> Lookup:
    """Look up a money amount in integer cents.

    Amounts are sent as integer cents, but some emitters serialize them as
    floats. A fractional value is rounded to the nearest cent and the
    rounding is logged; non-finite numbers are MISSING.
    """
    found = lookup(payload, *path)
    if isinstance(found, Missing):
        return found
    value = found.value
    if isinstance(value, float) and not value.is_integer():
        if not math.isfinite(value):
            return MISSING
        cents = round(value)
        logger.debug(
            f"Rounded fractional cent amount {value!r} to {cents}",
            extra={"path": ".".join(path)},
        )
        return Present(cents)
    return _as_int(value)


def lookup_float(payload: Any, *path: str) -> Lookup:
    found = lookup(payload, *path)
    if isinstance(found, Missing):
        return found
    value = found.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MISSING
    return Present(float(value))


def lookup_bool(payload: Any, *path: str) -> Lookup:
    found = lookup(payload, *path)
    if isinstance(found, Present) and isinstance(found.value, bool):
        return found
    return MISSING


def lookup_list(payload: Any, *path: str) -> Lookup:
    found = lookup(payload, *path)
    if isinstance(found, Present) and isinstance(found.value, list):
        return found
    return MISSING


def lookup_mapping(payload: Any, *path: str) -> Lookup:
    found = lookup(payload, *path)
    if isinstance(found, Present) and isinstance(found.value, Mapping):
        return found
    return MISSING


__all__ = [
    "MISSING",
    "Lookup",
    "Missing",
    "Present",
    "lookup",
    "lookup_bool",
    "lookup_cents",
    "lookup_float",
    "lookup_int",
    "lookup_list",
    "lookup_mapping",
    "lookup_str",
]
