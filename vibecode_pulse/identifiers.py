"""Content-addressed identifiers for feed items.

Favorites and "new" tracking key off these ids across independent sync
cycles, so the hash must be stable across runs and platforms: it wraps at 32
bits explicitly instead of relying on Python's unbounded integers.
"""

from __future__ import annotations

ID_PREFIX = "vibe-"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    encoded = text.encode("utf-16-le", "surrogatepass")
    for index in range(0, len(encoded), 2):
        yield encoded[index] | (encoded[index + 1] << 8)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def string_hash32(text: str) -> int:
    """Signed 32-bit ``h = h * 31 + unit`` hash over UTF-16 code units."""

    value = 0
    for unit in _utf16_units(text):
        value = _to_int32(value * 31 + unit)
    return value


def derive_id(key: str) -> str:
    return f"{ID_PREFIX}{_base36(abs(string_hash32(key)))}"


def derive_item_id(url: str, title: str) -> str:
    """Id for an item: keyed by its URL, or by its title when the URL is empty."""

    return derive_id(url if url else title)


__all__ = ["ID_PREFIX", "derive_id", "derive_item_id", "string_hash32"]
