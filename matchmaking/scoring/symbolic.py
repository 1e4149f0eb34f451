"""
Symbolic indicator derived from two profile identifiers.

The indicator is presentation flavor only and carries no statistical meaning.
It must be reproducible bit-for-bit on every client, so it uses a fixed
32-bit rolling hash instead of Python's ``hash()``, which is salted per
process for strings.

Algorithm:
    combined = concatenation of the two ids, smaller id first
    h = (h * 31 + code_unit) mod 2**32   over the UTF-16 code units of combined
    value = abs(signed32(h)) % 100
    level = High if value > 66, Medium if value > 33, else Low
"""

import struct
from typing import List

from ..schema import SymbolicIndicator, SymbolicLevel

_MASK32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000

HIGH_THRESHOLD = 66
MEDIUM_THRESHOLD = 33

SYMBOLIC_NOTES = {
    SymbolicLevel.HIGH: "Symbolic indicators suggest a harmonious connection.",
    SymbolicLevel.MEDIUM: "Symbolic indicators suggest a balanced connection.",
    SymbolicLevel.LOW: "Symbolic indicators suggest effort is needed for harmony.",
}


def _utf16_code_units(text: str) -> List[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return list(struct.unpack(f"<{len(data) // 2}H", data))


def _to_signed32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & _SIGN_BIT else value


def rolling_hash32(text: str) -> int:
    """
    31-multiplier rolling hash over UTF-16 code units with 32-bit wraparound.

    Returns:
        Signed 32-bit hash value
    """
    h = 0
    for unit in _utf16_code_units(text):
        h = (h * 31 + unit) & _MASK32
    return _to_signed32(h)


def combine_ids(id1: str, id2: str) -> str:
    """Concatenate the ids in UTF-16 code-unit order so argument order is irrelevant."""
    if _utf16_code_units(id1) < _utf16_code_units(id2):
        return id1 + id2
    return id2 + id1


def symbolic_value(id1: str, id2: str) -> int:
    """Order-independent value in [0, 99] for a pair of ids."""
    return abs(rolling_hash32(combine_ids(id1, id2))) % 100


def symbolic_indicator(id1: str, id2: str) -> SymbolicIndicator:
    """
    Compute the symbolic indicator for a pair of profile ids.

    Args:
        id1: First profile id
        id2: Second profile id

    Returns:
        SymbolicIndicator with level, fixed note and the underlying value
    """
    value = symbolic_value(id1, id2)
    if value > HIGH_THRESHOLD:
        level = SymbolicLevel.HIGH
    elif value > MEDIUM_THRESHOLD:
        level = SymbolicLevel.MEDIUM
    else:
        level = SymbolicLevel.LOW
    return SymbolicIndicator(level=level, note=SYMBOLIC_NOTES[level], value=value)
