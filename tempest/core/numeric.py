"""
Fixed-width numeric narrowing.

The station reports every observation slot as a JSON number. Narrowing a
wide value to a fixed-width field follows the usual explicit-cast rules:
integers truncate toward zero and saturate at the target bounds (NaN becomes
zero), floats round to the nearest IEEE-754 binary32 value (overflow becomes
an infinity). The same input always produces the same output.
"""

import math
import struct

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

_F32 = struct.Struct("<f")


def saturating_int(value: float, lower: int, upper: int) -> int:
    """Truncate `value` toward zero and clamp it into `[lower, upper]`."""
    if math.isnan(value):
        return 0
    if value <= lower:
        return lower
    if value >= upper:
        return upper
    return int(value)


def to_i64(value: float) -> int:
    return saturating_int(value, I64_MIN, I64_MAX)


def to_u16(value: float) -> int:
    return saturating_int(value, 0, U16_MAX)


def to_u32(value: float) -> int:
    return saturating_int(value, 0, U32_MAX)


def to_u64(value: float) -> int:
    return saturating_int(value, 0, U64_MAX)


def to_f32(value: float) -> float:
    """Round a double to the nearest single-precision value."""
    try:
        return _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def f32_repr(value: float) -> float:
    """
    Shortest double that narrows back to the same single-precision value.

    `to_f32(2.6)` is stored as 2.5999999046325684; this returns 2.6 so the
    value reads the way the station sent it.
    """
    if not math.isfinite(value):
        return value
    narrowed = to_f32(value)
    for precision in range(1, 10):
        candidate = float(f"{narrowed:.{precision}g}")
        if to_f32(candidate) == narrowed:
            return candidate
    return narrowed
