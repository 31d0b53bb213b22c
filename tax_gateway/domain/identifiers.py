"""Opaque identifiers for stored calculations"""

import secrets
import string
import time

_BASE36_DIGITS = string.digits + string.ascii_lowercase
_RANDOM_BYTES = 8


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("base36 encoding needs a non-negative number")
    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def new_calculation_id() -> str:
    """
    Generate a calculation identifier: base36 epoch milliseconds plus
    64 random bits, e.g. "mgu3kq2a-9f1c04d2b7e6a3c8".

    Holds no shared state, so concurrent requests need no locking.
    """
    millis = time.time_ns() // 1_000_000
    return f"{to_base36(millis)}-{secrets.token_hex(_RANDOM_BYTES)}"
