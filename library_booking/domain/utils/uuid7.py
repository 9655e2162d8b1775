"""
UUIDv7 generator following RFC 9562.

Books and bookings get time-ordered identifiers: the first 48 bits carry
the Unix timestamp in milliseconds, so ids created later sort after
earlier ones and SQLite primary-key inserts stay roughly sequential.
"""

import os
import time
from uuid import UUID

_VERSION_BITS = 0x7 << 76
_VARIANT_BITS = 0b10 << 62


def uuid7() -> UUID:
    """
    Generate a UUIDv7 (time-ordered).

    Layout (most significant bit first):
    - 48 bits: Unix timestamp in milliseconds
    - 4 bits: version (0111)
    - 12 bits: random (rand_a)
    - 2 bits: variant (10)
    - 62 bits: random (rand_b)

    Returns:
        A uuid.UUID instance with version 7.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    random_bits = int.from_bytes(os.urandom(10), byteorder="big")

    rand_a = (random_bits >> 62) & 0xFFF
    rand_b = random_bits & ((1 << 62) - 1)

    value = (
        (timestamp_ms & ((1 << 48) - 1)) << 80
        | _VERSION_BITS
        | rand_a << 64
        | _VARIANT_BITS
        | rand_b
    )
    return UUID(int=value)
