"""Time-ordered identifiers for user rows."""

import os
import time
import uuid


def uuid7() -> uuid.UUID:
    """
    Return a version 7 UUID: 48-bit Unix millisecond timestamp followed by random bits.

    Values generated later sort after earlier ones at millisecond resolution.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = rand >> 68  # 12 bits
    rand_b = rand & ((1 << 62) - 1)  # 62 bits
    value = (timestamp_ms & ((1 << 48) - 1)) << 80
    value |= 0x7 << 76
    value |= rand_a << 64
    value |= 0b10 << 62
    value |= rand_b
    return uuid.UUID(int=value)


def new_user_id() -> str:
    return str(uuid7())
