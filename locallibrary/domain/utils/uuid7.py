"""
UUIDv7 generator following RFC 9562.

Catalog ids are time-ordered: the first 48 bits are a Unix timestamp in
milliseconds, so records created later sort after earlier ones and SQLite
primary-key inserts stay clustered. The remaining bits (minus version and
variant) are random, which keeps ids globally unique.

RFC 9562: https://www.rfc-editor.org/rfc/rfc9562.html
"""

import os
import time
from typing import Optional
from uuid import UUID

_VERSION_BITS = 0x70
_VARIANT_BITS = 0x80


def uuid7(timestamp_ms: Optional[int] = None) -> UUID:
    """
    Generate a UUIDv7 (time-ordered).

    Layout (128 bits):
    - 48 bits: Unix timestamp in milliseconds
    - 4 bits: version (0111)
    - 12 bits: random
    - 2 bits: variant (10)
    - 62 bits: random

    Args:
        timestamp_ms: Optional timestamp to embed, defaults to now.
                      Must fit in 48 bits.

    Returns:
        A uuid.UUID instance with version 7.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000

    if not 0 <= timestamp_ms < 1 << 48:
        raise ValueError(f"timestamp_ms must fit in 48 bits, got {timestamp_ms}")

    rand = os.urandom(10)

    return UUID(
        bytes=timestamp_ms.to_bytes(6, byteorder="big")
        + bytes([_VERSION_BITS | (rand[0] & 0x0F), rand[1], _VARIANT_BITS | (rand[2] & 0x3F)])
        + rand[3:]
    )


def uuid7_timestamp_ms(value: UUID) -> int:
    """Extract the embedded millisecond timestamp from a UUIDv7."""
    if value.version != 7:
        raise ValueError(f"Not a version 7 UUID: {value}")
    return int.from_bytes(value.bytes[:6], byteorder="big")
