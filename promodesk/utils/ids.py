"""Record id generation.

Ids look like ``id_1718000000000_k3j9x0a2b``: the creation time in epoch
milliseconds followed by nine random base-36 characters.  Uniqueness is
only required within one store; the store regenerates on the (unlikely)
collision.
"""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_id(now_ms: int | None = None) -> str:
    """Return a fresh opaque record id."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"id_{now_ms}_{suffix}"
