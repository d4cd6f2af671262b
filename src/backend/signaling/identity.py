# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Opaque client id generation."""

import secrets
import string
import time
from collections.abc import Container
from typing import Optional

_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 9


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_client_id(existing: Optional[Container[str]] = None) -> str:
    """Return a new client id.

    The id is the current time in milliseconds (base 36) followed by nine
    random base-36 characters. When ``existing`` is given, ids found in it
    are regenerated so the result is unique among live clients.
    """
    while True:
        stamp = _to_base36(time.time_ns() // 1_000_000)
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
        client_id = stamp + suffix
        if existing is None or client_id not in existing:
            return client_id
