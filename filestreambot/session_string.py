"""Encoding of an authorized session as a Pyrogram session string."""

from __future__ import annotations

import base64
import struct

AUTH_KEY_LENGTH = 256
AUTH_KEY_ID_LENGTH = 8


def encode_pyrogram_session(
    dc: int,
    app_id: int,
    test_mode: bool,
    auth_key: bytes,
    auth_key_id: bytes,
) -> str:
    """Return the unpadded URL-safe base64 session string."""
    if not 0 <= dc <= 0xFF:
        raise ValueError("data center id must fit in one byte")
    if len(auth_key) != AUTH_KEY_LENGTH:
        raise ValueError(f"auth key must be {AUTH_KEY_LENGTH} bytes long")
    if len(auth_key_id) != AUTH_KEY_ID_LENGTH:
        raise ValueError(f"auth key ID must be {AUTH_KEY_ID_LENGTH} bytes long")
    try:
        header = struct.pack(">BiB", dc, app_id, 1 if test_mode else 0)
    except struct.error as exc:
        raise ValueError("app id must fit in a signed 32-bit integer") from exc
    raw = header + bytes(auth_key) + bytes(auth_key_id) + b"\x00"
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")