"""Base64 helpers for SASL challenges and responses in IMAP."""

from __future__ import annotations

import base64

__all__ = ["encode_sasl", "decode_sasl"]


def encode_sasl(data: bytes) -> str:
    """Encode a SASL payload; an empty payload is written as "="."""
    if not data:
        return "="
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_sasl(s: str) -> bytes:
    """Decode a SASL payload; "=" stands for an empty payload.

    Raises ValueError (binascii.Error) on malformed base64.
    """
    if s == "=":
        return b""
    cleaned = s.replace("\r", "").replace("\n", "")
    return base64.b64decode(cleaned, validate=True)