"""Modified UTF-7 encoding for IMAP mailbox names (RFC 3501 section 5.1.3)."""

from __future__ import annotations

import base64
import itertools
import string
from typing import Iterable, Iterator, Union

__all__ = ["InvalidUTF7Error", "encode", "decode", "escape"]

_MIN = 0x20  # lowest self-representing code point
_MAX = 0x7E  # highest self-representing code point
_REPLACEMENT = 0xFFFD

_B64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+,")

Source = Union[str, bytes, bytearray]


class InvalidUTF7Error(ValueError):
    """Raised when input is not valid modified UTF-7."""

    def __init__(self, message: str = "utf7: invalid UTF-7") -> None:
        super().__init__(message)


def _is_printable(code: int) -> bool:
    return _MIN <= code <= _MAX


def _utf8_sequence_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def _runes_from_bytes(data: bytes) -> Iterator[int]:
    """Yield code points, turning each undecodable byte into U+FFFD."""
    pos = 0
    while pos < len(data):
        size = _utf8_sequence_length(data[pos])
        if size:
            try:
                char = data[pos:pos + size].decode("utf-8")
            except UnicodeDecodeError:
                pass
            else:
                yield ord(char)
                pos += size
                continue
        yield _REPLACEMENT
        pos += 1


def _code_points(src: Source) -> Iterator[int]:
    if isinstance(src, (bytes, bytearray)):
        yield from _runes_from_bytes(bytes(src))
        return
    for char in src:
        code = ord(char)
        yield _REPLACEMENT if 0xD800 <= code <= 0xDFFF else code


def _encode_run(codes: Iterable[int]) -> str:
    units = bytearray()
    for code in codes:
        if code >= 0x10000:
            offset = code - 0x10000
            units += (0xD800 + (offset >> 10)).to_bytes(2, "big")
            units += (0xDC00 + (offset & 0x3FF)).to_bytes(2, "big")
        else:
            units += code.to_bytes(2, "big")
    encoded = base64.b64encode(bytes(units)).decode("ascii").rstrip("=")
    return "&" + encoded.replace("/", ",") + "-"


def encode(src: Source) -> str:
    """Encode a string with modified UTF-7.

    Bytes are read as UTF-8; each byte that cannot be decoded becomes U+FFFD.
    """
    parts = []
    for printable, group in itertools.groupby(_code_points(src), key=_is_printable):
        if printable:
            for code in group:
                parts.append(chr(code))
                if code == 0x26:
                    parts.append("-")
        else:
            parts.append(_encode_run(group))
    return "".join(parts)


def _decode_segment(segment: str) -> str:
    if any(char not in _B64_ALPHABET for char in segment):
        raise InvalidUTF7Error()
    remainder = len(segment) % 4
    if remainder == 1:
        raise InvalidUTF7Error()
    padded = segment.replace(",", "/") + "=" * ((4 - remainder) % 4)
    raw = base64.b64decode(padded)
    if not raw or len(raw) % 2:
        raise InvalidUTF7Error()

    units = iter(int.from_bytes(raw[k:k + 2], "big") for k in range(0, len(raw), 2))
    chars = []
    for unit in units:
        if 0xD800 <= unit <= 0xDFFF:
            low = next(units, None)
            if low is None or unit > 0xDBFF or not 0xDC00 <= low <= 0xDFFF:
                raise InvalidUTF7Error()
            code = 0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00)
        elif _is_printable(unit):
            raise InvalidUTF7Error()
        else:
            code = unit
        chars.append(chr(code))
    return "".join(chars)


def _as_text(src: Source) -> str:
    if isinstance(src, (bytes, bytearray)):
        try:
            return bytes(src).decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidUTF7Error("invalid UTF-8") from None
    try:
        src.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidUTF7Error("invalid UTF-8") from None
    return src


def decode(src: Source) -> str:
    """Decode a string encoded with modified UTF-7.

    Raw non-ASCII UTF-8 is accepted as is.
    """
    text = _as_text(src)
    parts = []
    after_ascii = True
    pos = 0
    while pos < len(text):
        char = text[pos]
        code = ord(char)
        if code < _MIN or _MAX < code < 0x80:
            raise InvalidUTF7Error()
        if char != "&":
            parts.append(char)
            after_ascii = True
            pos += 1
            continue

        end = text.find("-", pos + 1)
        segment = text[pos + 1:end] if end >= 0 else text[pos + 1:]
        if "\r" in segment or "\n" in segment or end < 0:
            raise InvalidUTF7Error()

        if not segment:
            parts.append("&")
            after_ascii = True
        else:
            if not after_ascii:
                raise InvalidUTF7Error()
            parts.append(_decode_segment(segment))
            after_ascii = False
        pos = end + 1
    return "".join(parts)


def escape(src: str) -> str:
    """Pass raw UTF-8 through, escaping only the '&' shift character."""
    return src.replace("&", "&-")