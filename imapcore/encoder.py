"""Writing IMAP data to a byte stream.

Most methods defer error reporting until crlf is called and return the
encoder so that calls can be chained.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Callable, Iterable, Optional, Union

from imapcore import utf7
from imapcore.numset import NumSet
from imapcore.wire import ConnSide, ContinuationRequest

__all__ = ["EncoderError", "Encoder", "LiteralWriter", "ListEncoder", "is_valid_flag"]

_MAX_QUOTED = 4096
_NON_ATOM = frozenset(b'(){ %*"\\]')


class EncoderError(Exception):
    """Raised when data cannot be encoded."""


def _is_atom_char(byte: int) -> bool:
    if byte in _NON_ATOM:
        return False
    return not (byte < 0x20 or 0x7F <= byte <= 0x9F)


def is_valid_flag(s: str) -> bool:
    """Whether s satisfies flag-keyword / flag-extension."""
    data = s.encode("utf-8")
    for index, byte in enumerate(data):
        if byte == 0x5C:
            if index != 0:
                return False
        elif not _is_atom_char(byte):
            return False
    return len(data) > 0


class Encoder:
    """Writes IMAP data to a binary stream, flushing it on each CRLF."""

    def __init__(
        self,
        stream: BinaryIO,
        side: ConnSide,
        *,
        quoted_utf8: bool = False,
        literal_minus: bool = False,
        literal_plus: bool = False,
        new_continuation_request: Optional[Callable[[], Optional[ContinuationRequest]]] = None,
    ) -> None:
        self._stream = stream
        self.side = ConnSide(side)
        # Raw UTF-8 in quoted strings (IMAP4rev2 or UTF8=ACCEPT).
        self.quoted_utf8 = quoted_utf8
        # Non-synchronizing literals for short payloads (IMAP4rev2 or LITERAL-).
        self.literal_minus = literal_minus
        # Non-synchronizing literals for all payloads (LITERAL+).
        self.literal_plus = literal_plus
        self.new_continuation_request = new_continuation_request
        self._buf = bytearray()
        self._err: Optional[BaseException] = None
        self._literal = False

    @property
    def err(self) -> Optional[BaseException]:
        """The first deferred error, if any."""
        return self._err

    def _set_err(self, err: BaseException) -> None:
        if self._err is None:
            self._err = err

    def _write(self, s: str) -> "Encoder":
        if self._err is not None:
            return self
        if self._literal:
            self._err = EncoderError("imapwire: cannot encode while a literal is open")
            return self
        self._buf += s.encode("utf-8")
        return self

    def _flush(self) -> None:
        data = bytes(self._buf)
        self._buf.clear()
        try:
            self._stream.write(data)
            flush = getattr(self._stream, "flush", None)
            if flush is not None:
                flush()
        except OSError as err:
            self._set_err(err)
            raise

    def crlf(self) -> None:
        """Write CRLF and flush; raise the first deferred error, if any."""
        self._write("\r\n")
        if self._err is not None:
            raise self._err
        self._flush()

    def atom(self, s: str) -> "Encoder":
        return self._write(s)

    def sp(self) -> "Encoder":
        return self._write(" ")

    def special(self, ch: Union[str, int]) -> "Encoder":
        return self._write(ch if isinstance(ch, str) else chr(ch))

    def quoted(self, s: str) -> "Encoder":
        escaped = s.replace("\\", "\\\\").replace('"', '\\"')
        return self._write(f'"{escaped}"')

    def string(self, s: str) -> "Encoder":
        """Write s quoted when possible, as a literal otherwise."""
        if not self._valid_quoted(s):
            self._string_literal(s)
            return self
        return self.quoted(s)

    def _valid_quoted(self, s: str) -> bool:
        if len(s.encode("utf-8")) > _MAX_QUOTED:
            return False
        if any(ch in "\x00\r\n" for ch in s):
            return False
        return self.quoted_utf8 or s.isascii()

    def _string_literal(self, s: str) -> None:
        data = s.encode("utf-8")
        sync: Optional[ContinuationRequest] = None
        needs_sync = (
            self.side is ConnSide.CLIENT
            and (not self.literal_minus or len(data) > _MAX_QUOTED)
            and not self.literal_plus
        )
        if needs_sync:
            if self.new_continuation_request is not None:
                sync = self.new_continuation_request()
            if sync is None:
                self._set_err(EncoderError("imapwire: cannot send synchronizing literal"))
                return
        writer = self.literal(len(data), sync)
        write_err: Optional[BaseException] = None
        close_err: Optional[BaseException] = None
        try:
            writer.write(data)
        except Exception as err:
            write_err = err
        try:
            writer.close()
        except Exception as err:
            close_err = err
        if write_err is not None:
            self._set_err(write_err)
        elif close_err is not None:
            self._set_err(close_err)

    def mailbox(self, name: str) -> "Encoder":
        """Write a mailbox name, encoding it with modified UTF-7 when needed."""
        if name.isascii() and name.upper() == "INBOX":
            return self.atom("INBOX")
        encoded = utf7.escape(name) if self.quoted_utf8 else utf7.encode(name)
        return self.string(encoded)

    def num_set(self, num_set: NumSet) -> "Encoder":
        text = str(num_set)
        if not text:
            self._set_err(EncoderError("imapwire: cannot encode empty sequence set"))
            return self
        return self._write(text)

    def flag(self, flag: str) -> "Encoder":
        text = str(flag)
        if text != "\\*" and not is_valid_flag(text):
            self._set_err(EncoderError(f"imapwire: invalid flag {text!r}"))
            return self
        return self._write(text)

    def mailbox_attr(self, attr: str) -> "Encoder":
        text = str(attr)
        if not text.startswith("\\") or not is_valid_flag(text):
            self._set_err(EncoderError(f"imapwire: invalid mailbox attribute {text!r}"))
            return self
        return self._write(text)

    def number(self, value: int) -> "Encoder":
        return self._write(str(int(value)))

    def number64(self, value: int) -> "Encoder":
        return self._write(str(int(value)))

    def mod_seq(self, value: int) -> "Encoder":
        return self._write(str(int(value)))

    def list(self, items: Iterable[Any], write_item: Callable[[Any], Any]) -> "Encoder":
        """Write a parenthesized list, calling write_item for each item."""
        self.special("(")
        for index, item in enumerate(items):
            if index > 0:
                self.sp()
            write_item(item)
        self.special(")")
        return self

    def begin_list(self) -> "ListEncoder":
        self.special("(")
        return ListEncoder(self)

    def nil(self) -> "Encoder":
        return self.atom("NIL")

    def text(self, s: str) -> "Encoder":
        return self._write(s)

    def uid(self, uid: int) -> "Encoder":
        return self.number(uid)

    def literal(self, size: int, sync: Optional[ContinuationRequest] = None) -> "LiteralWriter":
        """Start a literal of size bytes; exactly size bytes must then be written.

        With sync, the literal is synchronizing: the header is flushed and the
        encoder waits for the continuation request before returning.
        """
        if sync is not None and self.side is ConnSide.SERVER:
            raise ValueError("imapwire: sync must be None on a server-side literal")

        self._write("{")
        self.number64(size)
        if sync is None and self.side is ConnSide.CLIENT:
            self._write("+")
        self._write("}")

        if sync is None:
            self._write("\r\n")
        else:
            try:
                self.crlf()
            except Exception as err:
                return _ErrorWriter(err)
            try:
                sync.wait()
            except Exception as err:
                self._set_err(err)
                return _ErrorWriter(err)

        self._literal = True
        return LiteralWriter(self, size)


class LiteralWriter:
    """Receives the bytes of an open literal."""

    def __init__(self, encoder: Encoder, size: int) -> None:
        self._encoder = encoder
        self._remaining = size

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        if self._remaining - len(payload) < 0:
            raise EncoderError("wrote too many bytes in literal")
        self._encoder._buf += payload
        self._remaining -= len(payload)
        return len(payload)

    def close(self) -> None:
        self._encoder._literal = False
        if self._remaining != 0:
            raise EncoderError(f"wrote too few bytes in literal ({self._remaining} remaining)")

    def __enter__(self) -> "LiteralWriter":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class _ErrorWriter(LiteralWriter):
    def __init__(self, err: BaseException) -> None:
        self._err = err

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        raise self._err

    def close(self) -> None:
        raise self._err


class ListEncoder:
    """Writes the items of a parenthesized list one at a time."""

    def __init__(self, encoder: Encoder) -> None:
        self._encoder: Optional[Encoder] = encoder
        self._count = 0

    def item(self) -> Encoder:
        if self._encoder is None:
            raise RuntimeError("imapwire: list already ended")
        if self._count > 0:
            self._encoder.sp()
        self._count += 1
        return self._encoder

    def end(self) -> None:
        if self._encoder is None:
            raise RuntimeError("imapwire: list already ended")
        self._encoder.special(")")
        self._encoder = None