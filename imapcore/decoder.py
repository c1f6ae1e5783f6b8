"""Reading IMAP data from a byte stream.

Methods named after grammar elements return the element, or None (False for
the boolean ones) when another element follows. The ``expect_*`` methods
raise DecoderExpectError instead. Reading past the end of the stream raises
EOFError.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Callable, Optional, Tuple, Union

from imapcore import utf7
from imapcore.numset import NumSet, UIDSet, search_res
from imapcore.wire import ConnSide, NumKind, parse_seq_set, parse_uid_set

__all__ = ["DecoderExpectError", "Decoder", "LiteralReader", "is_atom_char"]

# Limits the nesting depth of parenthesized lists.
MAX_LIST_DEPTH = 1000

_NON_ATOM = frozenset(b'(){ %*"\\]')
_CHUNK = 4096

ByteLike = Union[int, str]


def _as_byte(ch: ByteLike) -> int:
    return ord(ch) if isinstance(ch, str) else ch


def is_atom_char(ch: ByteLike) -> bool:
    """Whether ch (a byte value or a one-character string) is an ATOM-CHAR."""
    byte = _as_byte(ch)
    if byte in _NON_ATOM:
        return False
    return not (byte < 0x20 or 0x7F <= byte <= 0x9F)


def _is_astring_char(byte: int) -> bool:
    return is_atom_char(byte) or byte == 0x5D


def _is_num_set_char(byte: int) -> bool:
    return byte == 0x2A or is_atom_char(byte)


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="surrogateescape")


def _quote_byte(byte: int) -> str:
    if byte in (0x22, 0x5C):
        return '"\\' + chr(byte) + '"'
    if 0x20 <= byte < 0x7F:
        return '"' + chr(byte) + '"'
    return f'"\\x{byte:02x}"'


class DecoderExpectError(Exception):
    """Raised when the data does not match what an expect_* method requires."""

    def __init__(self, message: str) -> None:
        super().__init__(f"imapwire: {message}")
        self.message = message


class Decoder:
    """Reads IMAP data from a binary stream."""

    def __init__(
        self,
        stream: BinaryIO,
        side: ConnSide,
        *,
        check_buffered_literal: Optional[Callable[[int, bool], None]] = None,
    ) -> None:
        self._stream = stream
        self.side = ConnSide(side)
        # Called with (size, non_sync) before a literal is buffered in memory;
        # it may raise to refuse the literal.
        self.check_buffered_literal = check_buffered_literal
        self._buf = b""
        self._pos = 0
        self._literal = False
        self._crlf = False
        self._list_depth = 0

    # -- low-level byte access ------------------------------------------

    def _fill(self) -> bool:
        if self._pos < len(self._buf):
            return True
        read1 = getattr(self._stream, "read1", None)
        chunk = read1(_CHUNK) if read1 is not None else self._stream.read(1)
        if not chunk:
            return False
        self._buf = bytes(chunk)
        self._pos = 0
        return True

    def _read_byte(self) -> int:
        self._crlf = False
        if self._literal:
            raise RuntimeError("imapwire: cannot decode while a literal is open")
        if not self._fill():
            raise EOFError("unexpected EOF")
        byte = self._buf[self._pos]
        self._pos += 1
        return byte

    def _unread(self) -> None:
        self._pos -= 1

    def _accept(self, want: int) -> bool:
        if self._read_byte() != want:
            self._unread()
            return False
        return True

    def _read_raw(self, size: int) -> bytes:
        out = bytearray(self._buf[self._pos:self._pos + size])
        self._pos += len(out)
        while len(out) < size:
            chunk = self._stream.read(size - len(out))
            if not chunk:
                break
            out += chunk
        return bytes(out)

    def _enter_list(self) -> None:
        self._list_depth += 1
        if self._list_depth >= MAX_LIST_DEPTH:
            self._list_depth -= 1
            raise ValueError("imapwire: exceeded max depth")

    # -- grammar ----------------------------------------------------------

    def eof(self) -> bool:
        """Whether the end of the stream is reached."""
        return not self._fill()

    def expect(self, ok: bool, name: str) -> None:
        """Raise DecoderExpectError naming what was expected unless ok."""
        if ok:
            return
        message = f"expected {name}"
        if self._pos < len(self._buf):
            message += f", got {_quote_byte(self._buf[self._pos])}"
        raise DecoderExpectError(message)

    def sp(self) -> bool:
        """Consume a space; a following "(" also counts as a separator."""
        if self._accept(0x20):
            byte = self._read_byte()
            self._unread()
            return byte not in (0x0D, 0x0A)
        byte = self._read_byte()
        self._unread()
        return byte == 0x28

    def expect_sp(self) -> None:
        self.expect(self.sp(), "SP")

    def crlf(self) -> bool:
        """Consume a line ending, tolerating a leading space and a lone LF."""
        self._accept(0x20)
        self._accept(0x0D)
        if not self._accept(0x0A):
            return False
        self._crlf = True
        return True

    def expect_crlf(self) -> None:
        self.expect(self.crlf(), "CRLF")

    def func(self, valid: Callable[[int], bool]) -> Optional[str]:
        """Read the longest run of bytes accepted by valid; None if empty."""
        data = bytearray()
        while True:
            byte = self._read_byte()
            if not valid(byte):
                self._unread()
                break
            data.append(byte)
        return _text(bytes(data)) if data else None

    def atom(self) -> Optional[str]:
        return self.func(is_atom_char)

    def expect_atom(self) -> str:
        value = self.atom()
        self.expect(value is not None, "atom")
        return value  # type: ignore[return-value]

    def expect_nil(self) -> None:
        value = self.expect_atom()
        self.expect(value == "NIL", "NIL")

    def special(self, ch: ByteLike) -> bool:
        return self._accept(_as_byte(ch))

    def expect_special(self, ch: ByteLike) -> None:
        byte = _as_byte(ch)
        self.expect(self.special(byte), f"'{chr(byte)}'")

    def text(self) -> Optional[str]:
        """Read up to the end of the line; None if the line is empty."""
        data = bytearray()
        while True:
            byte = self._read_byte()
            if byte in (0x0D, 0x0A):
                self._unread()
                break
            data.append(byte)
        return _text(bytes(data)) if data else None

    def expect_text(self) -> str:
        value = self.text()
        self.expect(value is not None, "text")
        return value  # type: ignore[return-value]

    def discard_until_byte(self, until: ByteLike) -> None:
        """Skip bytes up to, but not including, until."""
        target = _as_byte(until)
        while self._read_byte() != target:
            pass
        self._unread()

    def discard_line(self) -> None:
        """Skip the rest of the current line, unless a line ending was just read."""
        if self._crlf:
            return
        self.text()
        self.crlf()

    def discard_value(self) -> None:
        """Skip one string, atom or (possibly nested) list."""
        opened = 0
        try:
            while True:
                if self.string() is None:
                    if self.special("("):
                        if not self.special(")"):
                            self._enter_list()
                            opened += 1
                            continue
                    elif self.atom() is None:
                        self.expect(False, "value")
                while opened:
                    if self.special(")"):
                        self._list_depth -= 1
                        opened -= 1
                    else:
                        self.expect_sp()
                        break
                else:
                    return
        finally:
            self._list_depth -= opened

    def _number_str(self) -> Optional[str]:
        return self.func(lambda byte: 0x30 <= byte <= 0x39)

    def _bounded_number(self, limit: int) -> Optional[int]:
        digits = self._number_str()
        if digits is None:
            return None
        value = int(digits)
        return value if value <= limit else None

    def number(self) -> Optional[int]:
        """Read a 32-bit unsigned number; None if absent or too large."""
        return self._bounded_number(0xFFFFFFFF)

    def expect_number(self) -> int:
        value = self.number()
        self.expect(value is not None, "number")
        return value  # type: ignore[return-value]

    def expect_body_fld_octets(self) -> int:
        """Read a body size, reading the "-1" some servers send as 0."""
        if self._accept(0x2D):
            self.expect(self._accept(0x31), "-1 (body-fld-octets workaround)")
            return 0
        return self.expect_number()

    def number64(self) -> Optional[int]:
        """Read a non-negative 63-bit number; None if absent or too large."""
        return self._bounded_number(0x7FFFFFFFFFFFFFFF)

    def expect_number64(self) -> int:
        value = self.number64()
        self.expect(value is not None, "number64")
        return value  # type: ignore[return-value]

    def mod_seq(self) -> Optional[int]:
        """Read a 64-bit unsigned mod-sequence value."""
        return self._bounded_number(0xFFFFFFFFFFFFFFFF)

    def expect_mod_seq(self) -> int:
        value = self.mod_seq()
        self.expect(value is not None, "mod-sequence-value")
        return value  # type: ignore[return-value]

    def quoted(self) -> Optional[str]:
        if not self.special('"'):
            return None
        data = bytearray()
        while True:
            byte = self._read_byte()
            if byte == 0x22:
                break
            if byte == 0x5C:
                byte = self._read_byte()
            data.append(byte)
        return _text(bytes(data))

    def expect_astring(self) -> str:
        value = self.quoted()
        if value is not None:
            return value
        value = self.literal()
        if value is not None:
            return value
        # Unquoted mailbox names may contain "]", so atom() is too strict.
        value = self.func(_is_astring_char)
        self.expect(value is not None, "ASTRING-CHAR")
        return value  # type: ignore[return-value]

    def string(self) -> Optional[str]:
        value = self.quoted()
        if value is not None:
            return value
        return self.literal()

    def expect_string(self) -> str:
        value = self.string()
        self.expect(value is not None, "string")
        return value  # type: ignore[return-value]

    def expect_nstring(self) -> str:
        """Read a string or NIL; NIL is returned as an empty string."""
        word = self.atom()
        if word is not None:
            self.expect(word == "NIL", "nstring")
            return ""
        return self.expect_string()

    def expect_nstring_reader(self) -> Tuple[Optional["LiteralReader"], bool]:
        """Read a string or NIL as a reader; returns (reader or None, non_sync)."""
        word = self.atom()
        if word is not None:
            self.expect(word == "NIL", "nstring")
            return None, True
        value = self.quoted()
        if value is not None:
            return LiteralReader.from_bytes(value.encode("utf-8", errors="surrogateescape")), True
        result = self.literal_reader()
        if result is None:
            self.expect(False, "nstring")
        return result  # type: ignore[return-value]

    def list(self, parse_item: Callable[[], object]) -> bool:
        """Read a parenthesized list, calling parse_item for each item.

        Returns False, consuming nothing, if no list starts here.
        """
        if not self.special("("):
            return False
        if self.special(")"):
            return True
        self._enter_list()
        try:
            while True:
                parse_item()
                if self.special(")"):
                    return True
                self.expect_sp()
        finally:
            self._list_depth -= 1

    def expect_list(self, parse_item: Callable[[], object]) -> None:
        self.expect(self.list(parse_item), "(")

    def expect_nlist(self, parse_item: Callable[[], object]) -> None:
        word = self.atom()
        if word is not None:
            self.expect(word == "NIL", "NIL")
            return
        self.expect_list(parse_item)

    def expect_mailbox(self) -> str:
        """Read a mailbox name, decoding modified UTF-7; INBOX is normalised."""
        name = self.expect_astring()
        if name.casefold() == "inbox":
            return "INBOX"
        return utf7.decode(name)

    def expect_uid(self) -> int:
        return self.expect_number()

    def expect_num_set(self, kind: NumKind) -> NumSet:
        """Read a sequence-set, or "$" for the last SEARCH result."""
        if self.special("$"):
            return search_res()
        text = self.func(_is_num_set_char)
        self.expect(text is not None, "sequence-set")
        if NumKind(kind) is NumKind.UID:
            return parse_uid_set(text)  # type: ignore[arg-type]
        return parse_seq_set(text)  # type: ignore[arg-type]

    def expect_uid_set(self) -> UIDSet:
        return self.expect_num_set(NumKind.UID)  # type: ignore[return-value]

    def literal(self) -> Optional[str]:
        """Read a literal fully into memory; None if no literal starts here."""
        result = self.literal_reader()
        if result is None:
            return None
        reader, non_sync = result
        if self.check_buffered_literal is not None:
            try:
                self.check_buffered_literal(reader.size, non_sync)
            except BaseException:
                reader._cancel()
                raise
        return _text(reader.read())

    def literal_reader(self) -> Optional[Tuple["LiteralReader", bool]]:
        """Start reading a literal; returns (reader, non_sync) or None.

        The decoder cannot read anything else until the reader is exhausted.
        """
        if not self.special("{"):
            return None
        size = self.expect_number64()
        non_sync = False
        if self.side is ConnSide.SERVER:
            non_sync = self._accept(0x2B)
        self.expect_special("}")
        self.expect_crlf()
        self._literal = True
        return LiteralReader(self, size), non_sync

    def expect_literal_reader(self) -> Tuple["LiteralReader", bool]:
        result = self.literal_reader()
        self.expect(result is not None, "literal")
        return result  # type: ignore[return-value]


class LiteralReader:
    """Reads the bytes of a literal."""

    def __init__(self, decoder: Optional[Decoder], size: int) -> None:
        self._decoder = decoder
        self.size = size
        self._remaining = size
        self._data: Optional[io.BytesIO] = None
        if decoder is not None and size == 0:
            self._cancel()

    @classmethod
    def from_bytes(cls, data: bytes) -> "LiteralReader":
        reader = cls(None, len(data))
        reader._data = io.BytesIO(data)
        return reader

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes, or everything left if size is negative."""
        if self._data is not None:
            return self._data.read(size)
        if self._decoder is None:
            return b""
        count = self._remaining if size < 0 else min(size, self._remaining)
        data = self._decoder._read_raw(count)
        self._remaining -= len(data)
        if len(data) < count:
            self._cancel()
            raise EOFError("unexpected EOF in literal")
        if self._remaining == 0:
            self._cancel()
        return data

    def _cancel(self) -> None:
        if self._decoder is None:
            return
        self._decoder._literal = False
        self._decoder = None