"""Connection sides, continuation requests and number-set helpers for the IMAP wire protocol."""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Optional

from imapcore.imapnum import parse_set
from imapcore.numset import NumSet, SeqSet, UIDSet

__all__ = [
    "ConnSide",
    "ContinuationCancelled",
    "ContinuationRequest",
    "NumKind",
    "num_set_kind",
    "parse_seq_set",
    "parse_uid_set",
]


class ConnSide(IntEnum):
    """The side of a connection."""

    CLIENT = 1
    SERVER = 2


class ContinuationCancelled(Exception):
    """Raised by ContinuationRequest.wait when the request was cancelled without a reason."""

    def __init__(self, message: str = "imapwire: continuation request cancelled") -> None:
        super().__init__(message)


class ContinuationRequest:
    """A continuation request.

    The sender calls either done or cancel, exactly once; the receiver calls wait.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._text = ""

    def _finish(self) -> None:
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._event.set()

    def cancel(self, error: Optional[BaseException] = None) -> None:
        """Cancel the request; wait will raise error, or ContinuationCancelled."""
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._error = error if error is not None else ContinuationCancelled()
            self._event.set()

    def done(self, text: str = "") -> None:
        """Complete the request with the continuation text."""
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._text = text
            self._event.set()

    def wait(self, timeout: Optional[float] = None) -> str:
        """Block until completed and return the text, or raise the cancellation error."""
        if not self._event.wait(timeout):
            raise TimeoutError("imapwire: timed out waiting for continuation request")
        if self._error is not None:
            raise self._error
        return self._text


class NumKind(IntEnum):
    """The kind of numbers a number set holds."""

    SEQ = 1
    UID = 2


def num_set_kind(num_set: NumSet) -> NumKind:
    """Return whether num_set holds sequence numbers or UIDs."""
    if isinstance(num_set, SeqSet):
        return NumKind.SEQ
    if isinstance(num_set, UIDSet):
        return NumKind.UID
    raise TypeError(f"imap: invalid NumSet type {type(num_set).__name__}")


def parse_seq_set(text: str) -> SeqSet:
    """Parse a sequence-set of message sequence numbers."""
    return SeqSet(parse_set(text))


def parse_uid_set(text: str) -> UIDSet:
    """Parse a sequence-set of UIDs."""
    return UIDSet(parse_set(text))