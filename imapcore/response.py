"""Generic IMAP status responses and the error they raise."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

__all__ = ["StatusResponseType", "ResponseCode", "StatusResponse", "IMAPError"]


class StatusResponseType(str, Enum):
    """Kind of a status response."""

    OK = "OK"
    NO = "NO"
    BAD = "BAD"
    PREAUTH = "PREAUTH"
    BYE = "BYE"

    def __str__(self) -> str:
        return self.value


class ResponseCode(str, Enum):
    """Known response codes."""

    ALERT = "ALERT"
    ALREADY_EXISTS = "ALREADYEXISTS"
    AUTHENTICATION_FAILED = "AUTHENTICATIONFAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATIONFAILED"
    BAD_CHARSET = "BADCHARSET"
    CANNOT = "CANNOT"
    CLIENT_BUG = "CLIENTBUG"
    CONTACT_ADMIN = "CONTACTADMIN"
    CORRUPTION = "CORRUPTION"
    EXPIRED = "EXPIRED"
    HAS_CHILDREN = "HASCHILDREN"
    IN_USE = "INUSE"
    LIMIT = "LIMIT"
    NON_EXISTENT = "NONEXISTENT"
    NO_PERM = "NOPERM"
    OVER_QUOTA = "OVERQUOTA"
    PARSE = "PARSE"
    PRIVACY_REQUIRED = "PRIVACYREQUIRED"
    SERVER_BUG = "SERVERBUG"
    TRY_CREATE = "TRYCREATE"
    UNAVAILABLE = "UNAVAILABLE"
    UNKNOWN_CTE = "UNKNOWN-CTE"

    # METADATA
    TOO_MANY = "TOOMANY"
    NO_PRIVATE = "NOPRIVATE"

    # APPENDLIMIT
    TOO_BIG = "TOOBIG"

    def __str__(self) -> str:
        return self.value


ResponseTypeLike = Union[StatusResponseType, str]
ResponseCodeLike = Union[ResponseCode, str, None]


def _label(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class StatusResponse:
    """A generic status response (RFC 9051 section 7.1)."""

    type: ResponseTypeLike
    code: ResponseCodeLike = None
    text: str = ""


class IMAPError(Exception):
    """An error caused by a status response."""

    def __init__(self, type: ResponseTypeLike, code: ResponseCodeLike = None, text: str = "") -> None:
        self.type = type
        self.code = code
        self.text = text
        super().__init__(self._message())

    @classmethod
    def from_response(cls, response: StatusResponse) -> "IMAPError":
        """Build the error carried by a status response."""
        return cls(response.type, response.code, response.text)

    def _message(self) -> str:
        parts = [f"imap: {_label(self.type)}"]
        if self.code:
            parts.append(f"[{_label(self.code)}]")
        parts.append(self.text or "<unknown>")
        return " ".join(parts)

    def __str__(self) -> str:
        return self._message()

    @property
    def response(self) -> StatusResponse:
        return StatusResponse(self.type, self.code, self.text)