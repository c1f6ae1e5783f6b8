"""Options and data for LIST, NAMESPACE, SELECT, STATUS, STORE and related commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

__all__ = [
    "ListOptions",
    "ListDataChildInfo",
    "ListData",
    "NamespaceDescriptor",
    "NamespaceData",
    "QuotaResourceType",
    "SelectOptions",
    "SelectData",
    "StatusOptions",
    "StatusData",
    "StoreOptions",
    "StoreFlagsOp",
    "StoreFlags",
    "ThreadAlgorithm",
]


@dataclass
class StatusOptions:
    """Items requested by a STATUS command."""

    num_messages: bool = False
    uid_next: bool = False
    uid_validity: bool = False
    num_unseen: bool = False
    num_deleted: bool = False  # IMAP4rev2 or QUOTA
    size: bool = False  # IMAP4rev2 or STATUS=SIZE

    append_limit: bool = False  # APPENDLIMIT
    deleted_storage: bool = False  # QUOTA=RES-STORAGE
    highest_mod_seq: bool = False  # CONDSTORE


@dataclass
class StatusData:
    """Data returned by STATUS; only the mailbox name is always present."""

    mailbox: str
    num_messages: Optional[int] = None
    uid_next: int = 0
    uid_validity: int = 0
    num_unseen: Optional[int] = None
    num_deleted: Optional[int] = None
    size: Optional[int] = None

    append_limit: Optional[int] = None
    deleted_storage: Optional[int] = None
    highest_mod_seq: int = 0


@dataclass
class ListOptions:
    """Options for the LIST command."""

    select_subscribed: bool = False
    select_remote: bool = False
    select_recursive_match: bool = False  # requires select_subscribed
    select_special_use: bool = False  # SPECIAL-USE

    return_subscribed: bool = False
    return_children: bool = False
    return_status: Optional[StatusOptions] = None  # IMAP4rev2 or LIST-STATUS
    return_special_use: bool = False  # SPECIAL-USE


@dataclass
class ListDataChildInfo:
    subscribed: bool = False


@dataclass
class ListData:
    """Mailbox data returned by LIST. A delimiter of None means NIL."""

    mailbox: str
    attrs: List[str] = field(default_factory=list)
    delim: Optional[str] = None

    child_info: Optional[ListDataChildInfo] = None
    old_name: str = ""
    status: Optional[StatusData] = None


@dataclass(frozen=True)
class NamespaceDescriptor:
    prefix: str
    delim: Optional[str] = None


@dataclass
class NamespaceData:
    """Data returned by NAMESPACE."""

    personal: List[NamespaceDescriptor] = field(default_factory=list)
    other: List[NamespaceDescriptor] = field(default_factory=list)
    shared: List[NamespaceDescriptor] = field(default_factory=list)


class QuotaResourceType(str, Enum):
    """QUOTA resource types (RFC 9208 section 5)."""

    STORAGE = "STORAGE"
    MESSAGE = "MESSAGE"
    MAILBOX = "MAILBOX"
    ANNOTATION_STORAGE = "ANNOTATION-STORAGE"

    def __str__(self) -> str:
        return self.value


@dataclass
class SelectOptions:
    read_only: bool = False
    cond_store: bool = False  # CONDSTORE


@dataclass
class SelectData:
    """Data returned by SELECT or EXAMINE."""

    flags: List[str] = field(default_factory=list)
    permanent_flags: List[str] = field(default_factory=list)
    num_messages: int = 0
    uid_next: int = 0
    uid_validity: int = 0

    list: Optional[ListData] = None  # IMAP4rev2

    highest_mod_seq: int = 0  # CONDSTORE


@dataclass
class StoreOptions:
    unchanged_since: int = 0  # CONDSTORE


class StoreFlagsOp(IntEnum):
    """How STORE alters flags."""

    SET = 0
    ADD = 1
    DEL = 2


@dataclass
class StoreFlags:
    op: StoreFlagsOp = StoreFlagsOp.SET
    silent: bool = False
    flags: List[str] = field(default_factory=list)


class ThreadAlgorithm(str, Enum):
    ORDERED_SUBJECT = "ORDEREDSUBJECT"
    REFERENCES = "REFERENCES"

    def __str__(self) -> str:
        return self.value