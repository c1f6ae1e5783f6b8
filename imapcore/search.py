"""Options, criteria and results of the SEARCH command."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from imapcore.numset import NumSet, SeqSet, UIDSet

__all__ = [
    "SearchOptions",
    "SearchCriteriaHeaderField",
    "SearchCriteriaMetadataType",
    "SearchCriteriaModSeq",
    "SearchCriteria",
    "SearchData",
]

_DYNAMIC_MESSAGE = "imap: SearchData.All is a dynamic number set"


@dataclass
class SearchOptions:
    """Options for the SEARCH command."""

    # IMAP4rev2 or ESEARCH
    return_min: bool = False
    return_max: bool = False
    return_all: bool = False
    return_count: bool = False
    # IMAP4rev2 or SEARCHRES
    return_save: bool = False


@dataclass(frozen=True)
class SearchCriteriaHeaderField:
    key: str
    value: str


class SearchCriteriaMetadataType(str, Enum):
    ALL = "all"
    PRIVATE = "priv"
    SHARED = "shared"

    def __str__(self) -> str:
        return self.value


@dataclass
class SearchCriteriaModSeq:
    mod_seq: int
    metadata_name: str = ""
    metadata_type: Optional[SearchCriteriaMetadataType] = None


def _intersect_since(a: Optional[date], b: Optional[date]) -> Optional[date]:
    if a is None:
        return b
    if b is None:
        return a
    return a if a > b else b


def _intersect_before(a: Optional[date], b: Optional[date]) -> Optional[date]:
    if a is None:
        return b
    if b is None:
        return a
    return a if a < b else b


@dataclass
class SearchCriteria:
    """Criteria for SEARCH; all populated fields must match.

    Only the date part of the date fields is meaningful. ``not_`` negates
    criteria and ``or_`` holds pairs of alternatives.
    """

    seq_num: List[SeqSet] = field(default_factory=list)
    uid: List[UIDSet] = field(default_factory=list)

    since: Optional[date] = None
    before: Optional[date] = None
    sent_since: Optional[date] = None
    sent_before: Optional[date] = None

    header: List[SearchCriteriaHeaderField] = field(default_factory=list)
    body: List[str] = field(default_factory=list)
    text: List[str] = field(default_factory=list)

    flag: List[str] = field(default_factory=list)
    not_flag: List[str] = field(default_factory=list)

    larger: int = 0
    smaller: int = 0

    not_: List["SearchCriteria"] = field(default_factory=list)
    or_: List[Tuple["SearchCriteria", "SearchCriteria"]] = field(default_factory=list)

    mod_seq: Optional[SearchCriteriaModSeq] = None  # requires CONDSTORE

    def and_(self, other: "SearchCriteria") -> None:
        """Narrow these criteria in place to the intersection with other."""
        self.seq_num.extend(other.seq_num)
        self.uid.extend(other.uid)

        self.since = _intersect_since(self.since, other.since)
        self.before = _intersect_before(self.before, other.before)
        self.sent_since = _intersect_since(self.sent_since, other.sent_since)
        self.sent_before = _intersect_before(self.sent_before, other.sent_before)

        self.header.extend(other.header)
        self.body.extend(other.body)
        self.text.extend(other.text)

        self.flag.extend(other.flag)
        self.not_flag.extend(other.not_flag)

        if self.larger == 0 or other.larger > self.larger:
            self.larger = other.larger
        if self.smaller == 0 or other.smaller < self.smaller:
            self.smaller = other.smaller

        self.not_.extend(other.not_)
        self.or_.extend(other.or_)


@dataclass
class SearchData:
    """Data returned by a SEARCH command."""

    all: Optional[NumSet] = None

    # IMAP4rev2 or ESEARCH
    uid: bool = False
    min: int = 0
    max: int = 0
    count: int = 0

    # CONDSTORE
    mod_seq: int = 0

    def all_seq_nums(self) -> List[int]:
        """The result as sequence numbers; empty if it holds UIDs."""
        if not isinstance(self.all, SeqSet):
            return []
        try:
            return self.all.nums()
        except ValueError:
            raise ValueError(_DYNAMIC_MESSAGE) from None

    def all_uids(self) -> List[int]:
        """The result as UIDs; empty if it holds sequence numbers."""
        if not isinstance(self.all, UIDSet):
            return []
        try:
            return self.all.nums()
        except ValueError:
            raise ValueError(_DYNAMIC_MESSAGE) from None