"""Typed sets of message sequence numbers and UIDs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union

from imapcore.imapnum import Range, Set

__all__ = [
    "NumSet",
    "SeqRange",
    "UIDRange",
    "SeqSet",
    "UIDSet",
    "seq_set_num",
    "uid_set_num",
    "search_res",
    "is_search_res",
]


@dataclass(frozen=True)
class SeqRange(Range):
    """A range of message sequence numbers; 0 stands for "*"."""


@dataclass(frozen=True)
class UIDRange(Range):
    """A range of message UIDs; 0 stands for "*"."""


def _plain(value: Range) -> Range:
    return Range(value.start, value.stop)


class _TypedSet(Set):
    __slots__ = ()
    _range_type = Range

    def __init__(self, ranges: Iterable[Range] = ()) -> None:
        super().__init__([_plain(value) for value in ranges])

    def _check_mutable(self) -> None:
        if is_search_res(self):
            raise TypeError("imap: the SEARCH result marker cannot be modified")

    def add_num(self, *args: int) -> None:
        """Insert numbers; 0 stands for "*"."""
        self._check_mutable()
        super().add_num(*args)

    def add_range(self, start: int, stop: int) -> None:
        """Insert the range start:stop."""
        self._check_mutable()
        super().add_range(start, stop)

    def add_set(self, other: Iterable[Range]) -> None:
        """Insert every range of other."""
        self._check_mutable()
        super().add_set([_plain(value) for value in other])

    def __iter__(self) -> Iterator[Range]:
        for value in super().__iter__():
            yield self._range_type(value.start, value.stop)

    def __getitem__(self, index: int) -> Range:
        value = super().__getitem__(index)
        return self._range_type(value.start, value.stop)


class SeqSet(_TypedSet):
    """A set of message sequence numbers."""

    __slots__ = ()
    _range_type = SeqRange

    def dynamic(self) -> bool:
        """Whether the set contains "*" or an "n:*" range."""
        return super().dynamic()

    def copy(self) -> "SeqSet":
        return SeqSet(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeqSet):
            return NotImplemented
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]


class UIDSet(_TypedSet):
    """A set of message UIDs."""

    __slots__ = ()
    _range_type = UIDRange

    def dynamic(self) -> bool:
        """Whether the set contains "*", an "n:*" range, or is the SEARCH result marker."""
        return super().dynamic() or is_search_res(self)

    def copy(self) -> "UIDSet":
        return UIDSet(self)

    def __str__(self) -> str:
        if is_search_res(self):
            return "$"
        return super().__str__()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UIDSet):
            return NotImplemented
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]


NumSet = Union[SeqSet, UIDSet]


class _SearchResMarker(UIDSet):
    __slots__ = ()

    def __repr__(self) -> str:
        return "UIDSet('$')"


_SEARCH_RES = _SearchResMarker()


def seq_set_num(*args: int) -> SeqSet:
    """Build a SeqSet from sequence numbers; 0 stands for "*"."""
    result = SeqSet()
    result.add_num(*args)
    return result


def uid_set_num(*args: int) -> UIDSet:
    """Build a UIDSet from UIDs; 0 stands for "*"."""
    result = UIDSet()
    result.add_num(*args)
    return result


def search_res() -> UIDSet:
    """The marker referencing the last SEARCH result, written "$" on the wire."""
    return _SEARCH_RES


def is_search_res(num_set: object) -> bool:
    """Whether num_set is the marker returned by search_res()."""
    return num_set is _SEARCH_RES


def _nums(num_set: NumSet) -> List[int]:
    return num_set.nums()