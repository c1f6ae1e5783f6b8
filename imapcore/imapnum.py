"""Sets of IMAP message sequence numbers or UIDs (the sequence-set rule).

Zero stands for "*" throughout, which is safe because real numbers are
always non-zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

__all__ = [
    "MAX_NUM",
    "BadNumSetError",
    "Range",
    "Set",
    "parse_num",
    "parse_num_range",
    "parse_set",
]

MAX_NUM = 0xFFFFFFFF

_DIGITS = frozenset("0123456789")


class BadNumSetError(ValueError):
    """Raised when a number set value is malformed."""

    def __init__(self, value: str) -> None:
        super().__init__(f'imap: bad number set value "{value}"')
        self.value = value


@dataclass(frozen=True)
class Range:
    """A seq-number or seq-range value.

    A single number has start == stop. Zero represents "*". Always
    start <= stop, except for "n:*" which is start = n, stop = 0.
    """

    start: int
    stop: int

    def contains(self, q: int) -> bool:
        """Whether the number q (0 meaning "*") lies in this range."""
        if q == 0:
            return self.stop == 0
        return self.start != 0 and self.start <= q and (q <= self.stop or self.stop == 0)

    def less(self, q: int) -> bool:
        """Whether this range precedes, and does not contain, q."""
        return (self.stop < q or q == 0) and self.stop != 0

    def merge(self, other: "Range") -> Optional["Range"]:
        """Return the union of the two ranges, or None if they cannot be joined."""
        s, t = self, other
        if s == t:
            return s
        if s.start != 0 and t.start != 0:
            if s.start > t.start:
                s, t = t, s
            if (s.stop >= t.stop and t.stop != 0) or s.stop == 0:
                return s
            if s.stop + 1 >= t.start:
                return Range(s.start, t.stop)
            return None
        # exactly one of the two is "*"
        if s.start == 0:
            if t.stop == 0:
                return t
        elif s.stop == 0:
            return s
        return None

    def nums(self) -> List[int]:
        """All numbers in the range; raises ValueError for dynamic ranges."""
        if self.start == 0 or self.stop == 0:
            raise ValueError(f"imap: dynamic range {self} has no fixed numbers")
        return list(range(self.start, self.stop + 1))

    def __str__(self) -> str:
        if self.start == self.stop:
            return "*" if self.start == 0 else str(self.start)
        if self.stop == 0:
            return f"{self.start}:*"
        return f"{self.start}:{self.stop}"


class Set:
    """A normalised, sorted set of ranges. An empty Set is the empty set."""

    __slots__ = ("_ranges",)

    def __init__(self, ranges: Iterable[Range] = ()) -> None:
        self._ranges: List[Range] = []
        for value in ranges:
            self._insert(value)

    def add_num(self, *args: int) -> None:
        """Insert numbers; 0 stands for "*"."""
        for value in args:
            self._insert(Range(value, value))

    def add_range(self, start: int, stop: int) -> None:
        """Insert the range between start and stop, in either order."""
        if (stop < start and stop != 0) or start == 0:
            self._insert(Range(stop, start))
        else:
            self._insert(Range(start, stop))

    def add_set(self, other: Iterable[Range]) -> None:
        """Insert every range of other."""
        for value in list(other):
            self._insert(value)

    def dynamic(self) -> bool:
        """Whether the set contains "*" or an "n:*" range."""
        return bool(self._ranges) and self._ranges[-1].stop == 0

    def contains(self, q: int) -> bool:
        """Whether the non-zero number q is in the set; "n:*" holds all q >= n."""
        _, found = self._search(q)
        return found and q != 0

    def nums(self) -> List[int]:
        """All numbers in the set; raises ValueError if the set is dynamic."""
        result: List[int] = []
        for value in self._ranges:
            result.extend(value.nums())
        return result

    def copy(self) -> "Set":
        clone = Set()
        clone._ranges = list(self._ranges)
        return clone

    def _search(self, q: int) -> Tuple[int, bool]:
        ranges = self._ranges
        lo, hi = 0, len(ranges) - 1
        while lo < hi:
            mid = (lo + hi) >> 1
            if ranges[mid].less(q):
                lo = mid + 1
            else:
                hi = mid
        if hi < 0 or ranges[lo].less(q):
            return len(ranges), False
        return lo, ranges[lo].contains(q)

    def _insert(self, value: Range) -> None:
        ranges = self._ranges
        i, _ = self._search(value.start)
        merged = False
        if i > 0:
            union = ranges[i - 1].merge(value)
            if union is not None:
                ranges[i - 1] = union
                merged = True
        if i == len(ranges):
            if not merged:
                ranges.append(value)
            return
        if merged:
            i -= 1
        else:
            union = ranges[i].merge(value)
            if union is None:
                ranges.insert(i, value)
                return
            ranges[i] = union
        j = i + 1
        while j < len(ranges):
            union = ranges[i].merge(ranges[j])
            if union is None:
                break
            ranges[i] = union
            j += 1
        del ranges[i + 1:j]

    def __iter__(self) -> Iterator[Range]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __getitem__(self, index: int) -> Range:
        return self._ranges[index]

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Set):
            return NotImplemented
        return self._ranges == other._ranges

    def __str__(self) -> str:
        return ",".join(str(value) for value in self._ranges)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


def parse_num(value: str) -> int:
    """Parse a seq-number: a non-zero 32-bit number or "*" (returned as 0)."""
    if value and all(ch in _DIGITS for ch in value) and value[0] != "0":
        number = int(value)
        if number <= MAX_NUM:
            return number
    elif value == "*":
        return 0
    raise BadNumSetError(value)


def parse_num_range(value: str) -> Range:
    """Parse "n" or "n:m", where either side may be "*"."""
    start_text, sep, stop_text = value.partition(":")
    if not sep:
        number = parse_num(value)
        return Range(number, number)
    try:
        start = parse_num(start_text)
        stop = parse_num(stop_text)
    except BadNumSetError:
        raise BadNumSetError(value) from None
    if (stop < start and stop != 0) or start == 0:
        start, stop = stop, start
    return Range(start, stop)


def parse_set(text: str) -> Set:
    """Parse a comma-separated sequence-set."""
    result = Set()
    for part in text.split(","):
        value = parse_num_range(part)
        result.add_range(value.start, value.stop)
    return result