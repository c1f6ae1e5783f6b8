import random

import pytest

from imapcore.imapnum import (
    MAX_NUM,
    BadNumSetError,
    Range,
    Set,
    parse_num,
    parse_num_range,
    parse_set,
)

MAX = MAX_NUM


def check_num_set(s):
    ranges = list(s)
    n = len(ranges)
    for i, v in enumerate(ranges):
        if v.start == 0:
            assert v.stop == 0, f"{s}: '*:n' range at {i}"
            assert i == n - 1, f"{s}: '*' not at the end"
            continue
        if i > 0:
            assert ranges[i - 1].stop < v.start - 1, f"{s}: overlap at {i}"
        if v.stop < v.start:
            assert v.stop == 0, f"{s}: reversed range at {i}"
            assert i == n - 1, f"{s}: 'n:*' not at the end"


INVALID_RANGES = [
    "", " ", "A", "0", " 1", "1 ", "*1", "1*", "-1", "01", "0x1", "1 2", "1,2",
    "1.2", "4294967296",
    ":", "*:", ":*", "1:", ":1", "0:0", "0:*", "0:1", "1:0", "1:2 ", "1: 2",
    "1:2:", "1:2,", "1:2:3", "1:2,3", "*:4294967296", "0:4294967295",
    "1:4294967296", "4294967296:*", "4294967295:0", "4294967296:1",
    "4294967295:4294967296",
]

VALID_RANGES = [
    ("*", Range(0, 0)),
    ("1", Range(1, 1)),
    ("42", Range(42, 42)),
    ("1000", Range(1000, 1000)),
    ("4294967295", Range(MAX, MAX)),
    ("*:*", Range(0, 0)),
    ("1:*", Range(1, 0)),
    ("*:1", Range(1, 0)),
    ("2:2", Range(2, 2)),
    ("2:42", Range(2, 42)),
    ("42:2", Range(2, 42)),
    ("*:4294967294", Range(MAX - 1, 0)),
    ("*:4294967295", Range(MAX, 0)),
    ("4294967294:*", Range(MAX - 1, 0)),
    ("4294967295:*", Range(MAX, 0)),
    ("1:4294967294", Range(1, MAX - 1)),
    ("1:4294967295", Range(1, MAX)),
    ("4294967295:1000", Range(1000, MAX)),
    ("4294967294:4294967295", Range(MAX - 1, MAX)),
    ("4294967295:4294967295", Range(MAX, MAX)),
]


@pytest.mark.parametrize("text", INVALID_RANGES)
def test_parse_num_range_invalid(text):
    with pytest.raises(BadNumSetError):
        parse_num_range(text)


@pytest.mark.parametrize("text,expected", VALID_RANGES)
def test_parse_num_range_valid(text, expected):
    assert parse_num_range(text) == expected


def test_parse_num_values():
    assert parse_num("*") == 0
    assert parse_num("17") == 17
    with pytest.raises(BadNumSetError):
        parse_num("+1")


def test_bad_num_set_error_message():
    with pytest.raises(BadNumSetError) as info:
        parse_num_range("1:x")
    assert str(info.value) == 'imap: bad number set value "1:x"'


CONTAINS_LESS = [
    ("2", 0, False, True), ("2", 1, False, False), ("2", 2, True, False),
    ("2", 3, False, True), ("2", MAX, False, True),
    ("*", 0, True, False), ("*", 1, False, False), ("*", 2, False, False),
    ("*", 3, False, False), ("*", MAX, False, False),
    ("2:3", 0, False, True), ("2:3", 1, False, False), ("2:3", 2, True, False),
    ("2:3", 3, True, False), ("2:3", 4, False, True), ("2:3", 5, False, True),
    ("2:4", 0, False, True), ("2:4", 1, False, False), ("2:4", 2, True, False),
    ("2:4", 3, True, False), ("2:4", 4, True, False), ("2:4", 5, False, True),
    ("4:4294967295", 0, False, True), ("4:4294967295", 1, False, False),
    ("4:4294967295", 2, False, False), ("4:4294967295", 3, False, False),
    ("4:4294967295", 4, True, False), ("4:4294967295", 5, True, False),
    ("4:4294967295", MAX, True, False),
    ("4:*", 0, True, False), ("4:*", 1, False, False), ("4:*", 2, False, False),
    ("4:*", 3, False, False), ("4:*", 4, True, False), ("4:*", 5, True, False),
    ("4:*", MAX, True, False),
]


@pytest.mark.parametrize("text,q,contains,less", CONTAINS_LESS)
def test_range_contains_less(text, q, contains, less):
    r = parse_num_range(text)
    assert r.contains(q) is contains
    assert r.less(q) is less


MERGE = [
    ("1", "1", "1"), ("1", "2", "1:2"), ("1", "3", ""), ("1", "4294967295", ""),
    ("1", "*", ""),
    ("4", "1", ""), ("4", "2", ""), ("4", "3", "3:4"), ("4", "4", "4"),
    ("4", "5", "4:5"), ("4", "6", ""),
    ("4294967295", "4294967293", ""),
    ("4294967295", "4294967294", "4294967294:4294967295"),
    ("4294967295", "4294967295", "4294967295"), ("4294967295", "*", ""),
    ("*", "1", ""), ("*", "2", ""), ("*", "4294967294", ""),
    ("*", "4294967295", ""), ("*", "*", "*"),
    ("1:3", "1", "1:3"), ("1:3", "2", "1:3"), ("1:3", "3", "1:3"),
    ("1:3", "4", "1:4"), ("1:3", "5", ""), ("1:3", "*", ""),
    ("3:4", "1", ""), ("3:4", "2", "2:4"), ("3:4", "3", "3:4"),
    ("3:4", "4", "3:4"), ("3:4", "5", "3:5"), ("3:4", "6", ""), ("3:4", "*", ""),
    ("2:3", "5", ""), ("2:4", "5", "2:5"), ("2:5", "5", "2:5"),
    ("2:6", "5", "2:6"), ("2:7", "5", "2:7"), ("2:*", "5", "2:*"),
    ("3:4", "5", "3:5"), ("3:5", "5", "3:5"), ("3:6", "5", "3:6"),
    ("3:7", "5", "3:7"), ("3:*", "5", "3:*"), ("4:5", "5", "4:5"),
    ("4:6", "5", "4:6"), ("4:7", "5", "4:7"), ("4:*", "5", "4:*"),
    ("5:6", "5", "5:6"), ("5:7", "5", "5:7"), ("5:*", "5", "5:*"),
    ("6:7", "5", "5:7"), ("6:*", "5", "5:*"), ("7:8", "5", ""), ("7:*", "5", ""),
    ("3:4294967294", "1", ""), ("3:4294967294", "2", "2:4294967294"),
    ("3:4294967294", "3", "3:4294967294"), ("3:4294967294", "4", "3:4294967294"),
    ("3:4294967294", "4294967293", "3:4294967294"),
    ("3:4294967294", "4294967294", "3:4294967294"),
    ("3:4294967294", "4294967295", "3:4294967295"), ("3:4294967294", "*", ""),
    ("3:4294967295", "1", ""), ("3:4294967295", "2", "2:4294967295"),
    ("3:4294967295", "3", "3:4294967295"), ("3:4294967295", "4", "3:4294967295"),
    ("3:4294967295", "4294967294", "3:4294967295"),
    ("3:4294967295", "4294967295", "3:4294967295"), ("3:4294967295", "*", ""),
    ("1:4294967295", "1", "1:4294967295"),
    ("1:4294967295", "4294967295", "1:4294967295"), ("1:4294967295", "*", ""),
    ("1:*", "1", "1:*"), ("1:*", "2", "1:*"), ("1:*", "4294967294", "1:*"),
    ("1:*", "4294967295", "1:*"), ("1:*", "*", "1:*"),
    ("5:8", "1:2", ""), ("5:8", "1:3", ""), ("5:8", "1:4", "1:8"),
    ("5:8", "1:5", "1:8"), ("5:8", "1:6", "1:8"), ("5:8", "1:7", "1:8"),
    ("5:8", "1:8", "1:8"), ("5:8", "1:9", "1:9"), ("5:8", "1:10", "1:10"),
    ("5:8", "1:11", "1:11"), ("5:8", "1:*", "1:*"),
    ("5:8", "2:3", ""), ("5:8", "2:4", "2:8"), ("5:8", "2:5", "2:8"),
    ("5:8", "2:6", "2:8"), ("5:8", "2:7", "2:8"), ("5:8", "2:8", "2:8"),
    ("5:8", "2:9", "2:9"), ("5:8", "2:10", "2:10"), ("5:8", "2:11", "2:11"),
    ("5:8", "2:*", "2:*"),
    ("5:8", "3:4", "3:8"), ("5:8", "3:5", "3:8"), ("5:8", "3:6", "3:8"),
    ("5:8", "3:7", "3:8"), ("5:8", "3:8", "3:8"), ("5:8", "3:9", "3:9"),
    ("5:8", "3:10", "3:10"), ("5:8", "3:11", "3:11"), ("5:8", "3:*", "3:*"),
    ("5:8", "4:5", "4:8"), ("5:8", "4:6", "4:8"), ("5:8", "4:7", "4:8"),
    ("5:8", "4:8", "4:8"), ("5:8", "4:9", "4:9"), ("5:8", "4:10", "4:10"),
    ("5:8", "4:11", "4:11"), ("5:8", "4:*", "4:*"),
    ("5:8", "5:6", "5:8"), ("5:8", "5:7", "5:8"), ("5:8", "5:8", "5:8"),
    ("5:8", "5:9", "5:9"), ("5:8", "5:10", "5:10"), ("5:8", "5:11", "5:11"),
    ("5:8", "5:*", "5:*"),
    ("5:8", "6:7", "5:8"), ("5:8", "6:8", "5:8"), ("5:8", "6:9", "5:9"),
    ("5:8", "6:10", "5:10"), ("5:8", "6:11", "5:11"), ("5:8", "6:*", "5:*"),
    ("5:8", "7:8", "5:8"), ("5:8", "7:9", "5:9"), ("5:8", "7:10", "5:10"),
    ("5:8", "7:11", "5:11"), ("5:8", "7:*", "5:*"),
    ("5:8", "8:9", "5:9"), ("5:8", "8:10", "5:10"), ("5:8", "8:11", "5:11"),
    ("5:8", "8:*", "5:*"),
    ("5:8", "9:10", "5:10"), ("5:8", "9:11", "5:11"), ("5:8", "9:*", "5:*"),
    ("5:8", "10:11", ""), ("5:8", "10:*", ""),
    ("1:*", "1:*", "1:*"), ("1:*", "2:*", "1:*"), ("1:*", "1:4294967294", "1:*"),
    ("1:*", "1:4294967295", "1:*"), ("1:*", "2:4294967295", "1:*"),
    ("1:4294967295", "1:4294967294", "1:4294967295"),
    ("1:4294967295", "1:4294967295", "1:4294967295"),
    ("1:4294967295", "2:4294967295", "1:4294967295"),
    ("1:4294967295", "2:*", "1:*"),
]


@pytest.mark.parametrize("left,right,expected", MERGE)
def test_range_merge(left, right, expected):
    s = parse_num_range(left)
    t = parse_num_range(right)
    for a, b in ((s, t), (t, s)):
        union = a.merge(b)
        if expected:
            assert union is not None
            assert str(union) == expected
        else:
            assert union is None


SET_INFO = {
    "": [(0, False), (1, False), (2, False), (3, False), (MAX, False)],
    "2": [(0, False), (1, False), (2, True), (3, False), (MAX, False)],
    "*": [(0, False), (1, False), (2, False), (3, False), (MAX, False)],
    "1:*": [(0, False), (1, True), (MAX, True)],
    "2:4": [(0, False), (1, False), (2, True), (3, True), (4, True), (5, False),
            (MAX, False)],
    "2,4": [(0, False), (1, False), (2, True), (3, False), (4, True), (5, False),
            (MAX, False)],
    "2:4,6": [(0, False), (1, False), (2, True), (3, True), (4, True), (5, False),
              (6, True), (7, False)],
    "2,4:6": [(0, False), (1, False), (2, True), (3, False), (4, True), (5, True),
              (6, True), (7, False)],
    "2,4,6": [(0, False), (1, False), (2, True), (3, False), (4, True), (5, False),
              (6, True), (7, False)],
    "1,3:5,7,9:*": [(0, False), (1, True), (2, False), (3, True), (4, True),
                    (5, True), (6, False), (7, True), (8, False), (9, True),
                    (10, True), (MAX, True)],
    "1,3:5,7,9,42": [(0, False), (1, True), (2, False), (3, True), (4, True),
                     (5, True), (6, False), (7, True), (8, False), (9, True),
                     (10, False), (41, False), (42, True), (43, False),
                     (MAX, False)],
    "1,3:5,7,9,42,*": [(0, False), (1, True), (2, False), (3, True), (4, True),
                       (5, True), (6, False), (7, True), (8, False), (9, True),
                       (10, False), (41, False), (42, True), (43, False),
                       (MAX, False)],
    "1,3:5,7,9,42,60:70,100:*": [(0, False), (1, True), (2, False), (3, True),
                                 (4, True), (5, True), (6, False), (7, True),
                                 (8, False), (9, True), (10, False), (41, False),
                                 (42, True), (43, False), (59, False), (60, True),
                                 (65, True), (70, True), (71, False), (99, False),
                                 (100, True), (1000, True), (MAX, True)],
}


@pytest.mark.parametrize(
    "text,q,contains",
    [(text, q, c) for text, cases in SET_INFO.items() for q, c in cases],
)
def test_set_info(text, q, contains):
    s = parse_set(text) if text else Set()
    check_num_set(s)
    assert s.contains(q) is contains
    assert str(s) == text
    assert (len(s) == 0) == (text == "")
    assert s.dynamic() == (text != "" and text.endswith("*"))


PARSE_SET = [
    ("1,1", "1"), ("1,2", "1:2"), ("1,3", "1,3"), ("1,*", "1,*"),
    ("1,1,1", "1"), ("1,1,2", "1:2"), ("1,1:2", "1:2"), ("1,1,3", "1,3"),
    ("1,1:3", "1:3"), ("1,2,2", "1:2"), ("1,2,3", "1:3"), ("1,2:3", "1:3"),
    ("1,2,4", "1:2,4"), ("1,3,3", "1,3"), ("1,3,4", "1,3:4"), ("1,3:4", "1,3:4"),
    ("1,3,5", "1,3,5"), ("1,3:5", "1,3:5"), ("1:3,5", "1:3,5"), ("1:5,3", "1:5"),
    ("1,2,3,4", "1:4"), ("1,2,4,5", "1:2,4:5"), ("1,2,4:5", "1:2,4:5"),
    ("1:2,4:5", "1:2,4:5"),
    ("1,2,3,4,5", "1:5"), ("1,2:3,4:5", "1:5"),
    ("1,2,4,5,7,9", "1:2,4:5,7,9"), ("1,2,4,5,7:9", "1:2,4:5,7:9"),
    ("1:2,4:5,7:9", "1:2,4:5,7:9"), ("1,2,4,5,7,8,9", "1:2,4:5,7:9"),
    ("1:2,4:5,7,8,9", "1:2,4:5,7:9"),
    ("3,5:10,15:20", "3,5:10,15:20"), ("4,5:10,15:20", "4:10,15:20"),
    ("5,5:10,15:20", "5:10,15:20"), ("7,5:10,15:20", "5:10,15:20"),
    ("10,5:10,15:20", "5:10,15:20"), ("11,5:10,15:20", "5:11,15:20"),
    ("12,5:10,15:20", "5:10,12,15:20"), ("14,5:10,15:20", "5:10,14:20"),
    ("17,5:10,15:20", "5:10,15:20"), ("21,5:10,15:20", "5:10,15:21"),
    ("22,5:10,15:20", "5:10,15:20,22"), ("*,5:10,15:20", "5:10,15:20,*"),
    ("1:3,5:10,15:20", "1:3,5:10,15:20"), ("1:4,5:10,15:20", "1:10,15:20"),
    ("1:8,5:10,15:20", "1:10,15:20"), ("1:13,5:10,15:20", "1:13,15:20"),
    ("1:14,5:10,15:20", "1:20"), ("7:17,5:10,15:20", "5:20"),
    ("11:14,5:10,15:20", "5:20"), ("12,13,5:10,15:20", "5:10,12:13,15:20"),
    ("12:13,5:10,15:20", "5:10,12:13,15:20"), ("12:14,5:10,15:20", "5:10,12:20"),
    ("11:13,5:10,15:20", "5:13,15:20"), ("11,12,13,14,5:10,15:20", "5:20"),
    ("1:*,5:10,15:20", "1:*"), ("4:*,5:10,15:20", "4:*"),
    ("6:*,5:10,15:20", "5:*"), ("12:*,5:10,15:20", "5:10,12:*"),
    ("19:*,5:10,15:20", "5:10,15:*"),
    ("5:8,6,7:10,15,16,17,18:20,19,21:*", "5:10,15:*"),
    ("4:13,1,5,10,15,20", "1,4:13,15,20"), ("4:14,1,5,10,15,20", "1,4:15,20"),
    ("4:15,1,5,10,15,20", "1,4:15,20"), ("4:16,1,5,10,15,20", "1,4:16,20"),
    ("4:17,1,5,10,15,20", "1,4:17,20"), ("4:18,1,5,10,15,20", "1,4:18,20"),
    ("4:19,1,5,10,15,20", "1,4:20"), ("4:20,1,5,10,15,20", "1,4:20"),
    ("4:21,1,5,10,15,20", "1,4:21"), ("4:*,1,5,10,15,20", "1,4:*"),
    ("1,3,5,7,9,11,13,15,17,19", "1,3,5,7,9,11,13,15,17,19"),
    ("1,3,5,7,9,11:13,15,17,19", "1,3,5,7,9,11:13,15,17,19"),
    ("1,3,5,7,9:11,13:15,17,19", "1,3,5,7,9:11,13:15,17,19"),
    ("1,3,5,7:9,11:13,15:17,19", "1,3,5,7:9,11:13,15:17,19"),
    ("1,3,5,7,9,11,13,15,17,19,*", "1,3,5,7,9,11,13,15,17,19,*"),
    ("1,3,5,7,9,11,13,15,17,19:*", "1,3,5,7,9,11,13,15,17,19:*"),
    ("1:20,3,5,7,9,11,13,15,17,19,*", "1:20,*"),
    ("1:20,3,5,7,9,11,13,15,17,19:*", "1:*"),
    ("4294967295,*", "4294967295,*"), ("1,4294967295,*", "1,4294967295,*"),
    ("1:4294967295,*", "1:4294967295,*"), ("1,4294967295:*", "1,4294967295:*"),
    ("1:*,4294967295", "1:*"), ("1:*,4294967295:*", "1:*"),
    ("1:4294967295,4294967295:*", "1:*"),
]


def _permutations(text, rng, seen, count):
    parts = text.split(",")
    yield text
    for _ in range(count - 1):
        for _attempt in range(50):
            shuffled = parts[:]
            rng.shuffle(shuffled)
            candidate = ",".join(shuffled)
            if candidate not in seen:
                seen.add(candidate)
                yield candidate
                break
        else:
            return


def test_parse_set_permutations():
    rng = random.Random(19860201)
    seen = set()
    for text, expected in PARSE_SET:
        for variant in _permutations(text, rng, seen, 100):
            s = parse_set(variant)
            check_num_set(s)
            assert str(s) == expected, variant


ADD_CASES = [
    ([5], (1, 3), "1:2,5,7:13,15,17:*", "1:3,5,7:13,15,17:*"),
    ([5], (3, 1), "2:3,7:13,15,17:*", "1:3,5,7:13,15,17:*"),
    ([15], (17, 0), "1:3,5,7:13", "1:3,5,7:13,15,17:*"),
    ([15], (0, 17), "1:3,5,7:13", "1:3,5,7:13,15,17:*"),
    ([1, 3, 5, 7, 9, 11, 0], (8, 13), "2,15,17:*", "1:3,5,7:13,15,17:*"),
    ([5, 1, 7, 3, 9, 0, 11], (8, 13), "2,15,17:*", "1:3,5,7:13,15,17:*"),
    ([5, 1, 7, 3, 9, 0, 11], (13, 8), "2,15,17:*", "1:3,5,7:13,15,17:*"),
]


@pytest.mark.parametrize("nums,rng,other,expected", ADD_CASES)
def test_set_add_num_range_set(nums, rng, other, expected):
    s = Set()
    s.add_num(*nums)
    check_num_set(s)
    s.add_range(*rng)
    check_num_set(s)
    s.add_set(parse_set(other))
    check_num_set(s)
    assert str(s) == expected


def test_set_nums_static():
    assert parse_set("1:3,7").nums() == [1, 2, 3, 7]
    assert Set().nums() == []


@pytest.mark.parametrize("text", ["1:*", "*", "2,5:*"])
def test_set_nums_dynamic_raises(text):
    with pytest.raises(ValueError):
        parse_set(text).nums()


def test_range_nums_and_str():
    assert Range(4, 6).nums() == [4, 5, 6]
    assert str(Range(4, 0)) == "4:*"
    assert str(Range(0, 0)) == "*"
    with pytest.raises(ValueError):
        Range(0, 0).nums()


def test_parse_set_invalid():
    with pytest.raises(BadNumSetError):
        parse_set("1,x")
    with pytest.raises(BadNumSetError):
        parse_set("")


def test_set_equality_and_copy():
    s = parse_set("1,2,3")
    clone = s.copy()
    clone.add_num(10)
    assert s == parse_set("1:3")
    assert str(clone) == "1:3,10"
    assert Set([Range(3, 3), Range(1, 2)]) == s