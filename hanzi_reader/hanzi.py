from __future__ import annotations

from itertools import groupby
from typing import List

# Unified Ideographs, Extension A, Extension B.
CJK_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3400, 0x4DBF),
    (0x20000, 0x2A6DF),
)


def is_chinese_char(char: str) -> bool:
    if len(char) != 1:
        return False
    code = ord(char)
    return any(start <= code <= end for start, end in CJK_RANGES)


def chinese_chars(text: str) -> List[str]:
    return [char for char in text if is_chinese_char(char)]


def count_chinese_chars(text: str) -> int:
    return len(chinese_chars(text))


def contains_chinese(text: str) -> bool:
    return any(is_chinese_char(char) for char in text)


def chinese_runs(text: str) -> List[str]:
    runs: List[str] = []
    for is_chinese, chars in groupby(text, key=is_chinese_char):
        if is_chinese:
            runs.append("".join(chars))
    return runs
