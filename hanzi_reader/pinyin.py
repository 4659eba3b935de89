from __future__ import annotations

import logging
import re
from typing import Callable, List, Sequence, Tuple

from pypinyin import Style, pinyin

from .hanzi import chinese_runs, is_chinese_char

logger = logging.getLogger(__name__)

PINYIN_TOKEN_RE = re.compile(r"^[a-zA-Zāáǎàēéěèīíǐìōóǒòūúǔùǖǘǚǜü]+$")
MAX_SYLLABLE_LENGTH = 6
MISSING_PINYIN = "_"

Transliterator = Callable[[str], Sequence[str]]


def pypinyin_transliterate(text: str) -> List[str]:
    # pypinyin segments Han runs against its phrase dictionary before picking
    # a reading, so polyphonic characters follow their neighbours.
    units = pinyin(text, style=Style.TONE, heteronym=False, errors="default")
    return [candidates[0] if candidates else "" for candidates in units]


def is_pinyin_token(token: str) -> bool:
    if not isinstance(token, str):
        return False
    return len(token) <= MAX_SYLLABLE_LENGTH and bool(PINYIN_TOKEN_RE.match(token))


def annotate_pinyin(sentence: str, transliterate: Transliterator = pypinyin_transliterate) -> str:
    # Only Chinese runs are transliterated; a run yields at most one syllable
    # per character.
    syllables: List[str] = []
    try:
        for run in chinese_runs(sentence):
            tokens = [token for token in transliterate(run) if is_pinyin_token(token)]
            syllables.extend(tokens[: len(run)])
    except Exception:
        logger.warning("Pinyin generation failed for %r", sentence, exc_info=True)
        return ""
    return " ".join(syllables)


def word_pinyin(chinese: str, transliterate: Transliterator = pypinyin_transliterate) -> str:
    try:
        tokens = [token.strip() for token in transliterate(chinese)]
    except Exception:
        logger.warning("Pinyin generation failed for %r", chinese, exc_info=True)
        return ""
    return " ".join(token for token in tokens if token)


def align_pinyin(chinese: str, pinyin_text: str) -> List[Tuple[str, str]]:
    tokens = pinyin_text.split()
    aligned: List[Tuple[str, str]] = []
    token_index = 0
    for char in chinese:
        if not is_chinese_char(char):
            aligned.append((char, ""))
            continue
        token = tokens[token_index] if token_index < len(tokens) else ""
        token_index += 1
        aligned.append((char, "" if token == MISSING_PINYIN else token))
    return aligned
