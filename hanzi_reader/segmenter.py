from __future__ import annotations

import re
from typing import List

PRIMARY_DELIMITERS = "。！？"
SECONDARY_DELIMITERS = "，；"

_PRIMARY_SPLIT_RE = re.compile(f"([{PRIMARY_DELIMITERS}]+)")
_SECONDARY_SPLIT_RE = re.compile(f"[{SECONDARY_DELIMITERS}]")


def split_sentences(text: str) -> List[str]:
    if not text.strip():
        return []
    sentences = split_on_primary(text)
    if sentences:
        return sentences
    clauses = split_on_secondary(text)
    if clauses:
        return clauses
    return [text.strip()]


def split_on_primary(text: str) -> List[str]:
    if not _PRIMARY_SPLIT_RE.search(text):
        return []
    # re.split with a capture group alternates body, delimiter, body, ...
    parts = _PRIMARY_SPLIT_RE.split(text)
    sentences: List[str] = []
    for index in range(0, len(parts), 2):
        body = parts[index].strip()
        punctuation = parts[index + 1] if index + 1 < len(parts) else ""
        if body:
            sentences.append(f"{body}{punctuation}")
    return sentences


def split_on_secondary(text: str) -> List[str]:
    clauses = (clause.strip() for clause in _SECONDARY_SPLIT_RE.split(text))
    return [clause for clause in clauses if clause]
