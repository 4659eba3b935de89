from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Iterator, List, Set

from .exports import VOCABULARY_COLUMNS
from .models import VocabularyItem

KNOWN_VOCABULARY_FILENAME = "known_vocabulary.txt"
COMMENT_PREFIX = "#"


def default_known_terms_path() -> Path:
    return Path.home() / ".hanzi_reader" / KNOWN_VOCABULARY_FILENAME


def vocabulary_key(chinese: str) -> str:
    """Identity of a vocabulary item: its Chinese text without surrounding whitespace.

    Matching is exact. ``学习`` and ``学习者`` are different words, and no
    case, punctuation or pinyin folding is applied.
    """
    return chinese.strip()


def is_known(item: VocabularyItem, known_terms: Set[str]) -> bool:
    return vocabulary_key(item.chinese) in known_terms


def _first_column(path: Path) -> Iterator[str]:
    # utf-8-sig tolerates the BOM spreadsheet tools put on saved CSV files.
    with open(path, encoding="utf-8-sig", newline="") as handle:
        if path.suffix.lower() == ".csv":
            for row in csv.reader(handle):
                if row:
                    yield row[0]
        else:
            # Flashcard exports put the headword first, tab-separated.
            for line in handle:
                yield line.split("\t", 1)[0]


def load_known_terms(path: Path | None = None) -> Set[str]:
    """Read the learner's known words.

    Accepts a plain list (one word per line, ``#`` comments, extra tab fields
    ignored) or a ``vocabulary.csv`` written by an earlier run, whose header
    row is skipped.
    """
    target_path = path or default_known_terms_path()
    if not target_path.exists():
        return set()
    terms: Set[str] = set()
    for value in _first_column(target_path):
        key = vocabulary_key(value)
        if not key or key.startswith(COMMENT_PREFIX) or key == VOCABULARY_COLUMNS[0]:
            continue
        terms.add(key)
    return terms


def record_known_terms(items: Iterable[VocabularyItem], path: Path | None = None) -> int:
    """Append the items' words to the known list and return how many were new."""
    target_path = path or default_known_terms_path()
    known = load_known_terms(target_path)
    added: List[str] = []
    for item in items:
        key = vocabulary_key(item.chinese)
        if key and key not in known:
            known.add(key)
            added.append(key)
    if not added:
        return 0

    target_path.parent.mkdir(parents=True, exist_ok=True)
    existing = target_path.read_text(encoding="utf-8") if target_path.exists() else ""
    needs_newline = bool(existing) and not existing.endswith("\n")
    with open(target_path, "a", encoding="utf-8", newline="") as handle:
        if needs_newline:
            handle.write("\n")
        if target_path.suffix.lower() == ".csv":
            writer = csv.writer(handle)
            for key in added:
                writer.writerow([key])
        else:
            for key in added:
                handle.write(f"{key}\n")
    return len(added)
