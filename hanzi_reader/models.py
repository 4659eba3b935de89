from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Sentence:
    chinese: str
    pinyin: str
    english: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VocabularyItem:
    chinese: str
    pinyin: str
    english: str
    example: str
    emoji: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AnnotatedArticle:
    summary: str
    sentences: Tuple[Sentence, ...] = field(default_factory=tuple)
    vocabulary: Tuple[VocabularyItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "sentences": [sentence.to_dict() for sentence in self.sentences],
            "vocabulary": [item.to_dict() for item in self.vocabulary],
        }
