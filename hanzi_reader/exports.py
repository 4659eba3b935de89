from __future__ import annotations

import csv
import json
import os
from typing import Iterable

from .models import AnnotatedArticle, Sentence, VocabularyItem

SENTENCE_COLUMNS = ["Chinese", "Pinyin", "English"]
VOCABULARY_COLUMNS = ["Chinese", "Pinyin", "English", "Example", "Emoji"]


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_article_json(article: AnnotatedArticle, path: str, source_text: str = "") -> None:
    _ensure_parent(path)
    payload = {"source_text": source_text, **article.to_dict()}
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
        handle.write("\n")


def write_sentences_csv(sentences: Iterable[Sentence], path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(SENTENCE_COLUMNS)
        for sentence in sentences:
            writer.writerow([sentence.chinese, sentence.pinyin, sentence.english])


def write_vocabulary_csv(items: Iterable[VocabularyItem], path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(VOCABULARY_COLUMNS)
        for item in items:
            writer.writerow([item.chinese, item.pinyin, item.english, item.example, item.emoji])
