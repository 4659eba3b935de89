from __future__ import annotations

import json
import logging
import re
from typing import List, Optional

from .llm import ChatClient
from .models import VocabularyItem

logger = logging.getLogger(__name__)

VOCABULARY_FIELDS = ("chinese", "pinyin", "english", "example", "emoji")
CODE_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|\n?\s*```", re.IGNORECASE)

VOCABULARY_SYSTEM_PROMPT = (
    "You are helping a middle-school student learn Chinese vocabulary. "
    "Respond in JSON format only, no markdown."
)


def build_vocabulary_prompt(text: str) -> str:
    example = json.dumps(
        [
            {
                "chinese": "上映",
                "pinyin": "shàngyìng",
                "english": "to show (a movie) / to screen",
                "example": "这部电影下周上映。",
                "emoji": "🎬",
            }
        ],
        ensure_ascii=False,
        indent=2,
    )
    return (
        "From this Chinese article, identify 5-8 key vocabulary words/phrases "
        "(commonly 2-character phrases) that would be most useful for a student to learn.\n\n"
        "For each word, provide:\n"
        "1. The Chinese word/phrase (commonly 2 characters, e.g., 上映, 领域)\n"
        "2. Pinyin with tone marks (e.g., shàngyìng)\n"
        '3. English meaning in dictionary style - list common meanings separated by " / " '
        '(e.g., "to show (a movie) / to screen")\n'
        "4. A simple example sentence in Chinese\n"
        "5. A relevant emoji that helps visualize or remember the word\n\n"
        f"Chinese article:\n{text}\n\n"
        f"Respond in JSON format only, no markdown:\n{example}"
    )


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RE.sub("", text).strip()


def parse_vocabulary_items(payload: str) -> List[VocabularyItem]:
    data = json.loads(strip_code_fences(payload))
    if isinstance(data, dict):
        data = data.get("vocabulary", data.get("items"))
    if not isinstance(data, list):
        raise ValueError("Vocabulary response must be a list")
    items: List[VocabularyItem] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("Vocabulary entry must be an object")
        values = {}
        for name in VOCABULARY_FIELDS:
            value = entry.get(name)
            if not isinstance(value, str):
                raise ValueError(f"Vocabulary field {name!r} must be a string")
            values[name] = value.strip()
        if not values["chinese"]:
            raise ValueError("Vocabulary entry has an empty chinese field")
        items.append(VocabularyItem(**values))
    return items


def extract_vocabulary(text: str, client: Optional[ChatClient]) -> List[VocabularyItem]:
    if client is None:
        return []
    try:
        content = client.complete(
            VOCABULARY_SYSTEM_PROMPT,
            build_vocabulary_prompt(text),
            temperature=0.3,
        )
        return parse_vocabulary_items(content or "[]")
    except Exception:
        logger.warning("Vocabulary extraction failed", exc_info=True)
        return []
