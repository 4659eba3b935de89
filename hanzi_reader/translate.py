from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from deep_translator import GoogleTranslator

from .llm import ChatClient

logger = logging.getLogger(__name__)

TRANSLATION_UNAVAILABLE = "(Translation unavailable)"
SOURCE_LOCALE = "zh-CN"
TARGET_LOCALE = "en"

DICTIONARY_SYSTEM_PROMPT = (
    "You are a Chinese-English dictionary. Give concise dictionary-style translations only."
)


@dataclass
class TranslationStrategy:
    name = "base"

    def supports(self, source: str, target: str) -> bool:
        return True

    def translate(self, text: str, source: str, target: str) -> str:
        raise NotImplementedError


@dataclass
class GoogleTranslateStrategy(TranslationStrategy):
    name = "google"

    def translate(self, text: str, source: str, target: str) -> str:
        translated = GoogleTranslator(source=source, target=target).translate(text)
        if not isinstance(translated, str):
            raise ValueError("Translation service returned no text")
        return translated


@dataclass
class ChatDictionaryStrategy(TranslationStrategy):
    client: ChatClient
    name = "chat-dictionary"

    def supports(self, source: str, target: str) -> bool:
        return source.lower().startswith("zh") and target.lower() == "en"

    def translate(self, text: str, source: str, target: str) -> str:
        return self.client.complete(
            DICTIONARY_SYSTEM_PROMPT,
            build_dictionary_prompt(text),
            temperature=0.1,
        )


def build_dictionary_prompt(text: str) -> str:
    return (
        "Translate this Chinese word/phrase to English in dictionary style. "
        'Give the most common meanings separated by " / ". '
        "Be concise like a dictionary entry. Do NOT include the Chinese characters, "
        "pinyin, or any extra explanation.\n\n"
        f"Chinese: {text}\n\n"
        "Respond with ONLY the English translation, nothing else."
    )


def sentence_strategies() -> List[TranslationStrategy]:
    """Sentences use the general translation service only.

    The chat dictionary answers in dictionary style, which suits single words
    (see ``word_strategies``) but not running text.
    """
    return [GoogleTranslateStrategy()]


def word_strategies(client: Optional[ChatClient] = None) -> List[TranslationStrategy]:
    strategies: List[TranslationStrategy] = []
    if client is not None:
        strategies.append(ChatDictionaryStrategy(client=client))
    strategies.append(GoogleTranslateStrategy())
    return strategies


def translate_with_strategies(
    text: str,
    strategies: Sequence[TranslationStrategy],
    source: str = SOURCE_LOCALE,
    target: str = TARGET_LOCALE,
) -> Optional[str]:
    for strategy in strategies:
        if not strategy.supports(source, target):
            continue
        try:
            translated = strategy.translate(text, source, target)
            if not isinstance(translated, str):
                raise ValueError(f"{strategy.name} returned {type(translated).__name__}")
            translated = translated.strip()
        except Exception:
            logger.warning("Translation via %s failed for %r", strategy.name, text, exc_info=True)
            continue
        if translated:
            return translated
        logger.warning("Translation via %s returned empty text for %r", strategy.name, text)
    return None


def translate_sentence(text: str, strategies: Sequence[TranslationStrategy]) -> str:
    translated = translate_with_strategies(text, strategies)
    if translated is None:
        return TRANSLATION_UNAVAILABLE
    return translated


def translate_text(
    text: str,
    strategies: Sequence[TranslationStrategy],
    source: str = SOURCE_LOCALE,
    target: str = TARGET_LOCALE,
) -> str:
    return translate_with_strategies(text, strategies, source=source, target=target) or ""
