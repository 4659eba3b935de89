from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Sequence, Set

from .known_terms import is_known
from .llm import ChatClient, chat_client_from_env
from .models import AnnotatedArticle, Sentence, VocabularyItem
from .pinyin import Transliterator, annotate_pinyin, pypinyin_transliterate
from .segmenter import split_sentences
from .summary import summarize
from .translate import TranslationStrategy, sentence_strategies, translate_sentence
from .vocabulary import extract_vocabulary

StatusCallback = Callable[[str], None]


@dataclass
class ArticleServices:
    """External collaborators handed to the pipeline for one or more articles.

    ``chat`` is ``None`` when no language model is configured; the summary and
    vocabulary stages then return their placeholders without any network call.
    """

    chat: Optional[ChatClient] = None
    transliterate: Transliterator = pypinyin_transliterate
    translators: Sequence[TranslationStrategy] = field(default_factory=list)


def services_from_env(environ: Mapping[str, str] | None = None) -> ArticleServices:
    chat = chat_client_from_env(environ)
    return ArticleServices(chat=chat, translators=sentence_strategies())


def offline_services() -> ArticleServices:
    return ArticleServices(chat=None, translators=[])


def emit_status(status: StatusCallback | None, message: str) -> None:
    if status is not None:
        status(message)


def annotate_sentences(
    text: str,
    services: ArticleServices,
    status: StatusCallback | None = None,
) -> List[Sentence]:
    chunks = split_sentences(text)
    emit_status(status, f"Split text into {len(chunks)} sentences")
    sentences: List[Sentence] = []
    for chunk in chunks:
        sentences.append(
            Sentence(
                chinese=chunk,
                pinyin=annotate_pinyin(chunk, services.transliterate),
                english=translate_sentence(chunk, services.translators),
            )
        )
    return sentences


def annotate_article(
    text: str,
    services: ArticleServices,
    known_terms: Set[str] | None = None,
    status: StatusCallback | None = None,
) -> AnnotatedArticle:
    emit_status(status, "Generating summary")
    summary = summarize(text, services.chat)
    emit_status(status, "Annotating sentences")
    sentences = annotate_sentences(text, services, status=status)
    emit_status(status, "Extracting vocabulary")
    vocabulary = dedupe_vocabulary(extract_vocabulary(text, services.chat))
    vocabulary, dropped = filter_known_vocabulary(vocabulary, known_terms or set())
    if known_terms:
        emit_status(status, f"Dropped {dropped} known vocabulary items")
    emit_status(
        status,
        f"Finished: {len(sentences)} sentences and {len(vocabulary)} vocabulary items",
    )
    return AnnotatedArticle(
        summary=summary,
        sentences=tuple(sentences),
        vocabulary=tuple(vocabulary),
    )


def dedupe_vocabulary(items: Sequence[VocabularyItem]) -> List[VocabularyItem]:
    seen: Set[str] = set()
    deduped: List[VocabularyItem] = []
    for item in items:
        if item.chinese in seen:
            continue
        seen.add(item.chinese)
        deduped.append(item)
    return deduped


def filter_known_vocabulary(
    items: Sequence[VocabularyItem],
    known_terms: Set[str],
) -> tuple[List[VocabularyItem], int]:
    if not known_terms:
        return list(items), 0
    kept: List[VocabularyItem] = []
    dropped = 0
    for item in items:
        if is_known(item, known_terms):
            dropped += 1
            continue
        kept.append(item)
    return kept, dropped
