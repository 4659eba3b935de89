from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
import json
from pathlib import Path
import shutil
from typing import Dict, List, Literal

from .hanzi import count_chinese_chars
from .models import AnnotatedArticle
from .summary import SUMMARY_FAILED, SUMMARY_NOT_CONFIGURED
from .translate import TRANSLATION_UNAVAILABLE

RunMode = Literal["latest", "archive", "both"]

ARTICLE_FILENAME = "article.json"
SENTENCES_FILENAME = "sentences.csv"
VOCABULARY_FILENAME = "vocabulary.csv"
ARTIFACT_FILENAMES = (ARTICLE_FILENAME, SENTENCES_FILENAME, VOCABULARY_FILENAME)
MANIFEST_FILENAME = "latest_run.json"
RUNS_DIRNAME = "runs"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    run_mode: RunMode
    output_root: Path
    build_dir: Path

    @property
    def publishes_latest(self) -> bool:
        return self.run_mode in {"latest", "both"}

    @property
    def result_dir(self) -> Path:
        """Where a reader should look for this run's article files."""
        return self.build_dir if self.run_mode == "archive" else self.output_root

    def artifact_path(self, filename: str) -> Path:
        return self.build_dir / filename


def generate_run_id(now: datetime | None = None) -> str:
    stamp = now or datetime.now(timezone.utc)
    return stamp.strftime("%Y%m%d-%H%M%S-%f")[:-3]


def create_run_context(output_root: Path, run_mode: RunMode) -> RunContext:
    normalized_root = output_root.expanduser()
    run_id = generate_run_id()
    if run_mode == "latest":
        build_dir = normalized_root
    else:
        build_dir = normalized_root / RUNS_DIRNAME / run_id
    return RunContext(
        run_id=run_id,
        run_mode=run_mode,
        output_root=normalized_root,
        build_dir=build_dir,
    )


def publish_latest_artifacts(context: RunContext) -> List[str]:
    """Mirror an archived run's article files into the output root.

    Files the run did not produce are removed from the root, so the root never
    mixes sentences from one article with vocabulary from another.
    """
    if context.build_dir == context.output_root:
        return []
    context.output_root.mkdir(parents=True, exist_ok=True)
    published: List[str] = []
    for filename in ARTIFACT_FILENAMES:
        source = context.artifact_path(filename)
        target = context.output_root / filename
        if source.exists():
            shutil.copy2(source, target)
            published.append(filename)
        else:
            target.unlink(missing_ok=True)
    return published


def source_fingerprint(source_text: str) -> str:
    return hashlib.sha256(source_text.encode("utf-8")).hexdigest()


def article_stats(article: AnnotatedArticle, source_text: str) -> Dict[str, object]:
    return {
        "source_sha256": source_fingerprint(source_text),
        "source_characters": len(source_text),
        "chinese_characters": count_chinese_chars(source_text),
        "sentence_count": len(article.sentences),
        "translated_sentences": sum(
            1 for sentence in article.sentences if sentence.english != TRANSLATION_UNAVAILABLE
        ),
        "pinyin_tokens": sum(len(sentence.pinyin.split()) for sentence in article.sentences),
        "vocabulary_count": len(article.vocabulary),
        "summary_available": article.summary not in {SUMMARY_NOT_CONFIGURED, SUMMARY_FAILED},
    }


def _existing(path: Path) -> str | None:
    return str(path) if path.exists() else None


def write_latest_run_manifest(
    context: RunContext,
    article: AnnotatedArticle,
    source_text: str,
) -> Path:
    context.output_root.mkdir(parents=True, exist_ok=True)
    artifacts = {
        filename: {
            "build": _existing(context.artifact_path(filename)),
            "latest": _existing(context.output_root / filename),
        }
        for filename in ARTIFACT_FILENAMES
    }

    payload = {
        "run_id": context.run_id,
        "run_mode": context.run_mode,
        "generated_at_utc": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "output_root": str(context.output_root),
        "build_dir": str(context.build_dir),
        "published_latest": context.publishes_latest,
        "article": article_stats(article, source_text),
        "artifacts": artifacts,
    }

    manifest_path = context.output_root / MANIFEST_FILENAME
    manifest_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return manifest_path
