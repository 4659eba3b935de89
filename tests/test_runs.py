from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone

from hanzi_reader.models import AnnotatedArticle, Sentence, VocabularyItem
from hanzi_reader.runs import (
    ARTICLE_FILENAME,
    SENTENCES_FILENAME,
    VOCABULARY_FILENAME,
    RunContext,
    article_stats,
    create_run_context,
    generate_run_id,
    publish_latest_artifacts,
    write_latest_run_manifest,
)
from hanzi_reader.summary import SUMMARY_FAILED
from hanzi_reader.translate import TRANSLATION_UNAVAILABLE

SOURCE = "我用iPad学习中文。\U00020000好！"

ARTICLE = AnnotatedArticle(
    summary="The writer studies Chinese on an iPad.",
    sentences=(
        Sentence("我用iPad学习中文。", "wǒ yòng xué xí zhōng wén", "I study Chinese on an iPad."),
        Sentence("\U00020000好！", "hǎo", TRANSLATION_UNAVAILABLE),
    ),
    vocabulary=(VocabularyItem("学习", "xuéxí", "to study", "我学习中文。", "📚"),),
)


def archive_context(tmp_path) -> RunContext:
    output_root = tmp_path / "output"
    return RunContext(
        run_id="run-1",
        run_mode="archive",
        output_root=output_root,
        build_dir=output_root / "runs" / "run-1",
    )


def test_run_id_has_millisecond_precision():
    stamp = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert generate_run_id(stamp) == "20240506-070809-123"


def test_latest_mode_builds_in_output_root(tmp_path):
    context = create_run_context(tmp_path, "latest")
    assert context.build_dir == tmp_path
    assert context.result_dir == tmp_path
    assert context.publishes_latest
    assert context.artifact_path(ARTICLE_FILENAME) == tmp_path / ARTICLE_FILENAME


def test_archive_mode_builds_in_runs_subdir(tmp_path):
    context = create_run_context(tmp_path, "archive")
    assert context.build_dir.parent == tmp_path / "runs"
    assert context.build_dir.name == context.run_id
    assert context.result_dir == context.build_dir
    assert not context.publishes_latest


def test_publish_copies_run_files_and_removes_stale_vocabulary(tmp_path):
    context = create_run_context(tmp_path / "latest", "both")
    context.build_dir.mkdir(parents=True)
    context.artifact_path(ARTICLE_FILENAME).write_text("{}", encoding="utf-8")
    context.artifact_path(SENTENCES_FILENAME).write_text("sentences", encoding="utf-8")
    (context.output_root / VOCABULARY_FILENAME).write_text("stale", encoding="utf-8")

    published = publish_latest_artifacts(context)

    assert published == [ARTICLE_FILENAME, SENTENCES_FILENAME]
    assert (context.output_root / ARTICLE_FILENAME).read_text(encoding="utf-8") == "{}"
    assert (context.output_root / SENTENCES_FILENAME).read_text(encoding="utf-8") == "sentences"
    assert not (context.output_root / VOCABULARY_FILENAME).exists()


def test_publish_is_a_no_op_when_building_in_place(tmp_path):
    context = create_run_context(tmp_path, "latest")
    assert publish_latest_artifacts(context) == []


def test_article_stats_describe_source_and_stage_outcomes():
    stats = article_stats(ARTICLE, SOURCE)

    assert stats["source_sha256"] == hashlib.sha256(SOURCE.encode("utf-8")).hexdigest()
    assert stats["source_characters"] == len(SOURCE)
    assert stats["chinese_characters"] == 8
    assert stats["sentence_count"] == 2
    assert stats["translated_sentences"] == 1
    assert stats["pinyin_tokens"] == 7
    assert stats["vocabulary_count"] == 1
    assert stats["summary_available"] is True


def test_failed_summary_is_reported_as_unavailable():
    failed = AnnotatedArticle(summary=SUMMARY_FAILED, sentences=(), vocabulary=())
    assert article_stats(failed, "")["summary_available"] is False


def test_manifest_tracks_article_and_artifacts(tmp_path):
    context = archive_context(tmp_path)
    context.build_dir.mkdir(parents=True)
    context.artifact_path(VOCABULARY_FILENAME).write_text("v", encoding="utf-8")

    manifest_path = write_latest_run_manifest(context, ARTICLE, source_text=SOURCE)

    payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert payload["run_id"] == "run-1"
    assert payload["run_mode"] == "archive"
    assert payload["published_latest"] is False
    assert payload["article"]["sentence_count"] == 2
    assert payload["article"]["chinese_characters"] == 8
    assert payload["artifacts"][VOCABULARY_FILENAME]["build"].endswith(VOCABULARY_FILENAME)
    assert payload["artifacts"][VOCABULARY_FILENAME]["latest"] is None
    assert payload["artifacts"][ARTICLE_FILENAME] == {"build": None, "latest": None}
