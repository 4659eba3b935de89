from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import shlex
import subprocess
import sys
import tempfile
import time
from typing import Callable, Sequence

from .exports import write_article_json, write_sentences_csv, write_vocabulary_csv
from .known_terms import default_known_terms_path, load_known_terms, record_known_terms
from .pinyin import word_pinyin
from .pipeline import ArticleServices, annotate_article, offline_services, services_from_env
from .runs import (
    ARTICLE_FILENAME,
    SENTENCES_FILENAME,
    VOCABULARY_FILENAME,
    RunMode,
    create_run_context,
    publish_latest_artifacts,
    write_latest_run_manifest,
)
from .translate import translate_text, word_strategies

DEFAULT_EDITOR = "vi"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] %(message)s"


def read_text_from_editor(initial_text: str = "") -> str:
    editor = os.getenv("EDITOR") or DEFAULT_EDITOR
    command = shlex.split(editor)
    if not command:
        raise RuntimeError("EDITOR is empty")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            suffix=".txt",
            delete=False,
        ) as handle:
            if initial_text:
                handle.write(initial_text)
            temp_path = Path(handle.name)

        completed = subprocess.run([*command, str(temp_path)], check=False)
        if completed.returncode != 0:
            raise RuntimeError(f"Editor exited with status {completed.returncode}")
        return temp_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeError(f"Editor not found: {command[0]}") from exc
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)


def resolve_input_text(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    if args.interactive:
        return read_text_from_editor()
    if args.stdin:
        return sys.stdin.read()
    if args.input:
        try:
            return Path(args.input).read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Cannot read input file: {args.input}") from exc
    parser.error("one of --interactive, --stdin, --input, or --word is required")
    return ""


def select_services(args: argparse.Namespace) -> ArticleServices:
    if args.offline:
        return offline_services()
    return services_from_env()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def build_status_reporter() -> tuple[Callable[[str], None], Callable[[], float]]:
    started = time.monotonic()
    state = {"step": 0}

    def report(message: str) -> None:
        state["step"] += 1
        elapsed = time.monotonic() - started
        print(f"[{state['step']}] {message} ({elapsed:.1f}s)", file=sys.stderr)

    def elapsed_seconds() -> float:
        return time.monotonic() - started

    return report, elapsed_seconds


def word_command(args: argparse.Namespace) -> int:
    word = args.word.strip()
    if not word:
        raise RuntimeError("--word is empty")
    services = select_services(args)
    strategies = [] if args.offline else word_strategies(services.chat)
    print(f"Chinese: {word}")
    print(f"Pinyin: {word_pinyin(word, services.transliterate)}")
    print(f"English: {translate_text(word, strategies)}")
    return 0


def annotate_command(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    text = resolve_input_text(args, parser)
    if not text.strip():
        parser.error("input is empty")

    services = select_services(args)
    status_reporter, elapsed_seconds = build_status_reporter()
    if services.chat is None:
        status_reporter("Language model: not configured (summary and vocabulary skipped)")
    else:
        status_reporter(f"Language model: {type(services.chat).__name__}")
    if not services.translators:
        status_reporter("Translation: disabled")

    run_mode: RunMode = args.run_mode
    run_context = create_run_context(Path(args.out_dir), run_mode)
    status_reporter(f"Run ID: {run_context.run_id}")
    status_reporter(f"Build output directory: {run_context.build_dir}")

    known_terms_path = Path(args.known_terms) if args.known_terms else default_known_terms_path()
    known_terms = load_known_terms(known_terms_path)
    status_reporter(f"Known terms loaded: {len(known_terms)} from {known_terms_path}")

    article = annotate_article(text, services, known_terms=known_terms, status=status_reporter)
    if args.remember:
        added = record_known_terms(article.vocabulary, known_terms_path)
        status_reporter(f"Recorded {added} new known terms in {known_terms_path}")

    write_article_json(article, str(run_context.artifact_path(ARTICLE_FILENAME)), source_text=text)
    write_sentences_csv(article.sentences, str(run_context.artifact_path(SENTENCES_FILENAME)))
    write_vocabulary_csv(article.vocabulary, str(run_context.artifact_path(VOCABULARY_FILENAME)))

    if run_context.run_mode == "both":
        published = publish_latest_artifacts(run_context)
        status_reporter(f"Published latest artifacts: {', '.join(published)}")
    manifest_path = write_latest_run_manifest(run_context, article, source_text=text)
    status_reporter(f"Wrote run manifest: {manifest_path}")

    print(
        f"Annotated {len(article.sentences)} sentences and "
        f"{len(article.vocabulary)} vocabulary items to {run_context.result_dir} "
        f"in {elapsed_seconds():.1f}s"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hanzi-reader",
        description="Annotate Chinese text with pinyin, translations, and vocabulary.",
    )
    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--interactive",
        action="store_true",
        help="Open $EDITOR to paste Chinese text.",
    )
    source_group.add_argument(
        "--stdin",
        action="store_true",
        help="Read Chinese text from standard input.",
    )
    source_group.add_argument(
        "--input",
        help="Path to a UTF-8 text file containing Chinese text.",
    )
    source_group.add_argument(
        "--word",
        help="Look up pinyin and an English gloss for a single word.",
    )
    parser.add_argument("--out-dir", default="output", help="Output directory")
    parser.add_argument(
        "--run-mode",
        choices=("latest", "archive", "both"),
        default="both",
        help=(
            "Output lifecycle mode: latest=overwrite root files, "
            "archive=write timestamped run only, both=archive and publish root files"
        ),
    )
    parser.add_argument(
        "--known-terms",
        help=(
            "Word list or exported vocabulary.csv of already-known words "
            "(default: ~/.hanzi_reader/known_vocabulary.txt)"
        ),
    )
    parser.add_argument(
        "--remember",
        action="store_true",
        help="Add this article's vocabulary to the known-terms list after the run.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the language model and translation services.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable INFO-level logging.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    configure_logging(args.verbose)
    try:
        if args.word is not None:
            return word_command(args)
        return annotate_command(args, parser)
    except RuntimeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
