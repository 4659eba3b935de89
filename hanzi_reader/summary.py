from __future__ import annotations

import logging
from typing import Optional

from .llm import ChatClient

logger = logging.getLogger(__name__)

SUMMARY_NOT_CONFIGURED = "Summary not available (language model not configured)"
SUMMARY_FAILED = "Summary generation failed"

SUMMARY_SYSTEM_PROMPT = (
    "You are helping a middle-school student learn Chinese. "
    "Provide brief summaries in English (2-3 sentences)."
)


def build_summary_prompt(text: str) -> str:
    return (
        "Analyze this Chinese article and provide a brief summary in English "
        "(2-3 sentences) that explains:\n"
        "1. What the article is about\n"
        "2. Key information or main points\n\n"
        f"Chinese article:\n{text}\n\n"
        "Respond with only the summary in English, no additional formatting."
    )


def summarize(text: str, client: Optional[ChatClient]) -> str:
    if client is None:
        return SUMMARY_NOT_CONFIGURED
    try:
        summary = client.complete(SUMMARY_SYSTEM_PROMPT, build_summary_prompt(text), temperature=0.3)
        if not isinstance(summary, str):
            raise ValueError(f"Chat client returned {type(summary).__name__}")
        summary = summary.strip()
    except Exception:
        logger.warning("Summary generation failed", exc_info=True)
        return SUMMARY_FAILED
    if not summary:
        logger.warning("Summary generation returned an empty completion")
        return SUMMARY_FAILED
    return summary
