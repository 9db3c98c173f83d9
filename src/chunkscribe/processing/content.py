"""Heuristics over transcript text: content type, titles, fallback summary."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from chunkscribe.models.summary import ContentType, SummaryResult, TaskItem, TitleItem

_KEYWORDS: list[tuple[ContentType, tuple[str, ...]]] = [
    (ContentType.MEETING, ("meeting", "discussion", "agenda")),
    (ContentType.TECHNICAL, ("technical", "code", "api")),
    (ContentType.PERSONAL_JOURNAL, ("personal", "diary", "journal")),
]

_TASK_PATTERN = re.compile(
    r"\b(need to|needs to|have to|has to|must|should|remember to|todo|to-do)\b",
    re.IGNORECASE,
)

MAX_TITLE_LENGTH = 50


def classify_content(text: str) -> ContentType:
    """Keyword-based content classification."""
    lowered = text.lower()
    for content_type, words in _KEYWORDS:
        if any(w in lowered for w in words):
            return content_type
    return ContentType.GENERAL


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in re.split(r"[.!?]", text) if s.strip()]


def fallback_title(text: str, recording_path: Path | str, *, now: datetime | None = None) -> str:
    """First meaningful sentence, or the file name plus a timestamp."""
    sentences = [s for s in split_sentences(text) if len(s) > 10]
    if sentences:
        first = sentences[0]
        if len(first) > MAX_TITLE_LENGTH:
            return first[:MAX_TITLE_LENGTH] + "..."
        return first

    stem = Path(recording_path).stem
    stamp = (now or datetime.now()).strftime("%b %d, %Y %H:%M")
    return f"{stem} - {stamp}"


def extractive_summary(text: str, *, max_sentences: int = 3) -> SummaryResult:
    """Local summary used when no LLM is available.

    Takes the leading sentences as the summary and every sentence phrased
    as an obligation as a task.
    """
    sentences = split_sentences(text)
    summary = ". ".join(sentences[:max_sentences])
    if summary:
        summary += "."
    tasks = [TaskItem(text=s) for s in sentences if _TASK_PATTERN.search(s)]
    titles = []
    if sentences:
        titles.append(TitleItem(text=fallback_title(text, "recording"), confidence=0.3))
    return SummaryResult(
        summary=summary,
        tasks=tasks,
        titles=titles,
        content_type=classify_content(text),
    )


class ExtractiveSummarization:
    """Summarization engine that runs entirely offline."""

    name = "local"

    def summarize(self, text: str) -> SummaryResult:
        return extractive_summary(text)
