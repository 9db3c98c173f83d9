"""Summarization via the Claude API (optional)."""

from __future__ import annotations

import json
import os
import re

from chunkscribe.errors import CapabilityFailure
from chunkscribe.models.summary import (
    ReminderItem,
    SummaryResult,
    TaskItem,
    TitleItem,
)
from chunkscribe.processing.content import classify_content, extractive_summary
from chunkscribe.utils.progress import log_step, log_warning
from chunkscribe.utils.retry import retry_api


SUMMARY_PROMPT = """Summarize this recording transcript.

Content type: {content_type}

TRANSCRIPT:
{transcript_text}

Return a JSON object with exactly these fields:
1. "summary": a concise summary in 3-6 sentences
2. "tasks": array of objects with {{text, priority}} where priority is one of: high, medium, low
3. "reminders": array of objects with {{text, time_reference}} (time_reference may be null)
4. "titles": array of objects with {{text, confidence}} with up to 3 title suggestions, confidence 0.0-1.0

Return ONLY valid JSON, no markdown formatting."""


class ClaudeSummarization:
    """Summary, tasks, reminders and titles from Claude.

    Without ``ANTHROPIC_API_KEY`` or the anthropic package it degrades to
    the local extractive summary.
    """

    name = "claude"

    def __init__(self, *, model: str = "claude-sonnet-4-6", max_tokens: int = 2048):
        self.model = model
        self.max_tokens = max_tokens

    def summarize(self, text: str) -> SummaryResult:
        content_type = classify_content(text)

        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            log_warning("ANTHROPIC_API_KEY not set — using local extractive summary.")
            return extractive_summary(text)

        try:
            import anthropic
        except ImportError:
            log_warning(
                "anthropic package not installed — using local extractive summary. "
                "Install with: pip install chunkscribe[llm]"
            )
            return extractive_summary(text)

        client = anthropic.Anthropic(api_key=api_key)
        prompt = SUMMARY_PROMPT.format(
            content_type=content_type.value,
            transcript_text=text,
        )
        log_step("Summarize", f"Sending {len(text)} characters to Claude ({self.model})")

        try:
            message = self._create(client, prompt)
        except Exception as e:
            raise CapabilityFailure("Claude API error", wrapped=e) from e

        parsed = _parse_llm_response(message.content[0].text)
        if parsed is None:
            raise CapabilityFailure("Claude returned an unparseable summary")

        return SummaryResult(
            summary=parsed.get("summary", ""),
            tasks=[TaskItem(**t) for t in parsed.get("tasks", [])],
            reminders=[ReminderItem(**r) for r in parsed.get("reminders", [])],
            titles=[TitleItem(**t) for t in parsed.get("titles", [])],
            content_type=content_type,
        )

    @retry_api()
    def _create(self, client, prompt: str):
        return client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )


def _parse_llm_response(text: str) -> dict | None:
    """Parse JSON from LLM response, handling common formatting issues."""
    text = text.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                pass
        log_warning("Failed to parse LLM response as JSON")
        return None
