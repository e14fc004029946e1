"""MarkdownFormatter — polishes raw text into markdown with a remote text model.

Input larger than one request can carry is split at heading, paragraph or
line boundaries, every part is formatted concurrently, and the results are
joined back in their original order.
"""

import re
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from ports.formatting import TextGenerationPort

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4

# Tokens reserved for the system prompt and the request template.
PROMPT_OVERHEAD_TOKENS = 1024

DEFAULT_MAX_OUTPUT_TOKENS = 8192

SYSTEM_PROMPT = (
    "You are a markdown formatting assistant. Convert the provided raw text into clean, "
    "well-structured markdown. Use headings, lists, code blocks, and emphasis where "
    "appropriate. Preserve all factual content. Do not add information not present in "
    "the source. Output only the markdown, no preamble."
)

_HEADING_BOUNDARY = re.compile(r"\n(?=#{1,6}\s)")


@dataclass(frozen=True)
class FormatContext:
    content_type: str
    title: Optional[str] = None
    source: Optional[str] = None


def max_input_chars(
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    overhead_tokens: int = PROMPT_OVERHEAD_TOKENS,
) -> int:
    """Characters of raw text one request may carry.

    The model reproduces its input as markdown, so input is bounded by
    the output budget left after the prompt overhead.
    """
    return max(1, (max_output_tokens - overhead_tokens) * CHARS_PER_TOKEN)


def _find_cut(text: str, max_chars: int) -> int:
    window = text[:max_chars]
    half = max_chars // 2

    headings = [m.start() for m in _HEADING_BOUNDARY.finditer(window)]
    if headings and headings[-1] > half:
        return headings[-1]

    paragraph = window.rfind("\n\n")
    if paragraph > half:
        return paragraph

    newline = window.rfind("\n")
    if newline > half:
        return newline

    return max_chars


def split_text(text: str, max_chars: int) -> list[str]:
    """Split text into parts of at most `max_chars` characters.

    Preferred cut points, in order: the last markdown heading, the last
    blank line, the last newline. Each is used only when it falls past
    half the budget; otherwise the text is cut hard at the budget.
    """
    parts: list[str] = []
    remaining = text
    while len(remaining) > max_chars:
        cut = _find_cut(remaining, max_chars)
        part = remaining[:cut].strip()
        if part:
            parts.append(part)
        remaining = remaining[cut:]
    remaining = remaining.strip()
    if remaining or not parts:
        parts.append(remaining)
    return parts


def build_prompt(
    raw_text: str,
    context: FormatContext,
    part: Optional[int] = None,
    total_parts: Optional[int] = None,
) -> str:
    lines = [
        f"Convert this {context.content_type} content into clean markdown:",
        "",
        f"Title: {context.title or 'Unknown'}",
        f"Source: {context.source or 'Unknown'}",
    ]
    if part is not None and total_parts:
        lines.append(
            f"Part {part} of {total_parts}. Format only this part of the longer document; "
            "do not add an introduction or conclusion."
        )
    lines += ["", "---", "", raw_text]
    return "\n".join(lines)


class MarkdownFormatter:
    def __init__(
        self,
        generator: TextGenerationPort,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        max_chars: Optional[int] = None,
    ):
        self._generator = generator
        self._max_output_tokens = max_output_tokens
        self._max_chars = max_chars or max_input_chars(max_output_tokens)

    def format(self, raw_text: str, context: FormatContext) -> str:
        if len(raw_text) <= self._max_chars:
            return self._generator.generate(
                SYSTEM_PROMPT, build_prompt(raw_text, context), self._max_output_tokens,
            )

        parts = split_text(raw_text, self._max_chars)
        total = len(parts)
        logger.info(f"Formatting {len(raw_text)} chars in {total} parts of <= {self._max_chars} chars")

        def _format_part(indexed: tuple[int, str]) -> str:
            index, part = indexed
            prompt = build_prompt(part, context, part=index + 1, total_parts=total)
            return self._generator.generate(SYSTEM_PROMPT, prompt, self._max_output_tokens)

        # Results come back in submission order, not completion order.
        with ThreadPoolExecutor(max_workers=total) as pool:
            formatted = list(pool.map(_format_part, enumerate(parts)))

        return "\n\n".join(formatted)
