"""Post-processing for chunked transcription output.

Functions for cross-chunk duplicate suppression, speaker list computation,
chunk result merging and rendering diarized segments as readable text.
"""

import logging
from typing import List, Optional

from domain.models import DiarizedSegment, TranscriptionResult

logger = logging.getLogger(__name__)

# Seconds after the last kept segment's end in which a candidate is checked
# for being a re-transcription of it.
DEFAULT_DEDUP_WINDOW = 1.0


def _normalize(text: str) -> str:
    return text.strip().lower()


def _is_duplicate_text(candidate: str, kept: str) -> bool:
    a = _normalize(candidate)
    b = _normalize(kept)
    return a == b or a in b or b in a


def deduplicate_segments(
    segments: List[DiarizedSegment],
    window: float = DEFAULT_DEDUP_WINDOW,
) -> List[DiarizedSegment]:
    """Drop segments transcribed twice in the overlap between two chunks.

    Segments are sorted by start time. A candidate is a duplicate when it
    starts no later than `window` seconds after the last kept segment ends
    and its normalized text equals, contains or is contained in the kept
    segment's text. Only the last kept segment is compared.

    Args:
        segments: Segments from all chunks, already shifted to global time.
        window: Seconds past the kept segment's end still checked.

    Returns:
        New time-ordered list without duplicates.
    """
    ordered = sorted(segments, key=lambda s: s.start)
    kept: List[DiarizedSegment] = []
    dropped = 0

    for seg in ordered:
        if kept:
            last = kept[-1]
            if seg.start <= last.end + window and _is_duplicate_text(seg.text, last.text):
                dropped += 1
                continue
        kept.append(seg)

    if dropped:
        logger.info(f"Deduplication: dropped {dropped} overlapping segments")
    return kept


def distinct_speakers(segments: List[DiarizedSegment]) -> List[str]:
    """Distinct speaker labels in order of first appearance."""
    seen: List[str] = []
    for seg in segments:
        if seg.speaker not in seen:
            seen.append(seg.speaker)
    return seen


def merge_chunk_results(
    segments: List[DiarizedSegment],
    window: float = DEFAULT_DEDUP_WINDOW,
) -> TranscriptionResult:
    """Build one diarized result from globally-timed segments of all chunks."""
    merged = deduplicate_segments(segments, window=window)
    return TranscriptionResult(
        text=" ".join(seg.text for seg in merged if seg.text),
        segments=merged,
        speakers=distinct_speakers(merged),
    )


def format_timestamp(seconds: float) -> str:
    """Render seconds as M:SS, or H:MM:SS past the first hour."""
    total = int(seconds)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_diarized_segments(segments: List[DiarizedSegment]) -> str:
    """Render segments as speaker turns.

    A `**Speaker** [M:SS]` header starts each turn; consecutive segments by
    the same speaker are listed under one header.
    """
    lines: List[str] = []
    current: Optional[str] = None

    for seg in segments:
        if seg.speaker != current:
            current = seg.speaker
            if lines:
                lines.append("")
            lines.append(f"**{current}** [{format_timestamp(seg.start)}]")
        lines.append(seg.text)

    return "\n".join(lines)
