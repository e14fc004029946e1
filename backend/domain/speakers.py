"""Speaker hint handling for diarized transcription.

Validation of caller-supplied speaker names and reference clips, reference
resolution to data URIs, upload MIME inference and local name mapping.
"""

import base64
import logging
import os
from typing import Iterable, Optional

from domain.errors import LimitError, PairingError, ReferenceFormatError
from domain.models import DiarizedSegment

logger = logging.getLogger(__name__)

MAX_KNOWN_SPEAKERS = 4

DEFAULT_SPEAKER_LABEL = "Speaker"

# The remote service sniffs the container itself, so unknown extensions are
# uploaded as generic binary.
AUDIO_MIME_TYPES = {
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".mp3": "audio/mpeg",
    ".mp4": "audio/mp4",
    ".mpeg": "audio/mpeg",
    ".mpga": "audio/mpeg",
    ".oga": "audio/ogg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
}
FALLBACK_MIME_TYPE = "application/octet-stream"

# Formats accepted for known-speaker reference clips.
REFERENCE_MIME_TYPES = {
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
}


def _clean(values: Optional[Iterable[str]]) -> list[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


def normalize_speaker_names(names: Optional[Iterable[str]]) -> list[str]:
    return _clean(names)


def normalize_references(references: Optional[Iterable[str]]) -> list[str]:
    return _clean(references)


def has_speaker_hints(names: list[str], references: list[str]) -> bool:
    return bool(names) or bool(references)


def resolve_diarize(
    diarize: Optional[bool],
    names: list[str],
    references: list[str],
    default: bool = True,
) -> bool:
    """Speaker hints imply diarization, overriding an explicit opt-out."""
    if has_speaker_hints(names, references):
        if diarize is False:
            logger.info("Speaker options imply diarization; ignoring diarize=false")
        return True
    return default if diarize is None else diarize


def validate_speaker_hints(names: list[str], references: list[str]) -> None:
    """Check name/reference pairing before any file I/O or remote call."""
    if references and not names:
        raise PairingError(
            "Known speaker references require speaker names so each reference "
            "can be matched to a name."
        )
    if references and len(references) != len(names):
        raise PairingError(
            "Speaker names and references must have the same number of entries "
            f"(got {len(names)} names and {len(references)} references)."
        )
    if len(names) > MAX_KNOWN_SPEAKERS:
        raise LimitError(
            f"At most {MAX_KNOWN_SPEAKERS} known speakers are supported (got {len(names)})."
        )


def audio_mime_type(filename: str) -> str:
    ext = os.path.splitext(filename)[1].lower()
    return AUDIO_MIME_TYPES.get(ext, FALLBACK_MIME_TYPE)


def resolve_reference(reference: str) -> str:
    """Turn a reference clip path into a data URI; data URIs pass through."""
    if reference.startswith("data:"):
        return reference

    ext = os.path.splitext(reference)[1].lower()
    mime = REFERENCE_MIME_TYPES.get(ext)
    if mime is None:
        supported = ", ".join(sorted(REFERENCE_MIME_TYPES))
        raise ReferenceFormatError(
            f"Unsupported speaker reference format {ext or '(none)'} for {reference}. "
            f"Supported: {supported}"
        )

    with open(reference, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def resolve_references(references: list[str]) -> list[str]:
    return [resolve_reference(ref) for ref in references]


def apply_speaker_names(
    segments: list[DiarizedSegment],
    names: list[str],
) -> list[DiarizedSegment]:
    """Map raw diarization labels onto names by order of first appearance.

    Labels beyond the supplied names keep their raw label.
    """
    if not names:
        return segments

    mapping: dict[str, str] = {}
    for seg in segments:
        if seg.speaker not in mapping and len(mapping) < len(names):
            mapping[seg.speaker] = names[len(mapping)]

    detected = len({seg.speaker for seg in segments})
    if detected != len(names):
        logger.info(f"Supplied {len(names)} speaker names but detected {detected} speakers")

    return [
        DiarizedSegment(
            start=seg.start,
            end=seg.end,
            text=seg.text,
            speaker=mapping.get(seg.speaker, seg.speaker),
        )
        for seg in segments
    ]
