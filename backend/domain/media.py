"""Media container classification by file extension."""

import os

from domain.errors import UnsupportedMediaError

VIDEO_EXTS = frozenset({".mp4", ".mkv", ".avi", ".mov", ".webm", ".flv", ".wmv", ".m4v"})
AUDIO_EXTS = frozenset({".mp3", ".wav", ".m4a", ".ogg", ".flac", ".aac", ".wma", ".mpga", ".mpeg"})

# Containers the diarization model accepts as-is; anything else is
# transcoded to mp3 first.
DIARIZE_ACCEPTED_AUDIO_EXTS = frozenset({".m4a", ".mp3", ".mp4", ".mpga", ".mpeg", ".wav", ".webm"})


def extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def classify_media(filename: str) -> str:
    """Return "audio" or "video"; raise UnsupportedMediaError otherwise."""
    ext = extension(filename)
    if ext in VIDEO_EXTS:
        return "video"
    if ext in AUDIO_EXTS:
        return "audio"
    raise UnsupportedMediaError(
        f"Unsupported format: {ext or '(none)'}. "
        f"Supported video: {', '.join(sorted(VIDEO_EXTS))}. "
        f"Audio: {', '.join(sorted(AUDIO_EXTS))}"
    )


def needs_audio_extraction(filename: str, diarize: bool) -> bool:
    """Video always needs its audio track pulled out; diarized uploads need an accepted container."""
    if classify_media(filename) == "video":
        return True
    return diarize and extension(filename) not in DIARIZE_ACCEPTED_AUDIO_EXTS
