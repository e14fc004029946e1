"""Bitrate and chunk planning for uploads to the transcription service.

Pure functions: no I/O, no logging.
"""

import math

from domain.models import ChunkBoundary

# Hard upload limit of the transcription endpoint (25 MiB).
WHISPER_MAX_BYTES = 26_214_400

# Kept below the hard limit to absorb VBR overshoot and container overhead.
SAFE_MAX_BYTES = 24_000_000

# Below this bitrate speech transcription quality degrades.
MIN_BITRATE_KBPS = 32

# Native rate of the transcription model; downsampling to it loses nothing.
SPEECH_SAMPLE_RATE = 16_000

# Longest audio that still fits SAFE_MAX_BYTES at MIN_BITRATE_KBPS mono.
# 32kbps = 4000 bytes/s -> 24_000_000 / 4000 = 6000s (100 min)
MAX_SINGLE_CHUNK_SECONDS = SAFE_MAX_BYTES * 8 / (MIN_BITRATE_KBPS * 1000)

CHUNK_DURATION_SECONDS = 1500
CHUNK_OVERLAP_SECONDS = 15


def is_audio_oversized(size_bytes: int, limit: int = SAFE_MAX_BYTES) -> bool:
    return size_bytes > limit


def calculate_target_bitrate(duration_seconds: float, max_bytes: int = SAFE_MAX_BYTES) -> int:
    """Bitrate (kbps) that fits `duration_seconds` of audio into `max_bytes`."""
    target_kbps = math.floor(max_bytes * 8 / duration_seconds / 1000)
    return max(target_kbps, MIN_BITRATE_KBPS)


def needs_chunking(duration_seconds: float) -> bool:
    return duration_seconds > MAX_SINGLE_CHUNK_SECONDS


def calculate_chunk_boundaries(
    total_duration_seconds: float,
    chunk_duration: float = CHUNK_DURATION_SECONDS,
    overlap: float = CHUNK_OVERLAP_SECONDS,
) -> list[ChunkBoundary]:
    """Split a duration into overlapping windows that cover it without gaps.

    Audio short enough to be compressed into a single upload gets one
    boundary spanning the whole file. Longer audio is windowed every
    `chunk_duration - overlap` seconds; the last window is clamped to the
    remaining duration so no read goes past the end, and windowing stops
    as soon as one window reaches the end.
    """
    if not needs_chunking(total_duration_seconds):
        return [ChunkBoundary(index=0, start_seconds=0.0, duration_seconds=total_duration_seconds)]

    if overlap >= chunk_duration:
        raise ValueError(f"overlap ({overlap}s) must be shorter than chunk_duration ({chunk_duration}s)")

    step = chunk_duration - overlap
    boundaries: list[ChunkBoundary] = []
    start = 0.0
    index = 0
    while start < total_duration_seconds:
        remaining = total_duration_seconds - start
        boundaries.append(ChunkBoundary(
            index=index,
            start_seconds=start,
            duration_seconds=min(chunk_duration, remaining),
        ))
        # Stop once a window reaches the end; another would lie inside it.
        if remaining <= chunk_duration:
            break
        start += step
        index += 1
    return boundaries
