"""Framework-agnostic domain models for Echo Markdown.

These are the in-memory structures passed between the planner, the
transcription adapters and the orchestrator. Pydantic DTOs in models.py stay
at the API boundary, with mappers in between.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class AudioAsset:
    """An audio buffer with the filename used to infer its container type."""
    path: str
    filename: str
    data: bytes
    duration: Optional[float] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ChunkBoundary:
    """A time window of the source audio, in seconds."""
    index: int
    start_seconds: float
    duration_seconds: float

    @property
    def end_seconds(self) -> float:
        return self.start_seconds + self.duration_seconds


@dataclass
class DiarizedSegment:
    """A transcribed speech segment with timing and speaker label."""
    start: float
    end: float
    text: str
    speaker: str

    def shifted(self, offset: float) -> "DiarizedSegment":
        return DiarizedSegment(
            start=self.start + offset,
            end=self.end + offset,
            text=self.text,
            speaker=self.speaker,
        )


@dataclass
class TranscriptionResult:
    """Full transcript text plus speaker-labelled segments (diarized mode)."""
    text: str
    segments: list[DiarizedSegment] = field(default_factory=list)
    speakers: list[str] = field(default_factory=list)
    diarized: bool = False
    model: Optional[str] = None


@dataclass(frozen=True)
class SpeakerProfile:
    """A display name bound to a reference clip for known-speaker matching."""
    name: str
    reference: str


@dataclass(frozen=True)
class PlainTranscriptionRequest:
    audio: bytes
    filename: str


@dataclass(frozen=True)
class DiarizedTranscriptionRequest:
    audio: bytes
    filename: str
    speaker_names: tuple[str, ...] = ()
    speaker_references: tuple[str, ...] = ()


TranscriptionRequest = Union[PlainTranscriptionRequest, DiarizedTranscriptionRequest]
