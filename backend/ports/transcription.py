"""TranscriptionPort — abstract interface for the remote transcription service."""

from abc import ABC, abstractmethod

from domain.models import TranscriptionRequest, TranscriptionResult


class TranscriptionPort(ABC):
    @abstractmethod
    def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        """Transcribe one upload. Diarized requests return speaker-labelled segments."""

    @abstractmethod
    def model_name(self, diarize: bool = False) -> str:
        """Return the model name used for the given mode."""
