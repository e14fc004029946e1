"""AudioProcessingPort — abstract interface for the external media tool."""

from abc import ABC, abstractmethod


class AudioProcessingPort(ABC):
    @abstractmethod
    def get_duration(self, path: str) -> float:
        """Return container duration in seconds. Raises ProbeError."""

    @abstractmethod
    def compress(self, input_path: str, output_path: str, bitrate_kbps: int) -> None:
        """Re-encode to mono 16kHz at a constant bitrate. Raises TranscodeError."""

    @abstractmethod
    def extract_chunk(
        self,
        input_path: str,
        output_path: str,
        start_seconds: float,
        duration_seconds: float,
        bitrate_kbps: int,
    ) -> None:
        """Re-encode the [start, start + duration) window. Raises TranscodeError."""

    @abstractmethod
    def extract_audio_track(self, input_path: str, output_path: str) -> None:
        """Extract or transcode the audio track to mp3. Raises TranscodeError."""
