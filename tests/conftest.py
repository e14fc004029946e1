"""Shared fakes for the pipeline ports.

No test touches ffmpeg or the network: the audio port writes files of a
requested size (sparse, so oversized inputs cost nothing) and the remote
ports return canned responses while recording every call.
"""

from typing import Callable, Optional

import pytest

from config import Config
from domain.models import (
    DiarizedSegment,
    DiarizedTranscriptionRequest,
    TranscriptionRequest,
    TranscriptionResult,
)
from ports.audio import AudioProcessingPort
from ports.formatting import TextGenerationPort
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort


def write_sized(path, size: int) -> None:
    with open(path, "wb") as f:
        f.truncate(size)


class FakeAudio(AudioProcessingPort):
    def __init__(self, duration: float = 300.0, compressed_size: int = 1000, chunk_size: int = 100):
        self.duration = duration
        self.compressed_size = compressed_size
        self.chunk_size = chunk_size
        self.calls: list[tuple] = []

    def get_duration(self, path: str) -> float:
        self.calls.append(("get_duration", path))
        return self.duration

    def compress(self, input_path: str, output_path: str, bitrate_kbps: int) -> None:
        self.calls.append(("compress", input_path, output_path, bitrate_kbps))
        write_sized(output_path, self.compressed_size)

    def extract_chunk(self, input_path, output_path, start_seconds, duration_seconds, bitrate_kbps) -> None:
        self.calls.append(("extract_chunk", input_path, output_path, start_seconds, duration_seconds, bitrate_kbps))
        write_sized(output_path, self.chunk_size)

    def extract_audio_track(self, input_path: str, output_path: str) -> None:
        self.calls.append(("extract_audio_track", input_path, output_path))
        write_sized(output_path, 50)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeTranscription(TranscriptionPort):
    def __init__(self, respond: Optional[Callable[[TranscriptionRequest, int], TranscriptionResult]] = None):
        self.requests: list[TranscriptionRequest] = []
        self._respond = respond or self._default

    @staticmethod
    def _default(request: TranscriptionRequest, index: int) -> TranscriptionResult:
        if isinstance(request, DiarizedTranscriptionRequest):
            seg = DiarizedSegment(start=0.0, end=1.0, text=f"Hello {index}", speaker="speaker_0")
            return TranscriptionResult(text=seg.text, segments=[seg], speakers=["speaker_0"])
        return TranscriptionResult(text=f"plain transcript {index}")

    def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        self.requests.append(request)
        return self._respond(request, len(self.requests) - 1)

    def model_name(self, diarize: bool = False) -> str:
        return "fake-diarize" if diarize else "fake-plain"


class FakeProgress(ProgressPort):
    def __init__(self):
        self.stages: list[str] = []

    def report(self, job_id, stage, progress=0.0, detail=None) -> None:
        self.stages.append(stage)


class FakeTextGenerator(TextGenerationPort):
    def __init__(self, transform: Optional[Callable[[str], str]] = None):
        self.prompts: list[str] = []
        self._transform = transform

    def generate(self, system: str, prompt: str, max_output_tokens: int) -> str:
        self.prompts.append(prompt)
        if self._transform:
            return self._transform(prompt)
        return prompt.split("---\n\n", 1)[-1]


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(temp_dir=str(tmp_path / "work"))


@pytest.fixture
def fake_audio() -> FakeAudio:
    return FakeAudio()


@pytest.fixture
def fake_transcription() -> FakeTranscription:
    return FakeTranscription()


@pytest.fixture
def fake_progress() -> FakeProgress:
    return FakeProgress()
