"""TranscribeAudioUseCase — turns one audio/video file into a single transcript.

Accepts its ports via dependency injection. Decides once whether to
diarize, makes the audio fit the upload limit (single upload, one
compression pass, or overlapping chunks), transcribes, re-bases chunk
timestamps and merges the chunks back into one deduplicated transcript.
Chunks are processed sequentially; a failing chunk aborts the whole file.
"""

import os
import shutil
import logging
import tempfile
import uuid
from dataclasses import dataclass, field
from typing import Optional

from config import Config
from domain.errors import CompressionInvariantError
from domain.media import needs_audio_extraction
from domain.models import (
    AudioAsset,
    ChunkBoundary,
    DiarizedSegment,
    DiarizedTranscriptionRequest,
    PlainTranscriptionRequest,
    TranscriptionRequest,
    TranscriptionResult,
)
from domain.planner import (
    SAFE_MAX_BYTES,
    WHISPER_MAX_BYTES,
    calculate_chunk_boundaries,
    calculate_target_bitrate,
    is_audio_oversized,
    needs_chunking,
)
from domain.speakers import (
    normalize_references,
    normalize_speaker_names,
    resolve_diarize,
    resolve_references,
    validate_speaker_hints,
)
from ports.audio import AudioProcessingPort
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort
from post_processing import merge_chunk_results

logger = logging.getLogger(__name__)


@dataclass
class TranscribeRequest:
    """All parameters for transcribing one file."""
    audio_path: str
    filename: str
    diarize: Optional[bool] = None
    speaker_names: list[str] = field(default_factory=list)
    speaker_references: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Plan:
    diarize: bool
    names: tuple[str, ...]
    references: tuple[str, ...]


class TranscribeAudioUseCase:
    def __init__(
        self,
        audio: AudioProcessingPort,
        transcription: TranscriptionPort,
        progress: ProgressPort,
        config: Optional[Config] = None,
    ):
        self._audio = audio
        self._transcription = transcription
        self._progress = progress
        self._config = config or Config()

    def execute(self, req: TranscribeRequest) -> TranscriptionResult:
        job_id = uuid.uuid4().hex[:12]

        # Everything that can fail on caller input happens before any ffmpeg run.
        plan = self._plan(req)
        extract = needs_audio_extraction(req.filename, plan.diarize)

        os.makedirs(self._config.temp_dir, exist_ok=True)
        workdir = tempfile.mkdtemp(prefix="transcribe-", dir=self._config.temp_dir)
        try:
            audio_path = req.audio_path
            upload_name = os.path.basename(req.filename)
            if extract:
                self._progress.report(job_id, "extracting")
                audio_path = os.path.join(workdir, "audio.mp3")
                self._audio.extract_audio_track(req.audio_path, audio_path)
                upload_name = "audio.mp3"

            result = self._transcribe_file(job_id, audio_path, upload_name, plan, workdir)
            result.diarized = plan.diarize
            result.model = self._transcription.model_name(plan.diarize)
            self._progress.report(job_id, "done", detail=f"{len(result.text)} chars")
            return result
        except Exception:
            self._progress.report(job_id, "failed")
            raise
        finally:
            self._cleanup(workdir)

    def _plan(self, req: TranscribeRequest) -> _Plan:
        names = normalize_speaker_names(req.speaker_names)
        references = normalize_references(req.speaker_references)
        diarize = resolve_diarize(req.diarize, names, references, default=self._config.default_diarize)
        if diarize:
            validate_speaker_hints(names, references)
            references = resolve_references(references)
            logger.info(f"Diarization enabled ({self._transcription.model_name(True)})")
        return _Plan(diarize=diarize, names=tuple(names), references=tuple(references))

    def _transcribe_file(
        self,
        job_id: str,
        audio_path: str,
        upload_name: str,
        plan: _Plan,
        workdir: str,
    ) -> TranscriptionResult:
        size = os.path.getsize(audio_path)
        logger.info(f"Audio size: {size // 1024} KB")

        if not is_audio_oversized(size):
            self._progress.report(job_id, "transcribing")
            return self._transcribe_once(audio_path, upload_name, plan)

        self._progress.report(job_id, "probing")
        duration = self._audio.get_duration(audio_path)

        if needs_chunking(duration):
            return self._transcribe_chunked(job_id, audio_path, duration, plan, workdir)

        bitrate = calculate_target_bitrate(duration, SAFE_MAX_BYTES)
        self._progress.report(job_id, "compressing", detail=f"{bitrate}kbps")
        compressed_path = os.path.join(workdir, "compressed.mp3")
        self._audio.compress(audio_path, compressed_path, bitrate)

        compressed_size = os.path.getsize(compressed_path)
        logger.info(f"Compressed {size // 1024} KB -> {compressed_size // 1024} KB at {bitrate}kbps")
        if compressed_size > WHISPER_MAX_BYTES:
            raise CompressionInvariantError(compressed_size, WHISPER_MAX_BYTES, bitrate)

        self._progress.report(job_id, "transcribing")
        return self._transcribe_once(compressed_path, "compressed.mp3", plan)

    def _transcribe_chunked(
        self,
        job_id: str,
        audio_path: str,
        duration: float,
        plan: _Plan,
        workdir: str,
    ) -> TranscriptionResult:
        boundaries = calculate_chunk_boundaries(
            duration,
            chunk_duration=self._config.chunk_duration,
            overlap=self._config.chunk_overlap,
        )
        logger.info(f"Splitting {duration:.0f}s of audio into {len(boundaries)} chunks")

        segments: list[DiarizedSegment] = []
        texts: list[str] = []
        for boundary in boundaries:
            self._progress.report(
                job_id, "transcribing",
                progress=(boundary.index + 1) / len(boundaries),
                detail=f"chunk {boundary.index + 1}/{len(boundaries)}",
            )
            chunk = self._transcribe_chunk(audio_path, boundary, plan, workdir)
            segments = segments + [seg.shifted(boundary.start_seconds) for seg in chunk.segments]
            texts.append(chunk.text.strip())

        self._progress.report(job_id, "merging")
        if plan.diarize:
            return merge_chunk_results(segments, window=self._config.dedup_window)

        return TranscriptionResult(
            text="\n\n".join(t for t in texts if t),
            segments=sorted(segments, key=lambda s: s.start),
            speakers=[],
        )

    def _transcribe_chunk(
        self,
        audio_path: str,
        boundary: ChunkBoundary,
        plan: _Plan,
        workdir: str,
    ) -> TranscriptionResult:
        chunk_name = f"chunk_{boundary.index}.mp3"
        chunk_path = os.path.join(workdir, chunk_name)
        bitrate = calculate_target_bitrate(boundary.duration_seconds, SAFE_MAX_BYTES)
        self._audio.extract_chunk(
            audio_path, chunk_path,
            boundary.start_seconds, boundary.duration_seconds, bitrate,
        )
        logger.info(
            f"Chunk {boundary.index}: {boundary.start_seconds:.0f}s-{boundary.end_seconds:.0f}s "
            f"at {bitrate}kbps"
        )
        return self._transcribe_once(chunk_path, chunk_name, plan)

    def _transcribe_once(self, path: str, upload_name: str, plan: _Plan) -> TranscriptionResult:
        with open(path, "rb") as f:
            asset = AudioAsset(path=path, filename=upload_name, data=f.read())
        logger.info(f"Uploading {asset.filename} ({asset.size // 1024} KB)")
        return self._transcription.transcribe(self._build_request(asset, plan))

    @staticmethod
    def _build_request(asset: AudioAsset, plan: _Plan) -> TranscriptionRequest:
        if plan.diarize:
            return DiarizedTranscriptionRequest(
                audio=asset.data,
                filename=asset.filename,
                speaker_names=plan.names,
                speaker_references=plan.references,
            )
        return PlainTranscriptionRequest(audio=asset.data, filename=asset.filename)

    @staticmethod
    def _cleanup(workdir: str) -> None:
        try:
            shutil.rmtree(workdir)
        except OSError as e:
            logger.warning(f"Cleanup error: {e}")
