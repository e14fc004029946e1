"""OpenAITranscriptionAdapter — plain and diarized transcription over the OpenAI audio API.

Plain mode uses whisper-1 with verbose_json for coarse segments. Diarized
mode uses gpt-4o-transcribe-diarize; known speakers (name + reference clip
pairs) are sent via extra_body. Names without references are never sent;
they are mapped locally onto the labels the model invents.
"""

import logging
from typing import Any, Optional

import openai

from domain.errors import RemoteServiceError
from domain.models import (
    DiarizedSegment,
    DiarizedTranscriptionRequest,
    PlainTranscriptionRequest,
    SpeakerProfile,
    TranscriptionRequest,
    TranscriptionResult,
)
from domain.speakers import (
    DEFAULT_SPEAKER_LABEL,
    apply_speaker_names,
    audio_mime_type,
    normalize_references,
    normalize_speaker_names,
    resolve_references,
    validate_speaker_hints,
)
from ports.transcription import TranscriptionPort
from post_processing import distinct_speakers

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"
DEFAULT_DIARIZE_MODEL = "gpt-4o-transcribe-diarize"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # SDK responses are pydantic models; some compatible gateways return dicts.
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class OpenAITranscriptionAdapter(TranscriptionPort):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transcription_model: str = DEFAULT_TRANSCRIPTION_MODEL,
        diarize_model: str = DEFAULT_DIARIZE_MODEL,
        client: Optional[Any] = None,
    ):
        self._client = client or openai.OpenAI(api_key=api_key, base_url=base_url)
        self._transcription_model = transcription_model
        self._diarize_model = diarize_model

    def model_name(self, diarize: bool = False) -> str:
        return self._diarize_model if diarize else self._transcription_model

    def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        if isinstance(request, DiarizedTranscriptionRequest):
            return self._transcribe_diarized(request)
        if isinstance(request, PlainTranscriptionRequest):
            return self._transcribe_plain(request)
        raise TypeError(f"Unsupported transcription request: {type(request).__name__}")

    def _transcribe_plain(self, request: PlainTranscriptionRequest) -> TranscriptionResult:
        logger.info(f"Sending {len(request.audio)} bytes to {self._transcription_model}")
        response = self._call(
            model=self._transcription_model,
            file=(request.filename, request.audio, audio_mime_type(request.filename)),
            response_format="verbose_json",
        )

        segments = [
            DiarizedSegment(
                start=float(_field(seg, "start", 0.0)),
                end=float(_field(seg, "end", 0.0)),
                text=(_field(seg, "text") or "").strip(),
                speaker=DEFAULT_SPEAKER_LABEL,
            )
            for seg in (_field(response, "segments") or [])
        ]
        # Plain mode has no speaker attribution.
        return TranscriptionResult(text=_field(response, "text") or "", segments=segments, speakers=[])

    def _transcribe_diarized(self, request: DiarizedTranscriptionRequest) -> TranscriptionResult:
        names = normalize_speaker_names(request.speaker_names)
        references = normalize_references(request.speaker_references)
        validate_speaker_hints(names, references)

        params: dict[str, Any] = {
            "model": self._diarize_model,
            "file": (request.filename, request.audio, audio_mime_type(request.filename)),
            "response_format": "diarized_json",
            "chunking_strategy": "auto",
        }
        if references:
            profiles = [
                SpeakerProfile(name=name, reference=reference)
                for name, reference in zip(names, resolve_references(references))
            ]
            params["extra_body"] = {
                "known_speaker_names": [p.name for p in profiles],
                "known_speaker_references": [p.reference for p in profiles],
            }

        logger.info(
            f"Sending {len(request.audio)} bytes to {self._diarize_model} "
            f"({len(names)} speaker names, {len(references)} references)"
        )
        response = self._call(**params)

        segments = [
            DiarizedSegment(
                start=float(_field(seg, "start", 0.0)),
                end=float(_field(seg, "end", 0.0)),
                text=(_field(seg, "text") or "").strip(),
                speaker=_field(seg, "speaker") or DEFAULT_SPEAKER_LABEL,
            )
            for seg in (_field(response, "segments") or [])
        ]

        if names and not references:
            segments = apply_speaker_names(segments, names)

        speakers = distinct_speakers(segments)
        logger.info(f"Diarized {len(segments)} segments, {len(speakers)} speakers")
        return TranscriptionResult(
            text=_field(response, "text") or "",
            segments=segments,
            speakers=speakers,
        )

    def _call(self, **params: Any) -> Any:
        try:
            return self._client.audio.transcriptions.create(**params)
        except openai.APIStatusError as exc:
            logger.error(f"Transcription API error {exc.status_code}: {exc.message}")
            raise RemoteServiceError(exc.message, status_code=exc.status_code) from exc
        except openai.OpenAIError as exc:
            logger.error(f"Transcription request failed: {exc}")
            raise RemoteServiceError(str(exc)) from exc
