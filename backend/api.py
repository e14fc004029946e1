"""HTTP surface: upload an audio/video file, get markdown back."""

import os
import shutil
import logging
import tempfile
from typing import List, Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from config import Config, create_media_converter, load_config
from domain.errors import (
    CompressionInvariantError,
    ProbeError,
    ReferenceFormatError,
    RemoteServiceError,
    SpeakerHintError,
    TranscodeError,
    UnsupportedMediaError,
)
from mappers import result_to_response
from models import ConversionResponse, ErrorResponse, HealthResponse
from use_cases.convert_media import ConversionOptions, ConvertMediaUseCase

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (SpeakerHintError, 400),
    (UnsupportedMediaError, 400),
    (ProbeError, 422),
    (TranscodeError, 422),
    (RemoteServiceError, 502),
    (CompressionInvariantError, 500),
]


def _split_speakers(speakers: Optional[str]) -> list[str]:
    if not speakers:
        return []
    return [name.strip() for name in speakers.split(",") if name.strip()]


def create_app(
    config: Optional[Config] = None,
    converter: Optional[ConvertMediaUseCase] = None,
) -> FastAPI:
    cfg = config or load_config()
    media_converter = converter or create_media_converter(cfg)

    app = FastAPI(title="Echo Markdown", version="0.1.0")

    def _error_response(exc: Exception, status_code: int) -> JSONResponse:
        body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
        return JSONResponse(status_code=status_code, content=body.model_dump())

    for exc_type, status_code in ERROR_STATUS:
        def _handler(request: Request, exc: Exception, status_code: int = status_code) -> JSONResponse:
            if status_code >= 500:
                logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
            else:
                logger.warning(f"{request.url.path}: {type(exc).__name__}: {exc}")
            return _error_response(exc, status_code)

        app.add_exception_handler(exc_type, _handler)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok", config=cfg.as_dict())

    @app.post("/v1/convert/media", response_model=ConversionResponse, response_model_exclude_none=True)
    def convert_media(
        file: UploadFile = File(...),
        diarize: Optional[bool] = Form(None),
        speakers: Optional[str] = Form(None),
        speaker_references: List[str] = Form(default=[]),
        frontmatter: bool = Form(True),
        timestamps: bool = Form(False),
    ) -> ConversionResponse:
        # Reference clips arrive inline; never read paths on the server's disk.
        for reference in speaker_references:
            if reference.strip() and not reference.strip().startswith("data:"):
                raise ReferenceFormatError("Speaker references must be data URIs when uploaded over HTTP.")

        filename = os.path.basename(file.filename or "upload")
        suffix = os.path.splitext(filename)[1]
        os.makedirs(cfg.temp_dir, exist_ok=True)
        temp_file = tempfile.NamedTemporaryFile(suffix=suffix, dir=cfg.temp_dir, delete=False)
        try:
            with temp_file:
                shutil.copyfileobj(file.file, temp_file)

            result = media_converter.execute(
                temp_file.name,
                ConversionOptions(
                    diarize=diarize,
                    speakers=_split_speakers(speakers),
                    speaker_references=speaker_references,
                    frontmatter=frontmatter,
                ),
                filename=filename,
                source=filename,
            )
            return result_to_response(result, include_segments=timestamps)
        finally:
            try:
                os.unlink(temp_file.name)
            except OSError as e:
                logger.warning(f"Cleanup error: {e}")

    return app
