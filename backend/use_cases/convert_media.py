"""ConvertMediaUseCase — audio/video file to formatted markdown.

Transcribes the file, renders diarized output as speaker turns, polishes
the text into markdown and attaches frontmatter.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from domain.media import classify_media
from domain.models import DiarizedSegment
from frontmatter import add_frontmatter, build_frontmatter_data
from post_processing import format_diarized_segments
from use_cases.format_markdown import FormatContext, MarkdownFormatter
from use_cases.transcribe import TranscribeAudioUseCase, TranscribeRequest

logger = logging.getLogger(__name__)


@dataclass
class ConversionOptions:
    diarize: Optional[bool] = None
    speakers: list[str] = field(default_factory=list)
    speaker_references: list[str] = field(default_factory=list)
    frontmatter: bool = True


@dataclass
class ConversionResult:
    title: str
    markdown: str
    raw_content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    segments: list[DiarizedSegment] = field(default_factory=list)


class ConvertMediaUseCase:
    def __init__(
        self,
        transcriber: TranscribeAudioUseCase,
        formatter: MarkdownFormatter,
    ):
        self._transcriber = transcriber
        self._formatter = formatter

    def execute(
        self,
        path: str,
        options: Optional[ConversionOptions] = None,
        filename: Optional[str] = None,
        source: Optional[str] = None,
    ) -> ConversionResult:
        """Convert a media file. `filename`/`source` override the names derived from `path`."""
        options = options or ConversionOptions()
        title = filename or os.path.basename(path)
        source = source or path
        kind = classify_media(title)
        logger.info(f"Processing {kind} file: {source}")

        transcription = self._transcriber.execute(TranscribeRequest(
            audio_path=path,
            filename=title,
            diarize=options.diarize,
            speaker_names=options.speakers,
            speaker_references=options.speaker_references,
        ))

        metadata: dict[str, Any] = {}
        if transcription.diarized:
            raw_text = format_diarized_segments(transcription.segments)
            content_type = "video/audio transcription (diarized)"
            metadata = {
                "diarized": True,
                "speakers": transcription.speakers,
                "transcriptionModel": transcription.model,
            }
            logger.info(f"Transcription: {len(raw_text)} chars, {len(transcription.speakers)} speakers")
        else:
            raw_text = transcription.text
            content_type = "video/audio transcription"
            logger.info(f"Transcription: {len(raw_text)} chars")

        markdown = self._formatter.format(
            raw_text, FormatContext(content_type=content_type, title=title, source=source),
        )

        if options.frontmatter:
            markdown = add_frontmatter(
                markdown, build_frontmatter_data(title, source, "video", extra=metadata),
            )

        logger.info(f"Final output: {len(markdown)} chars")
        return ConversionResult(
            title=title,
            markdown=markdown,
            raw_content=raw_text,
            metadata=metadata,
            segments=transcription.segments,
        )
