"""Domain <-> DTO mappers.

Converts DiarizedSegment and ConversionResult (domain) into the Pydantic
response models of the HTTP API.
"""

from domain.models import DiarizedSegment
from models import ConversionResponse, TranscriptSegment
from use_cases.convert_media import ConversionResult


def segment_to_dto(seg: DiarizedSegment, index: int = 0, diarized: bool = True) -> TranscriptSegment:
    """Convert a domain segment to a DTO; plain-mode segments carry no speaker."""
    return TranscriptSegment(
        id=index,
        start=round(seg.start, 3),
        end=round(seg.end, 3),
        text=seg.text,
        speaker=seg.speaker if diarized else None,
    )


def segments_to_dtos(segments: list[DiarizedSegment], diarized: bool = True) -> list[TranscriptSegment]:
    """Convert a list of domain segments to DTOs, preserving order."""
    return [segment_to_dto(seg, i, diarized) for i, seg in enumerate(segments)]


def result_to_response(result: ConversionResult, include_segments: bool = False) -> ConversionResponse:
    diarized = bool(result.metadata.get("diarized"))
    return ConversionResponse(
        title=result.title,
        markdown=result.markdown,
        raw_content=result.raw_content,
        metadata=result.metadata,
        segments=segments_to_dtos(result.segments, diarized) if include_segments else None,
    )
