from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class TranscriptSegment(BaseModel):
    """A timed transcript segment in API responses."""
    id: int
    start: float
    end: float
    text: str
    speaker: Optional[str] = None


class ConversionResponse(BaseModel):
    """Response format for a media conversion."""
    title: str
    markdown: str
    raw_content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    segments: Optional[List[TranscriptSegment]] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    config: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    detail: str
