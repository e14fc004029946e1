"""OpenAI-compatible adapters for remote transcription and markdown formatting."""

from .formatting import OpenAITextGenerationAdapter
from .transcription import OpenAITranscriptionAdapter

__all__ = ["OpenAITextGenerationAdapter", "OpenAITranscriptionAdapter"]
