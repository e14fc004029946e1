"""TextGenerationPort — abstract interface for the remote text model."""

from abc import ABC, abstractmethod


class TextGenerationPort(ABC):
    @abstractmethod
    def generate(self, system: str, prompt: str, max_output_tokens: int) -> str:
        """Return the model's completion for a single prompt."""
