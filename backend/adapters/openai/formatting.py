"""OpenAITextGenerationAdapter — chat completions against an OpenAI-compatible endpoint."""

import logging
from typing import Any, Optional

import openai

from domain.errors import RemoteServiceError
from ports.formatting import TextGenerationPort

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_MODEL = "anthropic/claude-sonnet-4"


class OpenAITextGenerationAdapter(TextGenerationPort):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = DEFAULT_FORMAT_MODEL,
        temperature: float = 0.0,
        client: Optional[Any] = None,
    ):
        self._client = client or openai.OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature

    def generate(self, system: str, prompt: str, max_output_tokens: int) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_output_tokens,
                temperature=self.temperature,
            )
        except openai.APIStatusError as exc:
            logger.error(f"Text generation API error {exc.status_code}: {exc.message}")
            raise RemoteServiceError(exc.message, status_code=exc.status_code) from exc
        except openai.OpenAIError as exc:
            logger.error(f"Text generation request failed: {exc}")
            raise RemoteServiceError(str(exc)) from exc

        content = response.choices[0].message.content or ""
        if response.choices[0].finish_reason == "length":
            logger.warning(f"Completion truncated at {max_output_tokens} tokens")
        return content.strip()
