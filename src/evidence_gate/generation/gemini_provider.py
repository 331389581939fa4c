"""Google Gemini LLM provider using the google-genai SDK."""

from __future__ import annotations

import json

from google import genai
from google.genai import types
from pydantic import BaseModel

from evidence_gate.exceptions import GenerationError
from evidence_gate.observability.logger import get_logger

logger = get_logger("gemini")


class GeminiProvider:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        config = types.GenerateContentConfig(
            temperature=self._temperature if temperature is None else temperature,
            max_output_tokens=max_tokens or self._max_tokens,
            system_instruction=system,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise GenerationError(f"Gemini generation failed: {e}") from e
        return response.text or ""

    async def generate_structured(
        self,
        prompt: str,
        response_schema: type[BaseModel],
        system: str | None = None,
    ) -> BaseModel:
        config = types.GenerateContentConfig(
            temperature=0.0,
            max_output_tokens=self._max_tokens,
            response_mime_type="application/json",
            response_schema=response_schema,
            system_instruction=system,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise GenerationError(f"Gemini structured generation failed: {e}") from e

        if isinstance(response.parsed, response_schema):
            return response.parsed
        try:
            return response_schema.model_validate(json.loads(response.text or ""))
        except ValueError as e:
            logger.warning("structured_output_invalid", model=self._model, error=str(e))
            raise GenerationError(f"Gemini returned invalid JSON: {e}") from e
