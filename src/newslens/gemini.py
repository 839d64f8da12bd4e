"""Thin async wrapper around the Google GenAI client with structured output."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ValidationError

from newslens.config import Settings
from newslens.errors import SchemaError, TransportError

logger = logging.getLogger(__name__)
T = TypeVar("T", bound=BaseModel)


class GeminiClient:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client = genai.Client(api_key=settings.gemini_api_key)
        self._model_id = settings.model_id
        self.call_count = 0

    @property
    def model_id(self) -> str:
        return self._model_id

    async def generate(
        self,
        contents: str | list[types.Content],
        *,
        system_instruction: str | None = None,
        response_model: type[T] | None = None,
        temperature: float | None = None,
    ) -> str | T:
        """Run one generate_content call.

        With a response_model the model is asked for JSON matching its schema and
        the body is validated locally before being returned. A temperature of None
        leaves the provider default in place. Raises TransportError when the call
        itself fails and SchemaError when the body is unusable.
        """
        config_kwargs: dict[str, Any] = {}
        if temperature is not None:
            config_kwargs["temperature"] = temperature
        if system_instruction:
            config_kwargs["system_instruction"] = system_instruction
        if response_model is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = response_model

        config = types.GenerateContentConfig(**config_kwargs)
        response_text = await self._call(contents, config)
        self.call_count += 1

        if response_model is None:
            return response_text
        return self.parse_response(response_text, response_model)

    async def _call(
        self,
        contents: str | list[types.Content],
        config: types.GenerateContentConfig,
    ) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_id,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            if exc.code == 429:
                logger.warning("Gemini rate limit hit: %s", exc)
            else:
                logger.error("Gemini rejected the request (HTTP %s): %s", exc.code, exc)
            raise TransportError(f"Gemini request rejected: {exc.code}") from exc
        except Exception as exc:
            logger.error("Gemini call failed: %s", exc)
            raise TransportError("Gemini call failed") from exc
        return response.text or ""

    @staticmethod
    def parse_response(text: str, model: type[T]) -> T:
        """Validate a JSON body against ``model``, tolerating a markdown fence."""
        cleaned = text.strip()
        if not cleaned:
            logger.error("Gemini returned an empty response")
            raise SchemaError("empty response")

        if cleaned.startswith("```"):
            lines = cleaned.split("\n")[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines).strip()

        try:
            return model.model_validate_json(cleaned)
        except ValidationError as exc:
            logger.error(
                "Gemini response failed %s validation (%d errors): %s",
                model.__name__,
                exc.error_count(),
                exc,
            )
            raise SchemaError("invalid response") from exc
