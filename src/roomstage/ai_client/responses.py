"""OpenAI and Gemini backends for room analysis and embeddings."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Protocol

from openai import OpenAI
import google.generativeai as genai

from roomstage.ai_client import prompts, schemas
from roomstage.utils.rate_limit import RateLimiter
from roomstage.utils.retry import with_retry
from roomstage.config import AppConfig


class LLMClient(Protocol):
    """Interface for model clients."""
    def analyze_room(self, image_data_url: str) -> dict[str, Any]: ...
    def embed(self, text: str) -> list[float]: ...


def _analysis_prompt() -> str:
    return f"{prompts.ROOM_ANALYSIS_SYSTEM}\n{prompts.ROOM_ANALYSIS_FEATURES}"


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0]
    return text.strip()


class OpenAIBackend:
    """Client for OpenAI's Chat Completions and Embeddings APIs."""
    def __init__(self, config: AppConfig, rate_limiter: RateLimiter) -> None:
        self._client = OpenAI(api_key=config.openai_api_key)
        self._model = config.openai_model
        self._embedding_model = config.openai_embedding_model
        self._rate_limiter = rate_limiter
        self._max_retries = config.max_retries
        self._retry_backoff_seconds = config.retry_backoff_seconds
        self._logger = logging.getLogger(self.__class__.__name__)

    def _retry(self, execute):
        return with_retry(
            execute,
            max_retries=self._max_retries,
            backoff_seconds=self._retry_backoff_seconds,
            logger=self._logger,
        )

    def _call(self, *, system_prompt: str, schema: dict, input_items: list[dict]) -> dict:
        def execute() -> dict:
            self._rate_limiter.wait()
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    *input_items
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": schema,
                },
            )
            choice = response.choices[0]
            output_text = choice.message.content
            if not output_text:
                raise ValueError("Empty response output")
            return json.loads(_strip_code_fences(output_text))

        return self._retry(execute)

    def analyze_room(self, image_data_url: str) -> dict[str, Any]:
        input_items = [
            {"role": "user", "content": [{"type": "image_url", "image_url": {"url": image_data_url}}]},
        ]
        return self._call(
            system_prompt=_analysis_prompt(),
            schema=schemas.room_analysis_schema(),
            input_items=input_items,
        )

    def embed(self, text: str) -> list[float]:
        def execute() -> list[float]:
            self._rate_limiter.wait()
            response = self._client.embeddings.create(model=self._embedding_model, input=text)
            return [float(value) for value in response.data[0].embedding]

        return self._retry(execute)


class GeminiBackend:
    """Client for Google's Gemini API."""
    def __init__(self, config: AppConfig, rate_limiter: RateLimiter) -> None:
        genai.configure(api_key=config.google_api_key)
        self._model_name = config.google_model
        self._embedding_model = config.google_embedding_model
        self._rate_limiter = rate_limiter
        self._logger = logging.getLogger("GeminiBackend")
        self._max_retries = config.max_retries
        self._retry_backoff = config.retry_backoff_seconds

    def _decode_data_url(self, data_url: str) -> dict:
        """Convert Data URL to the blob dict expected by Gemini."""
        try:
            header, encoded = data_url.split(",", 1)
            mime = header.split(";")[0].split(":")[1]
            data = base64.b64decode(encoded)
        except (ValueError, IndexError) as e:
            raise ValueError(f"Failed to decode data URL: {e}") from e
        return {"mime_type": mime, "data": data}

    def _clean_schema(self, schema: Any) -> Any:
        """Recursively remove unsupported keys from schema for Gemini compatibility."""
        # Gemini does not support these JSON schema validation keywords
        UNSUPPORTED_KEYS = {"additionalProperties", "minimum", "maximum"}

        if isinstance(schema, dict):
            return {
                k: self._clean_schema(v)
                for k, v in schema.items()
                if k not in UNSUPPORTED_KEYS
            }
        if isinstance(schema, list):
            return [self._clean_schema(item) for item in schema]
        return schema

    def _call(self, system_prompt: str, schema: dict, parts: list[Any]) -> dict:
        target_schema = self._clean_schema(schema.get("schema", schema))

        def execute():
            self._rate_limiter.wait()
            model = genai.GenerativeModel(
                self._model_name,
                system_instruction=system_prompt,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=target_schema
                )
            )
            response = model.generate_content(parts)
            return json.loads(_strip_code_fences(response.text))

        return with_retry(execute, max_retries=self._max_retries, backoff_seconds=self._retry_backoff, logger=self._logger)

    def analyze_room(self, image_data_url: str) -> dict[str, Any]:
        return self._call(
            _analysis_prompt(),
            schemas.room_analysis_schema(),
            [self._decode_data_url(image_data_url)]
        )

    def embed(self, text: str) -> list[float]:
        def execute() -> list[float]:
            self._rate_limiter.wait()
            result = genai.embed_content(model=self._embedding_model, content=text)
            return [float(value) for value in result["embedding"]]

        return with_retry(execute, max_retries=self._max_retries, backoff_seconds=self._retry_backoff, logger=self._logger)


def create_client(config: AppConfig) -> LLMClient:
    """Factory to create the appropriate model client."""
    limiter = RateLimiter(config.requests_per_minute)

    if config.llm_provider == "google":
        if not config.google_api_key:
            raise ValueError("LLM_PROVIDER is 'google' but GOOGLE_API_KEY is missing")
        return GeminiBackend(config, limiter)

    # Default to OpenAI
    if not config.openai_api_key:
        raise ValueError("OPENAI_API_KEY is missing")
    return OpenAIBackend(config, limiter)
