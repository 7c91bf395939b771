"""Centralised Gemini client utilities."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence, Tuple

import httpx


DEFAULT_OFFER_MODEL = os.getenv("GEMINI_OFFER_MODEL", "gemini-2.5-flash")
DEFAULT_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
_TEMPERATURE_ENV = os.getenv("LLM_TEMPERATURE")
DEFAULT_TEMPERATURE: Optional[float] = float(_TEMPERATURE_ENV) if _TEMPERATURE_ENV else None
DEFAULT_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
_MAX_TOKENS_ENV = os.getenv("LLM_MAX_TOKENS")
DEFAULT_MAX_TOKENS: Optional[int] = int(_MAX_TOKENS_ENV) if _MAX_TOKENS_ENV else None
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


_LOGGER = logging.getLogger(__name__)


class GeminiError(RuntimeError):
    """Raised when the Gemini client is misconfigured or the response is unusable."""


def _clean_dict(payload: MutableMapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _api_key_from_env() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def _base_url_from_env() -> str:
    return os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL)


@dataclass
class GeminiClient:
    """A small async wrapper around the Gemini ``generateContent`` endpoint."""

    model: str = DEFAULT_OFFER_MODEL
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    timeout: Optional[float] = DEFAULT_TIMEOUT
    max_output_tokens: Optional[int] = DEFAULT_MAX_TOKENS
    api_key: Optional[str] = field(default_factory=_api_key_from_env)
    base_url: str = field(default_factory=_base_url_from_env)
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    async def generate_content(
        self,
        *,
        prompt: str,
        prompt_version: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        response_mime_type: Optional[str] = None,
        response_schema: Optional[Mapping[str, Any]] = None,
        response_modalities: Optional[Sequence[str]] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Call the Gemini API and return its raw JSON response."""

        if not self.api_key:
            raise GeminiError("GEMINI_API_KEY environment variable is not set")

        generation_config = _clean_dict(
            {
                "responseMimeType": response_mime_type,
                "responseSchema": dict(response_schema) if response_schema else None,
                "responseModalities": list(response_modalities) if response_modalities else None,
                "temperature": temperature if temperature is not None else self.temperature,
                "maxOutputTokens": (
                    max_output_tokens if max_output_tokens is not None else self.max_output_tokens
                ),
            }
        )

        payload: Dict[str, Any] = _clean_dict(
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "systemInstruction": {"parts": [{"text": system}]} if system else None,
                "generationConfig": generation_config or None,
            }
        )

        model_id = model or self.model
        _LOGGER.debug(
            "Calling Gemini model %s [prompt_version=%s]",
            model_id,
            prompt_version,
        )

        request_timeout = timeout if timeout is not None else self.timeout
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        async with httpx.AsyncClient(timeout=request_timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url.rstrip('/')}/models/{model_id}:generateContent",
                json=payload,
                headers=headers,
            )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _first_candidate_parts(response: Mapping[str, Any]) -> List[Mapping[str, Any]]:
        candidates = response.get("candidates")
        if not candidates:
            feedback = response.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise GeminiError(f"Gemini blocked the prompt: {reason}")
            raise GeminiError("Gemini response did not contain any candidates")
        content = candidates[0].get("content") or {}
        return list(content.get("parts") or [])

    @classmethod
    def extract_text(cls, response: Mapping[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""

        texts = [part["text"] for part in cls._first_candidate_parts(response) if part.get("text")]
        if not texts:
            raise GeminiError("Gemini response did not contain text")
        return "".join(texts)

    @classmethod
    def extract_inline_image(cls, response: Mapping[str, Any]) -> Tuple[str, str]:
        """Return ``(mime_type, base64_data)`` for the first inline image part."""

        for part in cls._first_candidate_parts(response):
            inline = part.get("inlineData") or part.get("inline_data") or {}
            data = inline.get("data")
            if data:
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                return mime_type, data
        raise GeminiError("Gemini response did not contain an image")


__all__ = [
    "DEFAULT_IMAGE_MODEL",
    "DEFAULT_OFFER_MODEL",
    "GeminiClient",
    "GeminiError",
]
