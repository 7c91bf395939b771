from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

import httpx
import pytest

from wanderluxe.core.llm import GeminiClient, GeminiError


def _transport(calls: List[httpx.Request], body: Dict[str, Any], status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


def test_generate_content_posts_prompt_schema_and_key() -> None:
    calls: List[httpx.Request] = []
    client = GeminiClient(
        model="gemini-test",
        api_key="secret",
        base_url="https://gemini.example/v1beta/",
        transport=_transport(calls, {"candidates": []}),
    )

    result = asyncio.run(
        client.generate_content(
            prompt="Plan my stay",
            system="You are helpful",
            prompt_version="offers.test.v1",
            response_mime_type="application/json",
            response_schema={"type": "ARRAY"},
        )
    )

    assert result == {"candidates": []}
    assert len(calls) == 1
    request = calls[0]
    assert str(request.url) == "https://gemini.example/v1beta/models/gemini-test:generateContent"
    assert request.headers["x-goog-api-key"] == "secret"
    payload = json.loads(request.content)
    assert payload["contents"] == [{"role": "user", "parts": [{"text": "Plan my stay"}]}]
    assert payload["systemInstruction"] == {"parts": [{"text": "You are helpful"}]}
    assert payload["generationConfig"]["responseMimeType"] == "application/json"
    assert payload["generationConfig"]["responseSchema"] == {"type": "ARRAY"}


def test_generate_content_omits_unset_options() -> None:
    calls: List[httpx.Request] = []
    client = GeminiClient(
        api_key="secret",
        temperature=None,
        max_output_tokens=None,
        transport=_transport(calls, {}),
    )

    asyncio.run(
        client.generate_content(
            prompt="Draw a room",
            model="gemini-image",
            prompt_version="visual.test.v1",
            response_modalities=("TEXT", "IMAGE"),
        )
    )

    payload = json.loads(calls[0].content)
    assert "systemInstruction" not in payload
    assert payload["generationConfig"] == {"responseModalities": ["TEXT", "IMAGE"]}
    assert calls[0].url.path.endswith("/models/gemini-image:generateContent")


def test_generate_content_requires_api_key() -> None:
    client = GeminiClient(api_key=None)

    with pytest.raises(GeminiError, match="GEMINI_API_KEY"):
        asyncio.run(client.generate_content(prompt="hi", prompt_version="v1"))


def test_generate_content_raises_for_http_errors() -> None:
    calls: List[httpx.Request] = []
    client = GeminiClient(api_key="secret", transport=_transport(calls, {"error": {}}, 429))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.generate_content(prompt="hi", prompt_version="v1"))


def test_api_key_falls_back_to_generic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-env")

    assert GeminiClient().api_key == "from-env"


def test_extract_text_joins_text_parts() -> None:
    response = {
        "candidates": [
            {"content": {"parts": [{"text": "[{\"id\": "}, {"text": "\"a\"}]"}]}}
        ]
    }

    assert GeminiClient.extract_text(response) == '[{"id": "a"}]'


@pytest.mark.parametrize(
    "response, message",
    [
        ({}, "did not contain any candidates"),
        ({"promptFeedback": {"blockReason": "SAFETY"}}, "blocked the prompt: SAFETY"),
        ({"candidates": [{"content": {"parts": []}}]}, "did not contain text"),
    ],
)
def test_extract_text_errors(response: Dict[str, Any], message: str) -> None:
    with pytest.raises(GeminiError, match=message):
        GeminiClient.extract_text(response)


def test_extract_inline_image_returns_first_image_part() -> None:
    response = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your room"},
                        {"inlineData": {"mimeType": "image/jpeg", "data": "Zmlyc3Q="}},
                        {"inlineData": {"mimeType": "image/png", "data": "c2Vjb25k"}},
                    ]
                }
            }
        ]
    }

    assert GeminiClient.extract_inline_image(response) == ("image/jpeg", "Zmlyc3Q=")


def test_extract_inline_image_without_image_raises() -> None:
    response = {"candidates": [{"content": {"parts": [{"text": "Sorry, no image"}]}}]}

    with pytest.raises(GeminiError, match="did not contain an image"):
        GeminiClient.extract_inline_image(response)
