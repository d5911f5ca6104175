"""Google Gemini implementation of LLMProvider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tanyabot.config import Settings
from tanyabot.errors import BackendFailure
from tanyabot.llm.base import LLMProvider
from tanyabot.models import InlineImage, LLMResponse, ResponsePart

_LOGGER = logging.getLogger(__name__)

IMAGE_MODALITIES = ["TEXT", "IMAGE"]


class GeminiProvider(LLMProvider):
    """LLM provider using the Gemini ``generateContent`` REST endpoint."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def generate_text(self, prompt: str) -> LLMResponse:
        contents = [{"role": "user", "parts": [{"text": prompt}]}]
        return await self.generate(self._settings.gemini_text_model, contents)

    async def generate_image(self, prompt: str, image: InlineImage | None = None) -> LLMResponse:
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if image is not None:
            parts.append({"inlineData": {"mimeType": image.mime_type, "data": image.data}})
        return await self.generate(
            self._settings.gemini_image_model,
            [{"role": "user", "parts": parts}],
            response_modalities=IMAGE_MODALITIES,
        )

    async def generate(
        self,
        model: str,
        contents: list[dict[str, Any]],
        response_modalities: list[str] | None = None,
    ) -> LLMResponse:
        payload: dict[str, Any] = {"contents": contents}
        if response_modalities:
            payload["generationConfig"] = {"responseModalities": response_modalities}

        timeout = httpx.Timeout(self._settings.request_timeout_seconds)
        try:
            async with httpx.AsyncClient(base_url=self._settings.gemini_base_url, timeout=timeout) as client:
                response = await client.post(
                    f"/models/{model}:generateContent",
                    headers={
                        "x-goog-api-key": self._settings.google_api_key,
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise BackendFailure(f"Gemini request to {model} failed: {exc}") from exc
        except ValueError as exc:
            raise BackendFailure(f"Gemini returned invalid JSON: {exc}") from exc

        parts = _parse_parts(data)
        text_parts = [part.text for part in parts if part.text]
        content = " ".join(text_parts)
        _LOGGER.info(
            "LLM response: model=%s parts=%d images=%d content=%r",
            model,
            len(parts),
            sum(1 for part in parts if part.is_image),
            content[:200],
        )
        return LLMResponse(content=content, parts=parts, raw=data)


def _parse_parts(data: dict[str, Any]) -> list[ResponsePart]:
    candidates = data.get("candidates") or []
    if not candidates:
        return []
    raw_parts = (candidates[0].get("content") or {}).get("parts") or []

    parsed: list[ResponsePart] = []
    for part in raw_parts:
        if not isinstance(part, dict):
            continue
        inline = part.get("inlineData")
        if isinstance(inline, dict) and inline.get("data"):
            parsed.append(ResponsePart(data=inline["data"], mime_type=inline.get("mimeType")))
        elif part.get("text"):
            parsed.append(ResponsePart(text=part["text"]))
    return parsed
