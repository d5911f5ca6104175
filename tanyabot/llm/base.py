"""LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tanyabot.models import InlineImage, LLMResponse


class LLMProvider(ABC):
    """Abstract model provider used by the action executor."""

    @abstractmethod
    async def generate(
        self,
        model: str,
        contents: list[dict[str, Any]],
        response_modalities: list[str] | None = None,
    ) -> LLMResponse:
        """Generate a model response."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> LLMResponse:
        """Answer a single user turn with the text model."""

    @abstractmethod
    async def generate_image(self, prompt: str, image: InlineImage | None = None) -> LLMResponse:
        """Generate or edit an image; the response may mix text and image parts."""
