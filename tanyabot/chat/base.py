"""Chat platform interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO

from tanyabot.models import BotIdentity


class ChatPlatform(ABC):
    """Outbound operations the executor needs from a chat platform."""

    @abstractmethod
    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_id: int | None = None,
        html_mode: bool = False,
        disable_link_preview: bool = False,
    ) -> None:
        """Send a text message, optionally threaded under ``reply_to_id``."""

    @abstractmethod
    async def send_photo(self, chat_id: int, photo: BinaryIO, reply_to_id: int | None = None) -> None:
        """Upload a photo from an in-memory buffer."""

    @abstractmethod
    async def get_file_link(self, file_id: str) -> str:
        """Resolve a remote file id to a downloadable URL."""

    @abstractmethod
    async def get_self(self) -> BotIdentity:
        """Return the bot's own account."""
