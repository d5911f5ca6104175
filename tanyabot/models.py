"""Core domain models used across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ChatKind(str, Enum):
    """Telegram chat types the bot can receive messages from."""

    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"

    @property
    def is_group(self) -> bool:
        return self in (ChatKind.GROUP, ChatKind.SUPERGROUP)


@dataclass(frozen=True, slots=True)
class ImageRef:
    """Opaque handle to an image stored on the chat platform."""

    file_id: str
    size_variant: int = 0
    mime_type: str = "image/jpeg"


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """Inbound chat message normalized by the platform adapter."""

    chat_id: int
    message_id: int
    chat_kind: ChatKind
    sender_id: int | None = None
    text: str | None = None
    caption: str | None = None
    # Ordered smallest to largest, as Telegram delivers them.
    photo_refs: tuple[ImageRef, ...] = ()
    document_mime_type: str | None = None
    document_ref: ImageRef | None = None
    replied_event: ChatEvent | None = None
    new_member_ids: frozenset[int] = field(default_factory=frozenset)

    def image_ref(self) -> ImageRef | None:
        """Return the best image attached to this event, if any."""

        if self.photo_refs:
            return self.photo_refs[-1]
        if (
            self.document_ref is not None
            and self.document_mime_type is not None
            and self.document_mime_type.startswith("image/")
        ):
            return self.document_ref
        return None


@dataclass(frozen=True, slots=True)
class BotIdentity:
    """The bot's own Telegram account."""

    id: int
    username: str


@dataclass(frozen=True, slots=True)
class ShowHelp:
    """Send the usage text, threaded under the message unless it greets new members."""

    threaded: bool = True


@dataclass(frozen=True, slots=True)
class AnswerQuestion:
    """Ask Gemini a question, with any replied-to text as context."""

    question: str
    reply_context: str = ""


@dataclass(frozen=True, slots=True)
class GenerateImage:
    """Generate an image from a text prompt."""

    prompt: str


@dataclass(frozen=True, slots=True)
class EditImage:
    """Edit ``source_image`` according to ``prompt``."""

    prompt: str
    source_image: ImageRef


@dataclass(frozen=True, slots=True)
class RejectEmptyPrompt:
    """Tell the sender a command or image request had no prompt. ``kind`` picks the wording."""

    kind: str


@dataclass(frozen=True, slots=True)
class PromptForReply:
    """Nudge a private chat towards the available commands."""


@dataclass(frozen=True, slots=True)
class Ignore:
    """Do nothing."""


Action = ShowHelp | AnswerQuestion | GenerateImage | EditImage | RejectEmptyPrompt | PromptForReply | Ignore


@dataclass(slots=True)
class InlineImage:
    """Base64 image payload submitted to the model."""

    data: str
    mime_type: str = "image/jpeg"


@dataclass(slots=True)
class ResponsePart:
    """One part of a model candidate: either text or base64 binary data."""

    text: str | None = None
    data: str | None = None
    mime_type: str | None = None

    @property
    def is_image(self) -> bool:
        return self.data is not None


@dataclass(slots=True)
class LLMResponse:
    """Result from an LLM generation request."""

    content: str
    parts: list[ResponsePart] = field(default_factory=list)
    raw: dict[str, Any] | None = None
