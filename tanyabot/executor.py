"""Executes classified actions against Gemini and the chat platform."""

from __future__ import annotations

import base64
import io
import logging

import httpx

from tanyabot import messages
from tanyabot.chat.base import ChatPlatform
from tanyabot.content import build_content
from tanyabot.errors import FetchFailure
from tanyabot.llm.base import LLMProvider
from tanyabot.models import (
    Action,
    AnswerQuestion,
    ChatEvent,
    EditImage,
    GenerateImage,
    Ignore,
    InlineImage,
    LLMResponse,
    PromptForReply,
    RejectEmptyPrompt,
    ShowHelp,
)
from tanyabot.persona import PersonaSource

LOGGER = logging.getLogger(__name__)

_ERROR_REPLIES: dict[type, str] = {
    AnswerQuestion: messages.ANSWER_FAILED,
    GenerateImage: messages.IMAGE_GENERATION_FAILED,
    EditImage: messages.IMAGE_EDIT_FAILED,
}


class ActionExecutor:
    """Runs one action per inbound message and never lets a failure escape."""

    def __init__(
        self,
        chat: ChatPlatform,
        llm: LLMProvider,
        persona: PersonaSource | None = None,
        help_header: str = "",
        download_timeout_seconds: float = 60.0,
    ) -> None:
        self._chat = chat
        self._llm = llm
        self._persona = persona
        self._help_header = help_header
        self._download_timeout_seconds = download_timeout_seconds

    async def execute(self, event: ChatEvent, action: Action) -> None:
        """Perform ``action`` in reply to ``event``.

        Backend, download and send failures are logged and turned into a
        generic error reply for the action kind.
        """
        if isinstance(action, Ignore):
            return
        try:
            await self._run(event, action)
        except Exception:  # noqa: BLE001
            LOGGER.exception(
                "Failed to execute %s for message %s in chat %s",
                type(action).__name__,
                event.message_id,
                event.chat_id,
            )
            error_reply = _ERROR_REPLIES.get(type(action))
            if error_reply is not None:
                await self._send_error(event, error_reply)

    async def _run(self, event: ChatEvent, action: Action) -> None:
        if isinstance(action, ShowHelp):
            await self._chat.send_message(
                event.chat_id,
                messages.help_text(self._help_header),
                reply_to_id=event.message_id if action.threaded else None,
            )
        elif isinstance(action, AnswerQuestion):
            await self._answer(event, action)
        elif isinstance(action, GenerateImage):
            response = await self._llm.generate_image(action.prompt)
            await self._relay_image_response(event, response)
        elif isinstance(action, EditImage):
            await self._edit(event, action)
        elif isinstance(action, RejectEmptyPrompt):
            await self._reply(event, messages.empty_prompt_text(action.kind))
        elif isinstance(action, PromptForReply):
            await self._reply(event, messages.PROMPT_FOR_REPLY)

    async def _answer(self, event: ChatEvent, action: AnswerQuestion) -> None:
        persona = await self._persona.read() if self._persona is not None else None
        content = build_content(persona, action.reply_context, action.question)
        response = await self._llm.generate_text(content)
        answer = response.content or messages.NO_ANSWER
        await self._chat.send_message(
            event.chat_id,
            answer,
            reply_to_id=event.message_id,
            html_mode=True,
            disable_link_preview=True,
        )

    async def _edit(self, event: ChatEvent, action: EditImage) -> None:
        source = action.source_image
        link = await self._chat.get_file_link(source.file_id)
        image_bytes = await self._download(link)
        image = InlineImage(
            data=base64.b64encode(image_bytes).decode("ascii"),
            mime_type=source.mime_type,
        )
        response = await self._llm.generate_image(action.prompt, image)
        await self._relay_image_response(event, response)

    async def _download(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self._download_timeout_seconds) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as exc:
            # File links embed the bot token; keep the httpx error out of the traceback.
            raise FetchFailure(f"Image download failed: {type(exc).__name__}") from None

    async def _relay_image_response(self, event: ChatEvent, response: LLMResponse) -> None:
        """Relay text and image parts in backend order."""

        image_sent = False
        for part in response.parts:
            if part.is_image:
                with io.BytesIO(base64.b64decode(part.data)) as buffer:
                    await self._chat.send_photo(event.chat_id, buffer, reply_to_id=event.message_id)
                image_sent = True
            elif part.text:
                await self._chat.send_message(
                    event.chat_id,
                    part.text,
                    reply_to_id=event.message_id,
                    html_mode=True,
                )
        if not image_sent:
            await self._reply(event, messages.IMAGE_NOT_GENERATED)

    async def _reply(self, event: ChatEvent, text: str) -> None:
        await self._chat.send_message(event.chat_id, text, reply_to_id=event.message_id)

    async def _send_error(self, event: ChatEvent, text: str) -> None:
        try:
            await self._reply(event, text)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Could not send error reply to chat %s", event.chat_id)
