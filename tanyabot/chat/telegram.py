"""python-telegram-bot adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, BinaryIO, Callable, Sequence

from telegram import BotCommand, LinkPreviewOptions, Message, ReplyParameters, Update
from telegram.constants import ParseMode
from telegram.error import NetworkError, TelegramError
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from tanyabot.chat.base import ChatPlatform
from tanyabot.models import BotIdentity, ChatEvent, ChatKind, ImageRef

LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[ChatEvent], Awaitable[None]]

# The last delay repeats until the handshake succeeds.
_HANDSHAKE_RETRY_SECONDS = (5, 15, 45)

BOT_COMMANDS = [
    BotCommand("tanya", "Ajukan pertanyaan"),
    BotCommand("gambar", "Buat atau edit gambar"),
    BotCommand("help", "Cara menggunakan bot"),
]


def build_application(token: str) -> Application:
    """Build an Application that handles updates concurrently."""

    return Application.builder().token(token).concurrent_updates(True).build()


class TelegramAdapter(ChatPlatform):
    """Adapter around a python-telegram-bot Application."""

    def __init__(
        self,
        application: Application,
        handshake_retry_seconds: Sequence[float] = _HANDSHAKE_RETRY_SECONDS,
    ) -> None:
        self._application = application
        self._handshake_retry_seconds = handshake_retry_seconds

    def add_event_handler(self, handler: EventHandler) -> None:
        """Route every new message, including membership changes, to ``handler``."""

        async def _on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if update.message is None:
                return
            await handler(to_chat_event(update.message))

        self._application.add_handler(MessageHandler(filters.UpdateType.MESSAGE, _on_message))
        self._application.add_error_handler(_on_error)

    async def start(self) -> None:
        """Initialize the bot and start long polling in the background."""

        await self._initialize()
        await self._application.start()
        await self._application.updater.start_polling(drop_pending_updates=True)
        try:
            await self._application.bot.set_my_commands(BOT_COMMANDS)
        except TelegramError as exc:
            LOGGER.warning("Could not register bot commands: %s", exc)
        LOGGER.info("Telegram polling started")

    async def _initialize(self) -> None:
        """Run the Telegram handshake, retrying transient network failures.

        ``Application.initialize`` calls ``getMe``; an invalid token is still fatal.
        """
        attempt = 0
        while True:
            try:
                await self._application.initialize()
                return
            except NetworkError as exc:
                delays = self._handshake_retry_seconds
                wait = delays[min(attempt, len(delays) - 1)] if delays else 0
                attempt += 1
                LOGGER.warning(
                    "Telegram handshake failed (%s), retrying in %ss (attempt %d)",
                    exc,
                    wait,
                    attempt,
                )
                await asyncio.sleep(wait)

    async def stop(self) -> None:
        if self._application.updater.running:
            await self._application.updater.stop()
        if self._application.running:
            await self._application.stop()
        await self._application.shutdown()

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_id: int | None = None,
        html_mode: bool = False,
        disable_link_preview: bool = False,
    ) -> None:
        await self._application.bot.send_message(
            chat_id=chat_id,
            text=text,
            reply_parameters=_reply_to(reply_to_id),
            parse_mode=ParseMode.HTML if html_mode else None,
            link_preview_options=LinkPreviewOptions(is_disabled=True) if disable_link_preview else None,
        )

    async def send_photo(self, chat_id: int, photo: BinaryIO, reply_to_id: int | None = None) -> None:
        await self._application.bot.send_photo(
            chat_id=chat_id,
            photo=photo,
            reply_parameters=_reply_to(reply_to_id),
        )

    async def get_file_link(self, file_id: str) -> str:
        tg_file = await self._application.bot.get_file(file_id)
        if not tg_file.file_path:
            raise TelegramError(f"No download path for file {file_id}")
        return tg_file.file_path

    async def get_self(self) -> BotIdentity:
        me = await self._application.bot.get_me()
        return BotIdentity(id=me.id, username=me.username or "")


def _reply_to(message_id: int | None) -> ReplyParameters | None:
    if message_id is None:
        return None
    return ReplyParameters(message_id=message_id, allow_sending_without_reply=True)


async def _on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    LOGGER.error("Error while handling update %r", update, exc_info=context.error)


def to_chat_event(message: Message, include_reply: bool = True) -> ChatEvent:
    """Convert a Telegram message into a ChatEvent.

    Only one level of reply is kept; Telegram does not nest replies deeper.
    """
    replied = None
    if include_reply and message.reply_to_message is not None:
        replied = to_chat_event(message.reply_to_message, include_reply=False)

    photo_refs = tuple(
        ImageRef(file_id=size.file_id, size_variant=size.width * size.height)
        for size in sorted(message.photo or (), key=lambda size: size.width * size.height)
    )

    document = message.document
    document_ref = None
    document_mime_type = None
    if document is not None:
        document_mime_type = document.mime_type
        document_ref = ImageRef(
            file_id=document.file_id,
            mime_type=document.mime_type or "application/octet-stream",
        )

    return ChatEvent(
        chat_id=message.chat.id,
        message_id=message.message_id,
        chat_kind=ChatKind(str(message.chat.type)),
        sender_id=message.from_user.id if message.from_user else None,
        text=message.text,
        caption=message.caption,
        photo_refs=photo_refs,
        document_mime_type=document_mime_type,
        document_ref=document_ref,
        replied_event=replied,
        new_member_ids=frozenset(user.id for user in message.new_chat_members or ()),
    )
