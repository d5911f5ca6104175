"""Tests for the python-telegram-bot adapter."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import Chat, Document, Message, PhotoSize, Update, User
from telegram.constants import ParseMode
from telegram.error import InvalidToken, NetworkError, TelegramError

from tanyabot.chat.telegram import BOT_COMMANDS, TelegramAdapter, to_chat_event
from tanyabot.models import BotIdentity, ChatKind, ImageRef

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
ALICE = User(id=42, first_name="Alice", is_bot=False)
BOT_USER = User(id=999, first_name="Tanya", is_bot=True, username="mybot")


def _message(message_id: int = 10, chat_type: str = "private", **kwargs) -> Message:
    kwargs.setdefault("from_user", ALICE)
    return Message(
        message_id=message_id,
        date=NOW,
        chat=Chat(id=-100 if chat_type != "private" else 42, type=chat_type),
        **kwargs,
    )


def _photo(file_id: str, side: int) -> PhotoSize:
    return PhotoSize(file_id=file_id, file_unique_id=f"u-{file_id}", width=side, height=side)


# ===========================================================================
# to_chat_event
# ===========================================================================


class TestToChatEvent:
    def test_plain_text(self):
        event = to_chat_event(_message(text="halo"))
        assert event.chat_id == 42
        assert event.message_id == 10
        assert event.chat_kind is ChatKind.PRIVATE
        assert event.sender_id == 42
        assert event.text == "halo"
        assert event.photo_refs == ()
        assert event.replied_event is None
        assert event.new_member_ids == frozenset()

    def test_supergroup_kind(self):
        assert to_chat_event(_message(chat_type="supergroup", text="x")).chat_kind is ChatKind.SUPERGROUP

    def test_photos_are_ordered_by_size(self):
        message = _message(
            caption="edit",
            photo=(_photo("large", 1280), _photo("small", 90), _photo("medium", 320)),
        )
        event = to_chat_event(message)
        assert [ref.file_id for ref in event.photo_refs] == ["small", "medium", "large"]
        assert event.image_ref() == ImageRef(file_id="large", size_variant=1280 * 1280)
        assert event.caption == "edit"

    def test_image_document(self):
        document = Document(file_id="doc", file_unique_id="u-doc", mime_type="image/png")
        event = to_chat_event(_message(document=document))
        assert event.document_mime_type == "image/png"
        assert event.image_ref() == ImageRef(file_id="doc", mime_type="image/png")

    def test_non_image_document_is_not_an_image(self):
        document = Document(file_id="doc", file_unique_id="u-doc", mime_type="application/pdf")
        assert to_chat_event(_message(document=document)).image_ref() is None

    def test_reply_is_kept_one_level_deep(self):
        grandparent = _message(message_id=1, text="awal")
        parent = _message(message_id=2, text="jawaban bot", from_user=BOT_USER, reply_to_message=grandparent)
        event = to_chat_event(_message(message_id=3, text="lanjut", reply_to_message=parent))

        assert event.replied_event is not None
        assert event.replied_event.message_id == 2
        assert event.replied_event.sender_id == 999
        assert event.replied_event.text == "jawaban bot"
        assert event.replied_event.replied_event is None

    def test_new_members(self):
        message = _message(chat_type="group", new_chat_members=(BOT_USER, ALICE))
        assert to_chat_event(message).new_member_ids == frozenset({999, 42})

    def test_missing_sender(self):
        event = to_chat_event(_message(chat_type="channel", text="post", from_user=None))
        assert event.sender_id is None
        assert event.chat_kind is ChatKind.CHANNEL


# ===========================================================================
# TelegramAdapter
# ===========================================================================


def _adapter() -> tuple[TelegramAdapter, MagicMock]:
    application = MagicMock()
    bot = application.bot
    bot.send_message = AsyncMock()
    bot.send_photo = AsyncMock()
    bot.get_file = AsyncMock()
    bot.get_me = AsyncMock()
    return TelegramAdapter(application), bot


@pytest.mark.asyncio
async def test_send_message_threads_and_sets_html():
    adapter, bot = _adapter()
    await adapter.send_message(-100, "<b>hai</b>", reply_to_id=7, html_mode=True, disable_link_preview=True)

    kwargs = bot.send_message.await_args.kwargs
    assert kwargs["chat_id"] == -100
    assert kwargs["text"] == "<b>hai</b>"
    assert kwargs["reply_parameters"].message_id == 7
    assert kwargs["parse_mode"] == ParseMode.HTML
    assert kwargs["link_preview_options"].is_disabled is True


@pytest.mark.asyncio
async def test_send_message_unthreaded_plain():
    adapter, bot = _adapter()
    await adapter.send_message(-100, "halo")

    kwargs = bot.send_message.await_args.kwargs
    assert kwargs["reply_parameters"] is None
    assert kwargs["parse_mode"] is None
    assert kwargs["link_preview_options"] is None


@pytest.mark.asyncio
async def test_send_photo_passes_buffer():
    adapter, bot = _adapter()
    buffer = io.BytesIO(b"png")
    await adapter.send_photo(-100, buffer, reply_to_id=7)

    kwargs = bot.send_photo.await_args.kwargs
    assert kwargs["photo"] is buffer
    assert kwargs["reply_parameters"].message_id == 7


@pytest.mark.asyncio
async def test_get_file_link_returns_file_path():
    adapter, bot = _adapter()
    bot.get_file.return_value = MagicMock(file_path="https://api.telegram.org/file/botX/photos/1.jpg")
    assert await adapter.get_file_link("file-1") == "https://api.telegram.org/file/botX/photos/1.jpg"
    bot.get_file.assert_awaited_once_with("file-1")


@pytest.mark.asyncio
async def test_get_self_maps_user():
    adapter, bot = _adapter()
    bot.get_me.return_value = BOT_USER
    assert await adapter.get_self() == BotIdentity(id=999, username="mybot")


# ===========================================================================
# Lifecycle
# ===========================================================================


def _lifecycle_application() -> MagicMock:
    application = MagicMock()
    application.initialize = AsyncMock()
    application.start = AsyncMock()
    application.stop = AsyncMock()
    application.shutdown = AsyncMock()
    application.updater.start_polling = AsyncMock()
    application.updater.stop = AsyncMock()
    application.bot.set_my_commands = AsyncMock()
    return application


@pytest.mark.asyncio
async def test_start_initializes_polls_and_registers_commands():
    application = _lifecycle_application()

    await TelegramAdapter(application).start()

    application.initialize.assert_awaited_once()
    application.start.assert_awaited_once()
    application.updater.start_polling.assert_awaited_once_with(drop_pending_updates=True)
    application.bot.set_my_commands.assert_awaited_once_with(BOT_COMMANDS)


@pytest.mark.asyncio
async def test_start_retries_handshake_network_errors():
    application = _lifecycle_application()
    application.initialize.side_effect = [NetworkError("down"), NetworkError("down"), None]

    await TelegramAdapter(application, handshake_retry_seconds=(0,)).start()

    assert application.initialize.await_count == 3
    application.updater.start_polling.assert_awaited_once_with(drop_pending_updates=True)


@pytest.mark.asyncio
async def test_start_fails_on_invalid_token():
    application = _lifecycle_application()
    application.initialize.side_effect = InvalidToken()

    with pytest.raises(InvalidToken):
        await TelegramAdapter(application, handshake_retry_seconds=(0,)).start()

    application.initialize.assert_awaited_once()
    application.updater.start_polling.assert_not_called()


@pytest.mark.asyncio
async def test_start_tolerates_command_menu_failure():
    application = _lifecycle_application()
    application.bot.set_my_commands.side_effect = TelegramError("forbidden")

    await TelegramAdapter(application).start()

    application.updater.start_polling.assert_awaited_once()


@pytest.mark.asyncio
async def test_stop_when_running():
    application = _lifecycle_application()
    application.running = True
    application.updater.running = True

    await TelegramAdapter(application).stop()

    application.updater.stop.assert_awaited_once()
    application.stop.assert_awaited_once()
    application.shutdown.assert_awaited_once()


@pytest.mark.asyncio
async def test_stop_when_never_started():
    application = _lifecycle_application()
    application.running = False
    application.updater.running = False

    await TelegramAdapter(application).stop()

    application.updater.stop.assert_not_called()
    application.stop.assert_not_called()
    application.shutdown.assert_awaited_once()


@pytest.mark.asyncio
async def test_event_handler_receives_converted_message():
    application = _lifecycle_application()
    handler = AsyncMock()
    TelegramAdapter(application).add_event_handler(handler)

    message_handler = application.add_handler.call_args.args[0]
    update = Update(update_id=1, message=_message(text="halo"))
    await message_handler.callback(update, MagicMock())

    handler.assert_awaited_once_with(to_chat_event(update.message))
    application.add_error_handler.assert_called_once()


@pytest.mark.asyncio
async def test_event_handler_skips_updates_without_message():
    application = _lifecycle_application()
    handler = AsyncMock()
    TelegramAdapter(application).add_event_handler(handler)

    message_handler = application.add_handler.call_args.args[0]
    await message_handler.callback(Update(update_id=2), MagicMock())

    handler.assert_not_called()
