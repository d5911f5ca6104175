"""Application entrypoint."""

from __future__ import annotations

import asyncio
import logging

from tanyabot.chat.telegram import TelegramAdapter, build_application
from tanyabot.config import load_settings
from tanyabot.dispatcher import Dispatcher
from tanyabot.executor import ActionExecutor
from tanyabot.identity import BotIdentityCache
from tanyabot.llm.gemini import GeminiProvider
from tanyabot.persona import PersonaSource

LOGGER = logging.getLogger(__name__)


async def start_bot(telegram: TelegramAdapter, identity_cache: BotIdentityCache) -> None:
    """Start polling, then fill the identity cache.

    Polling keeps running even when the identity lookup fails.
    """
    await telegram.start()
    await identity_cache.populate(telegram.get_self)


async def run() -> None:
    """Initialize app layers and poll Telegram until cancelled."""

    settings = load_settings()
    logging.basicConfig(level=settings.log_level.upper())
    # httpx logs request URLs at INFO, and Telegram URLs embed the bot token.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    telegram = TelegramAdapter(build_application(settings.telegram_bot_token))
    identity_cache = BotIdentityCache()
    executor = ActionExecutor(
        chat=telegram,
        llm=GeminiProvider(settings),
        persona=PersonaSource(settings.persona_path),
        help_header=settings.help_header,
        download_timeout_seconds=settings.request_timeout_seconds,
    )
    dispatcher = Dispatcher(identity_cache=identity_cache, executor=executor)
    telegram.add_event_handler(dispatcher.handle_event)

    try:
        await start_bot(telegram, identity_cache)
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        raise
    finally:
        await telegram.stop()
        LOGGER.info("Bot shutdown complete")


def main() -> None:
    """Synchronous wrapper for asyncio entrypoint."""

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
