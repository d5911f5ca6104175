"""Per-event glue between the classifier and the executor."""

from __future__ import annotations

import logging

from tanyabot.classifier import classify
from tanyabot.executor import ActionExecutor
from tanyabot.identity import BotIdentityCache
from tanyabot.models import ChatEvent, Ignore

LOGGER = logging.getLogger(__name__)


class Dispatcher:
    """Classifies each inbound event and executes the resulting action."""

    def __init__(self, identity_cache: BotIdentityCache, executor: ActionExecutor) -> None:
        self._identity_cache = identity_cache
        self._executor = executor

    async def handle_event(self, event: ChatEvent) -> None:
        action = classify(event, self._identity_cache.identity)
        if isinstance(action, Ignore):
            LOGGER.debug("Ignoring message %s in chat %s", event.message_id, event.chat_id)
            return
        LOGGER.info(
            "Dispatch: chat=%s kind=%s message=%s action=%s",
            event.chat_id,
            event.chat_kind.value,
            event.message_id,
            type(action).__name__,
        )
        LOGGER.debug("Action detail: %r", action)
        await self._executor.execute(event, action)
