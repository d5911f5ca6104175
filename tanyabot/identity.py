"""Write-once cache of the bot's own Telegram identity."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from tanyabot.models import BotIdentity

LOGGER = logging.getLogger(__name__)


class BotIdentityCache:
    """Holds the bot's id and username once the start-up handshake succeeds.

    Readers get None until then; the classifier treats a missing identity as
    "never mentioned, never replied to".
    """

    def __init__(self) -> None:
        self._identity: BotIdentity | None = None

    @property
    def identity(self) -> BotIdentity | None:
        return self._identity

    def set(self, identity: BotIdentity) -> None:
        if self._identity is not None:
            raise RuntimeError("Bot identity is already set")
        self._identity = identity

    async def populate(self, fetch: Callable[[], Awaitable[BotIdentity]]) -> BotIdentity | None:
        """Fetch and store the identity unless it is already known.

        A failed fetch is logged and leaves the cache empty.
        """
        if self._identity is not None:
            return self._identity
        try:
            identity = await fetch()
        except Exception:  # noqa: BLE001
            LOGGER.warning("Could not fetch bot identity; mentions will be ignored", exc_info=True)
            return None
        self.set(identity)
        LOGGER.info("Bot identity: id=%s username=@%s", identity.id, identity.username)
        return identity
