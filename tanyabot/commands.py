"""Slash command parsing for in-chat commands.

Recognised commands are /start, /help, /tanya and /gambar. Telegram clients
may append the bot's username to a command (``/tanya@mybot ...``) in groups;
a command addressed to a different bot is not ours.
"""

from __future__ import annotations

import re

START_COMMAND = "start"
HELP_COMMAND = "help"
ASK_COMMAND = "tanya"
IMAGE_COMMAND = "gambar"

HELP_PREFIXES = (f"/{START_COMMAND}", f"/{HELP_COMMAND}")

_COMMAND_RE = re.compile(r"^/(\w+)(?:@(\w+))?(?:\s+(.*))?$", re.DOTALL)


def parse_command(text: str | None, bot_username: str | None = None) -> tuple[str, str] | None:
    """Split a /-prefixed message into (command, remainder).

    Returns:
        A (command, remainder) tuple where remainder is stripped, or None if
        text is not a slash command or names another bot. Command names are
        case-sensitive.
    """
    if not text:
        return None
    match = _COMMAND_RE.match(text.strip())
    if match is None:
        return None
    command, addressee, remainder = match.groups()
    if addressee is not None and addressee != bot_username:
        return None
    return command, (remainder or "").strip()


def is_help_request(text: str | None) -> bool:
    """Return True for messages starting with /start or /help."""

    return bool(text) and text.startswith(HELP_PREFIXES)


def command_remainder(text: str | None, command: str, bot_username: str | None = None) -> str | None:
    """Return the stripped argument text if ``text`` is ``/command``, else None."""

    parsed = parse_command(text, bot_username)
    if parsed is None or parsed[0] != command:
        return None
    return parsed[1]
