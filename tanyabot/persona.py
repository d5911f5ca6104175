"""Persona preamble loaded from a text file."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class PersonaSource:
    """Reads the persona file fresh on every request so edits apply without a restart."""

    def __init__(self, path: Path) -> None:
        self._path = path

    async def read(self) -> str | None:
        return await asyncio.to_thread(self._read)

    def _read(self) -> str | None:
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read persona file %s: %s", self._path, exc)
            return None
        return content.strip() or None
