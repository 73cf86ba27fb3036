"""
Durable logo store.

A single JSON document maps token fingerprints to logo data URIs. The
document is read whole on every lookup and rewritten whole on every insert;
writes go to a temporary file that is then renamed over the document, so a
reader never sees a half-written file. The store only grows: an existing
fingerprint is never overwritten or removed.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..errors import LogoStoreError

logger = logging.getLogger(__name__)


class LogoStore:
    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        # Inserts whose write failed; merged into the next write or flush()
        self._pending: Dict[str, str] = {}

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Logo store %s is unreadable, starting empty: %s", self.path, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("Logo store %s does not hold an object, ignoring it", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, logos: Mapping[str, str]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(dict(logos), fh, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            raise LogoStoreError(f"Could not write logo store {self.path}: {exc}") from exc

    async def load(self) -> Dict[str, str]:
        """Return the whole document, or an empty mapping if it cannot be read."""
        logos = await asyncio.to_thread(self._read)
        for fingerprint, payload in self._pending.items():
            logos.setdefault(fingerprint, payload)
        return logos

    async def save(self, logos: Mapping[str, str]) -> None:
        """Replace the document with ``logos``. Raises LogoStoreError."""
        await asyncio.to_thread(self._write, logos)

    async def get(self, fingerprint: str) -> Optional[str]:
        return (await self.load()).get(fingerprint)

    async def add(self, fingerprint: str, payload: str) -> bool:
        """Insert ``payload`` unless the fingerprint is already stored.

        Returns True when the entry was new. A failed write is logged and
        retried with the next insert or at flush(); it never raises.
        """
        async with self._lock:
            logos = await self.load()
            if fingerprint in logos:
                return False

            logos[fingerprint] = payload
            self._pending[fingerprint] = payload
            try:
                await self.save(logos)
            except LogoStoreError as exc:
                logger.error("Logo for %s kept in memory only: %s", fingerprint, exc)
            else:
                self._pending.clear()
            return True

    async def flush(self) -> None:
        """Write entries whose earlier persist failed."""
        async with self._lock:
            if not self._pending:
                return
            logos = await self.load()
            try:
                await self.save(logos)
            except LogoStoreError as exc:
                logger.error("Dropping %s unsaved logos: %s", len(self._pending), exc)
            else:
                logger.info("Flushed %s pending logos to %s", len(self._pending), self.path)
            self._pending.clear()

    async def size(self) -> int:
        return len(await self.load())
