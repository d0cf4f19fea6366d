"""Records of lost USB connections that may be picked up again."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

log = logging.getLogger(__name__)


@dataclass
class RecoveryToken:
    """Identifies a connection: token bytes, device id and the saved handle."""

    token: bytes
    nduid: str = ""
    user_data: Any = None


@dataclass
class _Entry:
    token: RecoveryToken
    timeout: int = field(default=0)


class RecoveryRecords:
    """Thread-safe queue of recovery tokens that expire after a timeout.

    When a record expires or is removed explicitly, ``destroy`` is called
    with the handle it kept.
    """

    def __init__(self, timeout: int, destroy: Callable[[Any], None] | None = None) -> None:
        self.timeout = timeout
        self._destroy = destroy
        self._entries: list[_Entry] = []
        self._lock = threading.Lock()

    def add(self, token: RecoveryToken) -> None:
        """Keep ``token`` for the configured timeout."""
        with self._lock:
            self._entries.append(_Entry(token, self.timeout))

    def find(self, token: RecoveryToken) -> Any:
        """Take out the record matching ``token`` and return its handle.

        Raises ``KeyError`` when no record matches.
        """
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.token.token == token.token:
                    del self._entries[index]
                    log.info("recovered record, nduid(%s)", entry.token.nduid)
                    token.user_data = entry.token.user_data
                    return entry.token.user_data
        raise KeyError("no recovery record matches the token")

    def update(self, elapsed: int) -> None:
        """Count down every record by ``elapsed``; expired ones are destroyed."""
        with self._lock:
            kept: list[_Entry] = []
            expired: list[_Entry] = []
            for entry in self._entries:
                entry.timeout -= elapsed
                (expired if entry.timeout < 0 else kept).append(entry)
            self._entries = kept
        for entry in expired:
            log.info("expired recovery record, nduid(%s)", entry.token.nduid)
            self._release(entry)

    def remove(self, nduid: str) -> None:
        """Destroy every record belonging to the device ``nduid``."""
        with self._lock:
            removed = [entry for entry in self._entries if entry.token.nduid == nduid]
            self._entries = [entry for entry in self._entries if entry.token.nduid != nduid]
        for entry in removed:
            log.info("explicit remove, nduid(%s)", nduid)
            self._release(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _release(self, entry: _Entry) -> None:
        if self._destroy is not None:
            self._destroy(entry.token.user_data)