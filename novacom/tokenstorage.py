"""Host-side store of tokens handed out by devices, one file per device."""

from __future__ import annotations

import os
from pathlib import Path

from .auth import AUTH_SESSION_LEN, AUTH_TOKEN_LEN
from .cksum import sha1_hex


class TokenStorage:
    """Token files kept in a private directory, by default ``~/.nova``."""

    def __init__(self, root: str | os.PathLike[str] | None = None) -> None:
        self.root = Path(root) if root is not None else Path.home() / ".nova"

    def path(self) -> Path:
        """The storage directory, created with private permissions if missing."""
        self.root.mkdir(mode=0o700, exist_ok=True)
        return self.root

    def store(self, name: str, data: bytes) -> None:
        """Save token data under ``name``; a partial file is removed on failure."""
        target = self.path() / name
        try:
            with open(target, "wb") as fh:
                fh.write(data)
        except OSError:
            target.unlink(missing_ok=True)
            raise

    def remove(self, name: str) -> None:
        """Delete the token stored under ``name``."""
        os.remove(self.path() / name)

    def read(self, name: str, length: int) -> bytes:
        """Read exactly ``length`` bytes of the token stored under ``name``."""
        with open(self.path() / name, "rb") as fh:
            data = fh.read(length)
        if len(data) != length:
            raise ValueError(f"token {name!r} holds {len(data)} of {length} bytes")
        return data

    def read_hash(self, name: str, session: str) -> str:
        """Digest of the stored token bound to a device session."""
        if len(session) != AUTH_SESSION_LEN:
            raise ValueError(
                f"invalid session length ({len(session)}/{AUTH_SESSION_LEN})"
            )
        data = self.read(name, AUTH_TOKEN_LEN)
        return sha1_hex(data + session.encode("ascii"))