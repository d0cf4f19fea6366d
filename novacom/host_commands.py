"""Host side of the authentication service: requests and reply handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

from .auth import (
    AUTH_METHOD_PASSWORD,
    AUTH_METHOD_TOKEN,
    AUTH_SESSION_LEN,
    AuthMessage,
)
from .buffer import Buffer
from .tokenstorage import TokenStorage

log = logging.getLogger(__name__)

_REQUEST_SIZE = 100


@dataclass(frozen=True)
class CommandUrl:
    """A parsed service command: verb, scheme and its arguments."""

    verb: str
    scheme: str
    args: tuple[str, ...] = field(default_factory=tuple)


class _Handler(NamedTuple):
    verb: str
    scheme: str
    remote: bool


_HANDLERS = (
    _Handler("list", "host", False),
    _Handler("login", "dev", True),
    _Handler("logout", "dev", True),
    _Handler("logint", "dev", True),
    _Handler("add", "dev", True),
    _Handler("remove", "dev", True),
)


def find_handler(verb: str, scheme: str) -> _Handler | None:
    """The handler for a verb and scheme, compared without regard to case."""
    verb, scheme = verb.lower(), scheme.lower()
    for handler in _HANDLERS:
        if handler.verb == verb and handler.scheme == scheme:
            return handler
    return None


def _header(msg: int) -> Buffer:
    buf = Buffer(_REQUEST_SIZE)
    buf.put_byte(msg)
    buf.put_byte(0)  # version
    return buf


def build_login_request(password_hash: str, method: str = AUTH_METHOD_PASSWORD) -> bytes:
    """An authentication request using the password or token method."""
    if method not in (AUTH_METHOD_PASSWORD, AUTH_METHOD_TOKEN):
        raise ValueError(f"unknown authentication method {method!r}")
    buf = _header(AuthMessage.USERAUTH_REQUEST)
    buf.put_string(method.encode("ascii"))
    buf.put_string(password_hash.encode("utf-8"))
    return buf.getvalue()


def build_logout_request() -> bytes:
    """A request that drops the current authentication."""
    return _header(AuthMessage.DISCONNECT).getvalue()


def build_token_add_request(password_hash: str) -> bytes:
    """A request asking the device for a new token."""
    buf = _header(AuthMessage.USERAUTH_TOKENREQUEST_ADD)
    buf.put_string(password_hash.encode("utf-8"))
    return buf.getvalue()


def build_token_remove_request(password_hash: str, token_hash: str) -> bytes:
    """A request asking the device to forget the token with ``token_hash``."""
    buf = _header(AuthMessage.USERAUTH_TOKENREQUEST_RM)
    buf.put_string(password_hash.encode("utf-8"))
    buf.put_string(token_hash.encode("ascii"))
    return buf.getvalue()


class HostCommands:
    """Builds device requests for commands and applies device replies."""

    def __init__(self, storage: TokenStorage) -> None:
        self.storage = storage

    def request(self, url: CommandUrl, device_id: str, session: str | None = None) -> bytes:
        """The message to send to the device for a device command."""
        handler = find_handler(url.verb, url.scheme)
        if handler is None:
            raise ValueError(f"unknown command {url.scheme}://{url.verb}")
        if not handler.remote:
            raise ValueError(f"{handler.verb} is not a device command")

        if handler.verb == "logout":
            return build_logout_request()

        if handler.verb == "remove" and (session is None or len(session) != AUTH_SESSION_LEN):
            raise ValueError("invalid session length")
        if not url.args:
            raise ValueError(f"{handler.verb} expects an argument")
        password_hash = url.args[0]

        if handler.verb == "login":
            return build_login_request(password_hash, AUTH_METHOD_PASSWORD)
        if handler.verb == "logint":
            return build_login_request(password_hash, AUTH_METHOD_TOKEN)
        if handler.verb == "add":
            return build_token_add_request(password_hash)
        token_hash = self.storage.read_hash(device_id, session)
        return build_token_remove_request(password_hash, token_hash)

    def handle_reply(self, device_id: str, data: bytes) -> bool:
        """Apply a device reply; returns whether the command succeeded.

        A truncated reply raises ``BufferUnderrunError``.
        """
        reply = Buffer.from_data(data)
        kind = reply.get_byte()
        reply.get_byte()  # version
        cmd = reply.get_byte()
        log.debug("msg type: %d, cmd %d", kind, cmd)

        if cmd in (AuthMessage.DISCONNECT, AuthMessage.USERAUTH_REQUEST):
            return kind != AuthMessage.USERAUTH_FAILURE
        if cmd == AuthMessage.USERAUTH_TOKENREQUEST_RM:
            if kind == AuthMessage.USERAUTH_SUCCESS:
                self.storage.remove(device_id)
            return kind != AuthMessage.USERAUTH_FAILURE
        if cmd == AuthMessage.USERAUTH_TOKENREQUEST_ADD:
            if kind != AuthMessage.USERAUTH_TOKEN_REPLY:
                return False
            token = reply.get_blob()
            if token:
                self.storage.store(device_id, token)
            return True
        return False