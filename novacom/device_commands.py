"""Device side of the authentication service channel."""

from __future__ import annotations

import logging

from .auth import (
    AUTH_METHOD_PASSWORD,
    AUTH_METHOD_TOKEN,
    AUTH_TOKEN_LEN,
    AuthError,
    AuthMessage,
    AuthState,
)
from .buffer import Buffer, BufferUnderrunError

log = logging.getLogger(__name__)

_TOKEN_REPLY_SIZE = 16 + AUTH_TOKEN_LEN


def _cstr(data: bytes) -> bytes:
    """The part of ``data`` before the first NUL byte."""
    return data.split(b"\0", 1)[0]


class CommandService:
    """Answers authentication requests sent by a host.

    Every request starts with a message type byte; the reply is returned as
    bytes ready to be written back on the channel.
    """

    def __init__(self, auth: AuthState, device_id: str) -> None:
        self.auth = auth
        self.device_id = device_id

    def handle(self, data: bytes) -> bytes:
        """Process one request and return the reply."""
        request = Buffer.from_data(data)
        try:
            msg = request.get_byte()
        except BufferUnderrunError:
            return bytes([AuthMessage.UNIMPLEMENTED])
        log.debug("msg type: %d", msg)

        if msg == AuthMessage.DISCONNECT:
            return self._status(self.auth.reset_state(), msg)
        if msg == AuthMessage.USERAUTH_REQUEST:
            return self._status(self._auth_request(request), msg)
        if msg in (AuthMessage.USERAUTH_TOKENREQUEST_ADD, AuthMessage.USERAUTH_TOKENREQUEST_RM):
            return self._token_request(request, msg)
        return bytes([AuthMessage.UNIMPLEMENTED])

    @staticmethod
    def _status(ok: bool, cmd: int) -> bytes:
        kind = AuthMessage.USERAUTH_SUCCESS if ok else AuthMessage.USERAUTH_FAILURE
        return bytes([kind, 0, cmd])

    def _auth_request(self, request: Buffer) -> bool:
        try:
            request.get_byte()  # version
            mode = _cstr(request.get_string())
            digest = _cstr(request.get_string())
        except BufferUnderrunError:
            log.debug("malformed authentication request")
            return False

        if mode == AUTH_METHOD_PASSWORD.encode("ascii"):
            return self.auth.process_password(digest, False)
        if mode == AUTH_METHOD_TOKEN.encode("ascii"):
            return self.auth.process_token(digest)
        return False

    def _token_request(self, request: Buffer, cmd: int) -> bytes:
        failure = self._status(False, cmd)
        removing = cmd == AuthMessage.USERAUTH_TOKENREQUEST_RM
        try:
            request.get_byte()  # version
            password_digest = _cstr(request.get_string())
            token_digest = _cstr(request.get_string()) if removing else b""
        except BufferUnderrunError:
            log.debug("malformed token request")
            return failure

        if not self.auth.process_password(password_digest, True):
            log.debug("invalid password hash")
            return failure

        if removing:
            try:
                self.auth.delete_token_file(token_digest)
            except AuthError as exc:
                log.debug("token removal failed: %s", exc)
                return failure
            return self._status(True, cmd)

        blob = self.auth.generate_token()
        try:
            self.auth.create_token_file(self.device_id, blob)
        except AuthError as exc:
            log.debug("unable to store token: %s", exc)
            return failure

        reply = Buffer(3)
        reply.put_byte(AuthMessage.USERAUTH_TOKEN_REPLY)
        reply.put_byte(0)
        reply.put_byte(cmd)
        reply.resize(_TOKEN_REPLY_SIZE)
        reply.put_blob(blob)
        return reply.getvalue()