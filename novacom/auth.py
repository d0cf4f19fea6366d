"""Device-side authentication: password check, session data and stored tokens."""

from __future__ import annotations

import enum
import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path

from .cksum import SHA1_HEX_SIZE, sha1_hex

log = logging.getLogger(__name__)

DEFAULT_PASS_FILE = Path("/var/novacom/passwd")
DEFAULT_TOKEN_DIR = Path("/var/novacom/tokens")

MAX_TOKENS = 100
AUTH_SESSION_LEN = 32
AUTH_TOKEN_LEN = 64
PASSWORD_RETRY_MAX = 5
TOKEN_RETRY_MAX = 20

AUTH_METHOD_PASSWORD = "password"
AUTH_METHOD_TOKEN = "token"

_HEX_DIGITS = "0123456789abcdef"


class AuthMessage(enum.IntEnum):
    """Message types exchanged on the authentication service channel."""

    DISCONNECT = 1
    UNIMPLEMENTED = 3
    USERAUTH_REQUEST = 50
    USERAUTH_FAILURE = 51
    USERAUTH_SUCCESS = 52
    USERAUTH_TOKENREQUEST_ADD = 192
    USERAUTH_TOKENREQUEST_RM = 193
    USERAUTH_TOKEN_REPLY = 194


class AuthError(Exception):
    """Raised when a session or token operation cannot be carried out."""


@dataclass(frozen=True)
class TokenRecord:
    """A token file known to the device, with its session-bound digest."""

    filename: str
    data: bytes
    digest: str


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


class AuthState:
    """Authentication state of a device.

    Without a non-empty password file the device is open. With one, a client
    proves knowledge of the password hash by sending
    ``sha1_hex(password_hash + session)``, or of a stored token by sending
    ``sha1_hex(token + session)``.
    """

    fail_delay = 0.2

    def __init__(
        self,
        pass_file: str | os.PathLike[str] = DEFAULT_PASS_FILE,
        token_dir: str | os.PathLike[str] = DEFAULT_TOKEN_DIR,
        rng: random.Random | None = None,
    ) -> None:
        self.pass_file = Path(pass_file)
        self.token_dir = Path(token_dir)
        self._rng = rng if rng is not None else random.Random()
        self.fail_count = 0
        self.token_fail_count = 0
        self.protected = False
        self._done = True
        self.tokens: list[TokenRecord] = []
        self._session_set = False
        self._session = "\0" * AUTH_SESSION_LEN

    def initialize(self) -> None:
        """Reset counters, look at the password file and start a new session."""
        if self.tokens:
            self.reset()
        self.token_fail_count = 0
        self.fail_count = 0
        self.protected = False
        self._done = True
        self._session = "\0" * AUTH_SESSION_LEN

        try:
            st = os.stat(self.pass_file)
        except OSError:
            log.debug("no password file at %s", self.pass_file)
            return

        if st.st_size:
            self.protected = True
            self._done = False

        self._set_session(self._new_session())

    def reset_state(self) -> bool:
        """Drop the current authentication, as on logout."""
        if self.protected:
            if self._done:
                self.fail_count = 0
            self._done = False
        else:
            self._done = True
        return True

    def reset(self) -> bool:
        """Open the device and forget every known token."""
        self._done = True
        self.tokens.clear()
        return True

    def is_done(self) -> bool:
        """Whether the client is authenticated."""
        return self._done

    def process_password(self, digest: str | bytes, forced: bool = False) -> bool:
        """Check a password digest against the password file and session.

        In forced mode the check is made regardless of the current state and
        neither the state nor the failure count changes.
        """
        if not forced:
            if self._done:
                return True
            if self.fail_count > PASSWORD_RETRY_MAX:
                log.error("exceeded number of password retries")
                return False

        given = _as_bytes(digest)
        if len(given) != SHA1_HEX_SIZE:
            log.error("invalid hash size (%d/%d)", len(given), SHA1_HEX_SIZE)
            return False
        if not self._session_set:
            log.warning("session must be generated and active")
            return False

        stored = self._read_password()
        if stored is None:
            log.error("unable to read password file %s", self.pass_file)
            return False

        expected = sha1_hex(stored + self._session.encode("ascii")).encode("ascii")
        matched = given == expected
        if not forced:
            if matched:
                self._done = True
            else:
                self.fail_count += 1
                if self.fail_delay:
                    time.sleep(self.fail_delay)
        return matched

    def process_token(self, digest: str | bytes) -> bool:
        """Check a token digest against the known tokens."""
        given = _as_bytes(digest)
        if len(given) != SHA1_HEX_SIZE:
            log.error("invalid hash size")
            return False
        if self._done:
            return True
        if self.token_fail_count > TOKEN_RETRY_MAX:
            log.error("exceeded number of token retries")
            return False

        for record in self.tokens:
            if record.digest.encode("ascii") == given:
                self._done = True
                break
            self.token_fail_count += 1
        return self._done

    def get_session(self) -> str:
        """The current session string."""
        if not self._session_set:
            raise AuthError("session is not set yet")
        return self._session

    def generate_token(self) -> bytes:
        """Fresh random token data."""
        return bytes(self._rng.randrange(256) for _ in range(AUTH_TOKEN_LEN))

    def create_token_file(self, name: str, data: bytes) -> None:
        """Store token data under ``name`` and rescan the tokens."""
        try:
            self.token_dir.mkdir(mode=0o700, exist_ok=True)
        except OSError as exc:
            raise AuthError(f"unable to create directory {self.token_dir}") from exc

        path = self.token_dir / name
        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o775)
        except OSError as exc:
            raise AuthError(f"unable to create token file {path}") from exc
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise AuthError(f"unable to write token file {path}") from exc

        self.scan_tokens()

    def delete_token_file(self, digest: str | bytes) -> None:
        """Remove the token file whose digest matches and rescan the tokens."""
        given = _as_bytes(digest)
        if len(given) != SHA1_HEX_SIZE:
            raise AuthError("invalid hash size")

        for record in self.tokens:
            if record.digest.encode("ascii") != given:
                continue
            failure: OSError | None = None
            try:
                os.remove(self.token_dir / record.filename)
            except OSError as exc:
                failure = exc
            self.scan_tokens()
            if failure is not None:
                raise AuthError(f"unable to remove token {record.filename}") from failure
            return
        raise AuthError("no token matches the given hash")

    def scan_tokens(self) -> int:
        """Reload the token files and their digests; returns how many were found."""
        self.tokens.clear()
        try:
            entries = sorted(os.scandir(self.token_dir), key=lambda entry: entry.name)
        except OSError:
            log.debug("unable to open token directory %s", self.token_dir)
            return 0

        session = self._session.encode("ascii")
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
                with open(entry.path, "rb") as fh:
                    data = fh.read(AUTH_TOKEN_LEN)
            except OSError:
                continue
            if not data:
                continue
            self.tokens.append(TokenRecord(entry.name, data, sha1_hex(data + session)))
            if len(self.tokens) > MAX_TOKENS:
                log.error("too many tokens defined (%d), abort", len(self.tokens))
                break
        return len(self.tokens)

    def _new_session(self) -> str:
        return "".join(self._rng.choice(_HEX_DIGITS) for _ in range(AUTH_SESSION_LEN))

    def _set_session(self, session: str) -> None:
        self._session = session
        self._session_set = True
        self.scan_tokens()

    def _read_password(self) -> bytes | None:
        try:
            with open(self.pass_file, "rb") as fh:
                data = fh.read(SHA1_HEX_SIZE)
        except OSError:
            return None
        if not data:
            return None
        if data.endswith(b"\n"):
            data = data[:-1]
        if len(data) != SHA1_HEX_SIZE:
            return None
        return data