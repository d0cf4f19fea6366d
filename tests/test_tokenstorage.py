import random

import pytest

from novacom.auth import AUTH_SESSION_LEN, AUTH_TOKEN_LEN, AuthState
from novacom.tokenstorage import TokenStorage


def token_bytes():
    return bytes(range(AUTH_TOKEN_LEN))


def test_path_creates_directory(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    path = storage.path()
    assert path == tmp_path / ".nova"
    assert path.is_dir()


def test_store_and_read_round_trip(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", token_bytes())
    assert storage.read("device-a", AUTH_TOKEN_LEN) == token_bytes()


def test_read_short_file_raises(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", b"abc")
    with pytest.raises(ValueError):
        storage.read("device-a", AUTH_TOKEN_LEN)


def test_read_missing_file_raises(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    with pytest.raises(FileNotFoundError):
        storage.read("nothing", 4)


def test_remove_deletes_token(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", token_bytes())
    storage.remove("device-a")
    assert not (tmp_path / ".nova" / "device-a").exists()
    with pytest.raises(FileNotFoundError):
        storage.remove("device-a")


def test_read_hash_rejects_bad_session_length(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", token_bytes())
    with pytest.raises(ValueError):
        storage.read_hash("device-a", "0" * (AUTH_SESSION_LEN + 1))


def test_read_hash_matches_device_digest(tmp_path):
    state = AuthState(tmp_path / "passwd", tmp_path / "tokens", random.Random(7))
    (tmp_path / "passwd").write_bytes(b"0" * 40)
    state.initialize()
    data = state.generate_token()
    state.create_token_file("device-a", data)

    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", data)
    digest = storage.read_hash("device-a", state.get_session())

    assert digest == state.tokens[0].digest
    assert state.process_token(digest) is True


def test_read_hash_depends_on_session(tmp_path):
    storage = TokenStorage(tmp_path / ".nova")
    storage.store("device-a", token_bytes())
    first = storage.read_hash("device-a", "a" * AUTH_SESSION_LEN)
    second = storage.read_hash("device-a", "b" * AUTH_SESSION_LEN)
    assert len(first) == 40
    assert first != second