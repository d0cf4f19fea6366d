import random

import pytest

from novacom.auth import (
    AUTH_SESSION_LEN,
    AUTH_TOKEN_LEN,
    PASSWORD_RETRY_MAX,
    AuthError,
    AuthState,
)
from novacom.cksum import sha1_hex

PASS_HASH = sha1_hex(b"password").encode("ascii")


def make_state(tmp_path, pass_contents=PASS_HASH, seed=1):
    pass_file = tmp_path / "passwd"
    if pass_contents is not None:
        pass_file.write_bytes(pass_contents)
    state = AuthState(pass_file, tmp_path / "tokens", random.Random(seed))
    state.fail_delay = 0
    return state


def answer(state):
    return sha1_hex(PASS_HASH + state.get_session().encode("ascii"))


def test_fresh_state_is_open(tmp_path):
    state = make_state(tmp_path, pass_contents=None)
    assert state.is_done() is True


def test_no_password_file_leaves_device_open_without_session(tmp_path):
    state = make_state(tmp_path, pass_contents=None)
    state.initialize()
    assert state.is_done() is True
    assert state.protected is False
    with pytest.raises(AuthError):
        state.get_session()


def test_empty_password_file_opens_device_with_session(tmp_path):
    state = make_state(tmp_path, pass_contents=b"")
    state.initialize()
    assert state.is_done() is True
    session = state.get_session()
    assert len(session) == AUTH_SESSION_LEN
    assert set(session) <= set("0123456789abcdef")


def test_password_file_locks_device(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    assert state.protected is True
    assert state.is_done() is False


def test_correct_password_unlocks(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    assert state.process_password(answer(state)) is True
    assert state.is_done() is True


def test_password_file_with_trailing_newline(tmp_path):
    state = make_state(tmp_path, pass_contents=PASS_HASH + b"\n")
    state.initialize()
    assert state.process_password(answer(state).encode("ascii")) is True


def test_wrong_password_counts_failure(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    assert state.process_password("0" * 40) is False
    assert state.fail_count == 1
    assert state.is_done() is False


def test_wrong_length_is_rejected(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    assert state.process_password(answer(state)[:-1]) is False
    assert state.fail_count == 0


def test_retry_limit_blocks_correct_password(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    for _ in range(PASSWORD_RETRY_MAX + 1):
        assert state.process_password("f" * 40) is False
    assert state.process_password(answer(state)) is False
    assert state.is_done() is False


def test_failures_up_to_limit_still_allow_login(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    for _ in range(PASSWORD_RETRY_MAX):
        state.process_password("f" * 40)
    assert state.process_password(answer(state)) is True


def test_forced_check_does_not_change_state(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    assert state.process_password(answer(state), forced=True) is True
    assert state.is_done() is False
    assert state.process_password("1" * 40, forced=True) is False
    assert state.fail_count == 0


def test_reset_state_relocks_and_clears_fail_count(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    state.process_password("1" * 40)
    state.process_password(answer(state))
    assert state.fail_count == 1
    assert state.reset_state() is True
    assert state.is_done() is False
    assert state.fail_count == 0


def test_reset_state_on_open_device_stays_open(tmp_path):
    state = make_state(tmp_path, pass_contents=None)
    state.initialize()
    assert state.reset_state() is True
    assert state.is_done() is True


def test_generate_token_length(tmp_path):
    state = make_state(tmp_path)
    assert len(state.generate_token()) == AUTH_TOKEN_LEN


def test_created_token_authenticates(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    data = state.generate_token()
    state.create_token_file("device-a", data)
    assert [record.filename for record in state.tokens] == ["device-a"]
    record = state.tokens[0]
    assert record.data == data
    assert record.digest == sha1_hex(data + state.get_session().encode("ascii"))
    assert state.process_token(record.digest) is True
    assert state.is_done() is True


def test_unknown_token_fails(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    state.create_token_file("device-a", state.generate_token())
    assert state.process_token("a" * 40) is False
    assert state.token_fail_count == 1


def test_token_wrong_length_fails(tmp_path):
    state = make_state(tmp_path, pass_contents=None)
    state.initialize()
    assert state.process_token("abc") is False


def test_scan_skips_directories_and_empty_files(tmp_path):
    state = make_state(tmp_path)
    tokens = tmp_path / "tokens"
    tokens.mkdir()
    (tokens / "subdir").mkdir()
    (tokens / "empty").write_bytes(b"")
    (tokens / "real").write_bytes(b"\x01\x02\x03")
    state.initialize()
    assert [record.filename for record in state.tokens] == ["real"]


def test_delete_token_removes_file(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    state.create_token_file("device-a", state.generate_token())
    digest = state.tokens[0].digest
    state.delete_token_file(digest)
    assert state.tokens == []
    assert not (tmp_path / "tokens" / "device-a").exists()


def test_delete_unknown_token_raises(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    with pytest.raises(AuthError):
        state.delete_token_file("b" * 40)
    with pytest.raises(AuthError):
        state.delete_token_file("short")


def test_reset_clears_tokens_and_opens(tmp_path):
    state = make_state(tmp_path)
    state.initialize()
    state.create_token_file("device-a", state.generate_token())
    assert state.reset() is True
    assert state.tokens == []
    assert state.is_done() is True