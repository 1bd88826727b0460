"""chatnet-ipc command line, driven through click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from chatnet_ipc.cli import cli
from chatnet_ipc.errors import EXIT_MALFORMED_DOCUMENT
from chatnet_ipc.lock import LockGate, LockState
from chatnet_ipc.paths import resolve_paths


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def run(runner, home, monkeypatch):
    monkeypatch.setenv("CHATNET_IPC_TIMEOUT", "0.1")

    def _run(*args):
        return runner.invoke(cli, ["--home", str(home), *args])

    return _run


@pytest.fixture
def initialized(run):
    result = run("init")
    assert result.exit_code == 0, result.output
    return result


def test_init_seeds_state(initialized, home):
    paths = resolve_paths(home)

    assert "Username : " in initialized.output
    doc = json.loads(paths.document_path.read_text())
    assert doc["userstate"] is True
    assert doc["sendmsgbucket"] == []
    assert doc["recvmsgbucket"] == []
    assert doc["username"] in initialized.output
    assert LockGate(paths).state() is LockState.UNLOCKED


def test_init_no_seed(run, home):
    result = run("init", "--no-seed")

    assert result.exit_code == 0, result.output
    assert resolve_paths(home).document_path.read_text() == "{}"


def test_init_rotates_log(run, home):
    paths = resolve_paths(home)
    assert run("init").exit_code == 0
    paths.latest_log_path.write_text("first run\n")

    assert run("init").exit_code == 0

    assert paths.previous_log_path.read_text() == "first run\n"


def test_get_and_put(initialized, run):
    result = run("put", "sendmsgbucket", '[{"type": "message", "data": "hi"}]')
    assert result.exit_code == 0, result.output

    result = run("get", "sendmsgbucket")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"type": "message", "data": "hi"}]


def test_get_missing_key_prints_null(initialized, run):
    result = run("get", "nothing-here")
    assert result.exit_code == 0
    assert result.output.strip() == "null"


def test_get_before_init_prints_null_without_lock(run):
    result = run("get", "userstate", "--no-lock")
    assert result.exit_code == 0
    assert result.output.strip() == "null"


def test_get_before_init_times_out_on_lock(run):
    result = run("get", "userstate")
    assert result.exit_code == 1
    assert "database is locked" in result.output


def test_put_rejects_invalid_json(initialized, run):
    result = run("put", "userstate", "yes please")
    assert result.exit_code == 2
    assert "not valid JSON" in result.output


def test_corrupt_document_exits_with_fatal_status(initialized, run, home):
    paths = resolve_paths(home)
    paths.document_path.write_text("this is not json")

    result = run("get", "userstate")

    assert result.exit_code == EXIT_MALFORMED_DOCUMENT
    assert LockGate(paths).state() is LockState.UNLOCKED
    assert "json parse failed" in result.stderr
    assert "this is not json" in result.stderr
    assert result.stdout == ""


def test_successful_commands_are_silent_on_stderr(initialized, run):
    put = run("put", "recvmsgbucket", "[]")
    got = run("get", "userstate")

    assert put.exit_code == 0, put.output
    assert got.exit_code == 0, got.output
    assert put.stderr == ""
    assert got.stderr == ""
    assert put.stdout == ""


def test_lock_unlock(initialized, run, home):
    paths = resolve_paths(home)

    assert run("lock").exit_code == 0
    assert LockGate(paths).state() is LockState.LOCKED

    again = run("lock")
    assert again.exit_code == 1
    assert "cannot acquire" in again.output

    assert run("unlock").exit_code == 0
    assert LockGate(paths).state() is LockState.UNLOCKED

    again = run("unlock")
    assert again.exit_code == 1
    assert "cannot release" in again.output


def test_put_blocked_while_locked(initialized, run):
    assert run("lock").exit_code == 0

    result = run("put", "userstate", "false")
    assert result.exit_code == 1

    assert run("unlock").exit_code == 0
    assert json.loads(run("get", "userstate").output) is True


def test_show(initialized, run):
    result = run("show")
    assert result.exit_code == 0
    assert set(json.loads(result.output)) == {"userstate", "sendmsgbucket", "recvmsgbucket", "username"}


def test_status(initialized, run):
    result = run("status")

    assert result.exit_code == 0, result.output
    assert "Lock      : unlocked" in result.output
    assert "Client up : no" in result.output
    assert "Session   : active" in result.output


def test_status_before_init(run):
    result = run("status")

    assert result.exit_code == 0, result.output
    assert "uninitialized" in result.output
    assert "missing" in result.output


def test_end_session(initialized, run):
    assert run("end-session").exit_code == 0
    assert json.loads(run("get", "userstate").output) is False
    assert "Session   : ended" in run("status").output


def test_paths(run, home):
    result = run("paths")

    assert result.exit_code == 0
    assert str(resolve_paths(home).document_path) in result.output
