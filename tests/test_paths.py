from pathlib import Path

from chatnet_ipc.paths import resolve_paths


def test_layout_under_home():
    p = resolve_paths("/home/alice")

    assert p.config_dir == Path("/home/alice/.config")
    assert p.ipc_dir == Path("/home/alice/.config/chatnet-client")
    assert p.document_path == p.ipc_dir / "ipc.json"
    assert p.lock_path == p.ipc_dir / "LOCK"
    assert p.unlock_path == p.ipc_dir / "UNLOCK"
    assert p.client_up_path == p.ipc_dir / "CLIENTUP"
    assert p.latest_log_path == p.ipc_dir / "log-latest.txt"
    assert p.previous_log_path == p.ipc_dir / "log.0.txt"


def test_custom_subdir():
    p = resolve_paths("/home/bob", "chatnet-dev")
    assert p.ipc_dir == Path("/home/bob/.config/chatnet-dev")


def test_deterministic_and_pure(tmp_path):
    home = tmp_path / "does-not-exist"

    assert resolve_paths(home) == resolve_paths(str(home))
    assert not home.exists()
