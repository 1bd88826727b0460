"""chatnet-ipc CLI: inspect and drive the client's file-backed IPC store.

Commands:
    chatnet-ipc init [--no-seed]     reset the ipc dir and seed initial state
    chatnet-ipc get KEY              print one value as JSON
    chatnet-ipc put KEY JSON         set one value (JSON text)
    chatnet-ipc show                 dump the whole document
    chatnet-ipc lock | unlock        drive the peer lock by hand
    chatnet-ipc status               lock state, presence, session flag
    chatnet-ipc paths                print every well-known location
    chatnet-ipc end-session          set userstate=false

A corrupted ipc.json is fatal: the diagnostic is logged and the process exits
with status 4.
"""

from __future__ import annotations

import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any

import click

from chatnet_ipc.bootstrap import bootstrap, ensure_dirs
from chatnet_ipc.config import IpcConfig, load_config
from chatnet_ipc.document import IpcDocumentStore
from chatnet_ipc.errors import IpcError, MalformedDocumentError
from chatnet_ipc.logs import rotate_logs, setup_logging
from chatnet_ipc.presence import client_is_up, end_session, session_active

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

logger = logging.getLogger("chatnet_ipc.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _IpcGroup(click.Group):
    """Top-level caller: turns store errors into exits."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except MalformedDocumentError as exc:
            logger.error("json parse failed for string:\n%s", exc.content)
            logger.debug("stack trace:\n%s", exc.stack)
            ctx.exit(exc.exit_code)
        except IpcError as exc:
            raise click.ClickException(str(exc)) from exc


def _load_cfg(home: str | None) -> IpcConfig:
    try:
        return load_config(home)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _store(cfg: IpcConfig) -> IpcDocumentStore:
    return IpcDocumentStore.from_config(cfg)


def _maybe_locked(store: IpcDocumentStore, no_lock: bool) -> AbstractContextManager[None]:
    return contextlib.nullcontext() if no_lock else store.locked()


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(cls=_IpcGroup)
@click.version_option(package_name="chatnet-ipc")
@click.option("--home", default=None, help="Home directory to resolve paths from (default: $HOME)")
@click.pass_context
def cli(ctx: click.Context, home: str | None) -> None:
    """chatnet-ipc: file-backed state shared with the socket peer."""
    cfg = _load_cfg(home)
    ctx.obj = cfg
    # init rotates the log before opening it
    if ctx.invoked_subcommand != "init":
        setup_logging(cfg)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--no-seed", is_flag=True, help="Only reset the layout, leave ipc.json as {}")
@click.pass_obj
def init(cfg: IpcConfig, no_seed: bool) -> None:
    """Reset the ipc dir to a clean layout and seed the initial state."""
    ensure_dirs(cfg.paths)
    rotate_logs(cfg.paths)
    setup_logging(cfg)

    store = bootstrap(cfg, seed=not no_seed)
    click.echo(f"IPC dir  : {cfg.paths.ipc_dir}")
    if not no_seed:
        click.echo(f"Username : {store.get('username')}")


# ---------------------------------------------------------------------------
# get / put / show
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("key")
@click.option("--no-lock", is_flag=True, help="Read without taking the peer lock")
@click.pass_obj
def get(cfg: IpcConfig, key: str, no_lock: bool) -> None:
    """Print the value stored under KEY as JSON (null if absent)."""
    store = _store(cfg)
    with _maybe_locked(store, no_lock):
        value = store.get(key)
    click.echo(json.dumps(value))


@cli.command()
@click.argument("key")
@click.argument("value")
@click.option("--no-lock", is_flag=True, help="Write without taking the peer lock")
@click.pass_obj
def put(cfg: IpcConfig, key: str, value: str, no_lock: bool) -> None:
    """Store VALUE (JSON text, e.g. 'true' or '[]') under KEY."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="VALUE") from exc

    store = _store(cfg)
    with _maybe_locked(store, no_lock):
        store.put(key, parsed)


@cli.command()
@click.pass_obj
def show(cfg: IpcConfig) -> None:
    """Dump the whole ipc.json document."""
    store = _store(cfg)
    with store.locked():
        doc = store.load()
    click.echo(json.dumps(doc, indent=2))


# ---------------------------------------------------------------------------
# lock / unlock
# ---------------------------------------------------------------------------


@cli.command("lock")
@click.pass_obj
def lock_cmd(cfg: IpcConfig) -> None:
    """Take the peer lock (rename UNLOCK -> LOCK)."""
    _store(cfg).gate.acquire()
    click.echo("locked")


@cli.command("unlock")
@click.pass_obj
def unlock_cmd(cfg: IpcConfig) -> None:
    """Give the peer lock back (rename LOCK -> UNLOCK)."""
    _store(cfg).gate.release()
    click.echo("unlocked")


# ---------------------------------------------------------------------------
# status / paths / end-session
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_obj
def status(cfg: IpcConfig) -> None:
    """Show lock state, client presence and the session flag."""
    store = _store(cfg)
    click.echo(f"IPC dir   : {cfg.paths.ipc_dir}")
    click.echo(f"Lock      : {store.gate.state().value}")
    click.echo(f"Client up : {'yes' if client_is_up(cfg.paths) else 'no'}")
    if not cfg.paths.document_path.exists():
        click.echo("Document  : missing (run `chatnet-ipc init`)")
        return
    click.echo(f"Session   : {'active' if session_active(store) else 'ended'}")
    click.echo(f"Username  : {store.get('username') or '-'}")


@cli.command()
@click.pass_obj
def paths(cfg: IpcConfig) -> None:
    """Print every well-known location."""
    p = cfg.paths
    rows = [
        ("config dir", p.config_dir),
        ("ipc dir", p.ipc_dir),
        ("document", p.document_path),
        ("lock", p.lock_path),
        ("unlock", p.unlock_path),
        ("client up", p.client_up_path),
        ("settings", p.settings_path),
        ("log (latest)", p.latest_log_path),
        ("log (previous)", p.previous_log_path),
    ]
    for label, path in rows:
        click.echo(f"{label:<15}: {path}")


@cli.command("end-session")
@click.pass_obj
def end_session_cmd(cfg: IpcConfig) -> None:
    """Set userstate=false so the client loop winds down."""
    end_session(_store(cfg))
    click.echo("session ended")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
