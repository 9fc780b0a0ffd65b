"""
PathSync CLI Main Entry Point.

Synchronizes JSON store files through in-memory backends. A store file is
a JSON object mapping slash-separated paths to items, e.g.
``{"folder/item1": "store me"}``.
"""

from __future__ import annotations

import json
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any

import click
import humanize
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pathsync import __version__
from pathsync.backends import MemoryBackend
from pathsync.core.config import PathSyncConfig, load_config
from pathsync.core.logging import setup_logging
from pathsync.core.paths import Depth, FilePath, FolderPath, PathError
from pathsync.sync import SyncAbortedError, SyncStatus, run_sync

console = Console()

DEPTH_CHOICES = click.Choice([depth.value for depth in Depth], case_sensitive=False)


def load_store(path: Path, name: str) -> MemoryBackend[Any]:
    """Load a JSON store file into a memory backend."""
    if not path.exists():
        return MemoryBackend(name=name)
    with open(path) as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise click.ClickException(f"{path}: store file must contain a JSON object")
    if any(item is None for item in data.values()):
        raise click.ClickException(f"{path}: null items are not allowed")
    return MemoryBackend.from_dict(data, name=name)


def save_store(path: Path, backend: MemoryBackend[Any]) -> None:
    """Write a memory backend back to a JSON store file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as handle:
        json.dump(backend.to_dict(), handle, indent=2)


def resolve_scope(ctx: click.Context, depth: str | None, scope: str | None) -> tuple[Depth, FolderPath]:
    config: PathSyncConfig = ctx.obj["config"]
    resolved_depth = Depth.from_string(depth) if depth else config.sync.depth
    resolved_scope = FolderPath.parse(scope) if scope is not None else config.sync.scope
    return resolved_depth, resolved_scope


def entries_table(title: str, entries: list[tuple[FilePath, Any]]) -> Table:
    table = Table(title=title)
    table.add_column("Path", style="cyan")
    table.add_column("Item", style="white")
    for path, item in sorted(entries, key=lambda entry: entry[0]):
        table.add_row(str(path), json.dumps(item))
    return table


def print_status(status: SyncStatus) -> None:
    summary = status.summary
    table = Table(title=f"Sync {status.scope} ({status.depth})")
    table.add_column("Action", style="cyan")
    table.add_column("Paths", style="green", justify="right")
    table.add_row("Pulled (remote → local)", humanize.intcomma(summary.pulled))
    table.add_row("Pushed (local → remote)", humanize.intcomma(summary.pushed))
    table.add_row("Overwritten (remote wins)", humanize.intcomma(summary.overwritten))
    table.add_row("Unchanged", humanize.intcomma(summary.unchanged))
    table.add_row("Vanished", humanize.intcomma(summary.vanished))
    table.add_row("Errors", humanize.intcomma(summary.errors), style="red" if summary.errors else None)
    console.print(table)

    duration = status.duration_seconds or 0.0
    took = humanize.precisedelta(timedelta(seconds=duration), minimum_unit="milliseconds")
    if status.success:
        console.print(f"[green]Synchronized {status.candidates} paths in {took}[/green]")
    else:
        console.print(f"[yellow]Completed with {len(status.errors)} errors in {took}[/yellow]")
        for error in status.errors:
            console.print(f"  [red]{error}[/red]")


@click.group()
@click.version_option(version=__version__, prog_name="PathSync")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """
    PathSync - Two-way synchronization of path-addressed stores.
    """
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = PathSyncConfig.load(config)
    else:
        ctx.obj["config"] = load_config()

    setup_logging(ctx.obj["config"].logging)

    ctx.obj["json_output"] = json_output
    ctx.obj["quiet"] = quiet


@cli.command("sync")
@click.argument("local", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("remote", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--scope", "-s", help="Folder to synchronize (default: configured scope)")
@click.option("--depth", "-d", type=DEPTH_CHOICES, help="simple or recursive")
@click.option(
    "--policy",
    type=click.Choice(["abort", "continue"]),
    help="What to do when a backend operation fails",
)
@click.option("--dry-run", is_flag=True, help="Do not write the reconciled stores back")
@click.pass_context
def sync_stores(
    ctx: click.Context,
    local: Path,
    remote: Path,
    scope: str | None,
    depth: str | None,
    policy: str | None,
    dry_run: bool,
) -> None:
    """Synchronize the LOCAL and REMOTE store files."""
    config: PathSyncConfig = ctx.obj["config"]
    json_output = ctx.obj.get("json_output", False)
    quiet = ctx.obj.get("quiet", False)

    sync_config = config.sync
    if policy:
        sync_config = sync_config.model_copy(update={"failure_policy": policy})

    try:
        local_backend = load_store(local, name="local")
        remote_backend = load_store(remote, name="remote")
    except PathError as e:
        console.print(f"[red]Invalid store path: {e}[/red]")
        sys.exit(1)

    resolved_depth, resolved_scope = resolve_scope(ctx, depth, scope)

    try:
        status = run_sync(local_backend, remote_backend, resolved_depth, resolved_scope, sync_config)
    except SyncAbortedError as e:
        if json_output and e.status is not None:
            click.echo(json.dumps(e.status.to_dict(), indent=2))
        else:
            console.print(f"[red]Sync aborted: {e}[/red]")
        sys.exit(1)

    if not dry_run:
        save_store(local, local_backend)
        save_store(remote, remote_backend)

    if json_output:
        click.echo(json.dumps(status.to_dict(), indent=2))
        return

    if not quiet:
        print_status(status)
        if dry_run:
            console.print("[yellow]Dry run: store files left untouched[/yellow]")


@cli.command("list")
@click.argument("store", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--scope", "-s", help="Folder to list (default: configured scope)")
@click.option("--depth", "-d", type=DEPTH_CHOICES, help="simple or recursive")
@click.pass_context
def list_store(ctx: click.Context, store: Path, scope: str | None, depth: str | None) -> None:
    """List the entries of a STORE file within a scope."""
    json_output = ctx.obj.get("json_output", False)

    try:
        backend = load_store(store, name=store.stem)
    except PathError as e:
        console.print(f"[red]Invalid store path: {e}[/red]")
        sys.exit(1)

    resolved_depth, resolved_scope = resolve_scope(ctx, depth, scope)
    entries = backend.list_blocking(resolved_depth, resolved_scope)

    if json_output:
        data = {path.key: item for path, item in sorted(entries, key=lambda e: e[0])}
        click.echo(json.dumps(data, indent=2))
        return

    console.print(entries_table(f"{store.name}: {resolved_scope} ({resolved_depth.value})", entries))


@cli.command("demo")
@click.pass_context
def demo(ctx: click.Context) -> None:
    """Synchronize two small in-memory stores and show the result."""
    json_output = ctx.obj.get("json_output", False)

    folder = FolderPath.of(["folder"])
    local: MemoryBackend[str] = MemoryBackend(name="local")
    remote: MemoryBackend[str] = MemoryBackend(name="remote")
    local.insert_blocking(FilePath(folder, "item1"), "store me")
    remote.insert_blocking(FilePath(folder, "item2"), "store me, too")

    status = run_sync(local, remote, Depth.RECURSIVE, FolderPath.root())

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": status.to_dict(),
                    "local": local.to_dict(),
                    "remote": remote.to_dict(),
                },
                indent=2,
            )
        )
        return

    console.print(Panel("Local and remote after one recursive pass from the root", title="Demo"))
    console.print(entries_table("local", local.list_blocking(Depth.SIMPLE, folder)))
    console.print(entries_table("remote", remote.list_blocking(Depth.SIMPLE, folder)))


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
