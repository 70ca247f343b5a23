"""
CLI interface for the zettelkasten outliner.

Usage:
    zettel add "First thought" --at 1
    zettel add "A branch" --at "1a 3b"
    zettel tree
    zettel goto 1a5
    zettel edit 1a --content "Reworded"
    zettel rm 3b
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import Outliner
from .errors import ConflictError, ZettelError
from .logging_config import configure_quiet_mode, enable_debug_mode
from .render import render_tree, rows_to_json

# Quiet by default; ZETTEL_VERBOSE=1 turns on debug output
if os.environ.get("ZETTEL_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"zettel {version('zettel')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_store_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value


app = typer.Typer(
    name="zettel",
    help="Luhmann-style zettelkasten outliner.",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode=None,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-s",
        envvar="ZETTEL_STORE_PATH",
        help="Path to the store directory",
        callback=_store_callback,
        is_eager=True,
    )] = None,
):
    """Luhmann-style zettelkasten outliner."""
    if ctx.invoked_subcommand is None:
        tree()


def _get_outliner() -> Outliner:
    """Open the store, turning setup failures into a clean exit."""
    try:
        return Outliner(_store_override)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _note_id_at(zk: Outliner, address: str) -> str:
    note = zk.note_at(address)
    if note is None:
        _fail(f"No note at {address}")
    return note.id


@app.command()
def tree():
    """Show all notes as an indented tree."""
    with _get_outliner() as zk:
        rows = zk.rows()
        notes = {n.id: n for n in zk.store.notes()}
        if _get_json_output():
            typer.echo(rows_to_json(rows, notes))
        elif not rows:
            typer.echo("No notes yet. Add one with: zettel add \"text\" --at 1")
        else:
            typer.echo(render_tree(rows, notes, indent=zk.config.indent))


@app.command()
def add(
    content: Annotated[str, typer.Argument(help="Note text (markdown)")],
    at: Annotated[Optional[str], typer.Option(
        "--at", "-a",
        help="Space-separated addresses, e.g. \"1a 3b\" (default: configured default_address)",
    )] = None,
):
    """Add a note at one or more addresses."""
    with _get_outliner() as zk:
        address_text = at if at is not None else zk.default_address
        try:
            note_id = zk.add(address_text, content)
        except (ZettelError, ValueError) as e:
            _report(e)
        note = zk.get(note_id)
        if _get_json_output():
            typer.echo(json.dumps(note.to_dict()))
        else:
            typer.echo(f"Added {' '.join(note.addresses)}")


@app.command()
def edit(
    address: Annotated[str, typer.Argument(help="Any address of the note to edit")],
    at: Annotated[Optional[str], typer.Option(
        "--at", "-a", help="Replacement addresses (default: keep current)",
    )] = None,
    content: Annotated[Optional[str], typer.Option(
        "--content", "-c", help="Replacement text (default: keep current)",
    )] = None,
):
    """Change a note's addresses and/or content."""
    with _get_outliner() as zk:
        session = zk.open_edit(_note_id_at(zk, address), clicked_address=address)
        address_text = at if at is not None else session.address_text
        new_content = content if content is not None else session.original_content
        try:
            note = session.commit(address_text, new_content)
        except ZettelError as e:
            session.cancel()
            _report(e)
        if note is None:
            typer.echo("No addresses given, edit discarded")
        elif _get_json_output():
            typer.echo(json.dumps(note.to_dict()))
        else:
            typer.echo(f"Updated {' '.join(note.addresses)}")


@app.command("rm")
def remove(
    address: Annotated[str, typer.Argument(help="Any address of the note to delete")],
):
    """Delete the note holding an address (all of its addresses go with it)."""
    with _get_outliner() as zk:
        note_id = _note_id_at(zk, address)
        note = zk.get(note_id)
        try:
            zk.remove(note_id)
        except ZettelError as e:
            _report(e)
        typer.echo(f"Removed {' '.join(note.addresses)}")


@app.command()
def goto(
    address: Annotated[str, typer.Argument(help="Address, possibly partial")],
):
    """Show where an address lands: the note itself, its nearest ancestor, or its neighbor."""
    with _get_outliner() as zk:
        hint = zk.navigate(address)
        if hint is None:
            _fail("No notes yet")
        if _get_json_output():
            typer.echo(json.dumps({
                "address": hint.address,
                "match": hint.match,
                "id": hint.row.note_id,
            }))
        else:
            typer.echo(f"{hint.address} ({hint.match})")


@app.command()
def check(
    addresses: Annotated[str, typer.Argument(help="Space-separated addresses")],
):
    """Report which addresses are already taken. Exits 1 on any conflict."""
    with _get_outliner() as zk:
        conflicts = zk.check(addresses)
        if _get_json_output():
            typer.echo(json.dumps([
                {"address": c.address, "id": c.owner.id} for c in conflicts
            ]))
        else:
            for c in conflicts:
                typer.echo(f'"{c.address}" is already taken')
            if not conflicts:
                typer.echo("All free")
        if conflicts:
            raise typer.Exit(1)


@app.command("config")
def show_config():
    """Show the store location and settings."""
    with _get_outliner() as zk:
        cfg = zk.config
        settings = {
            "store": str(cfg.path),
            "config": str(cfg.config_path),
            "notes": str(cfg.notes_path),
            "default_address": cfg.default_address,
            "scroll_debounce_ms": cfg.scroll_debounce_ms,
            "indent": cfg.indent,
        }
        if _get_json_output():
            typer.echo(json.dumps(settings, indent=2))
        else:
            for key, value in settings.items():
                typer.echo(f"{key}: {value}")


def _report(e: Exception) -> None:
    """Print a user-facing error and exit 1. Conflicts also name the holder."""
    typer.echo(f"Error: {e}", err=True)
    if isinstance(e, ConflictError) and e.owner_id:
        typer.echo(f"Held by {e.owner_id}", err=True)
    raise typer.Exit(1)


def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="zettel CLI", store_path=_store_override)
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
