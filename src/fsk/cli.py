#!/usr/bin/env python3
"""
fsk: Fast Simple Knowledge

Usage:
    fsk write linux/kernel        # Create or edit a note in $EDITOR
    fsk get linux/kernel          # Print a note
    fsk search "scheduler"        # Search titles, then contents
    fsk list                      # Browse all notes as a tree
"""

from __future__ import annotations

import difflib
import json
import sys
from typing import Any, NoReturn

import click
from click.exceptions import ClickException, UsageError

from . import __version__ as FSK_VERSION
from ._logging import configure_logging
from .errors import ErrorCode, FskError
from .models import ListingNode

RULE_WIDTH = 40


def output(data: Any) -> None:
    """Output data as indented JSON."""
    click.echo(json.dumps(data, indent=2, default=str))


def _rule() -> str:
    return click.style("─" * RULE_WIDTH, dim=True)


def _handle_error(ctx: click.Context, error: FskError) -> NoReturn:
    """Report an FskError on stderr and exit with its exit code.

    With --json-errors the error is written as a single JSON object.
    """
    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if json_errors:
        click.echo(error.to_json(), err=True)
    else:
        label = "Warning" if error.code is ErrorCode.EDITOR_EXIT_ERROR else "Error"
        click.echo(f"{click.style(label + ':', fg='red', bold=True)} {error.message}", err=True)
        suggestion = error.details.get("suggestion")
        if suggestion:
            click.echo(f"Hint: {suggestion}", err=True)

    sys.exit(error.exit_code)


def _format_click_error_json(error: ClickException) -> str:
    code = "USAGE_ERROR" if isinstance(error, UsageError) else "CLI_ERROR"
    return json.dumps({"error": code, "message": error.format_message()})


# ─────────────────────────────────────────────────────────────────────────────
# Command Group
# ─────────────────────────────────────────────────────────────────────────────


class FskGroup(click.Group):
    """Click group with command aliases, typo suggestions and central error handling."""

    ALIASES = {
        "new": "write",
        "edit": "write",
        "cat": "get",
        "find": "search",
        "ls": "list",
    }

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        """Override to suggest similar commands for typos."""
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            cmd_name = args[0] if args else ""
            if cmd_name and "No such command" in str(e):
                candidates = [*self.list_commands(ctx), *self.ALIASES]
                matches = difflib.get_close_matches(cmd_name, candidates, n=1, cutoff=0.6)
                if matches:
                    raise UsageError(
                        f"No such command '{cmd_name}'. Did you mean '{matches[0]}'?", ctx
                    ) from e
            raise

    def invoke(self, ctx):
        """Run the subcommand, turning FskError into a message and exit code."""
        try:
            return super().invoke(ctx)
        except FskError as e:
            _handle_error(ctx, e)
        except ClickException as e:
            if ctx.params.get("json_errors"):
                click.echo(_format_click_error_json(e), err=True)
                sys.exit(e.exit_code)
            raise


@click.group(cls=FskGroup)
@click.version_option(version=FSK_VERSION, prog_name="fsk")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_errors: bool):
    """fsk: manage your Markdown notes with speed and simplicity.

    Notes live as plain files under ~/.fsk/db/ (override with FSK_DB_ROOT).
    A title like "linux/kernel" is stored at <db>/linux/kernel.md.

    \b
    Quick start:
      fsk write linux/kernel        # Create or edit (aliases: new, edit)
      fsk get linux/kernel          # Print a note (alias: cat)
      fsk search scheduler          # Search titles and content (alias: find)
      fsk list                      # Tree of all notes (alias: ls)
    """
    from .config import get_db_root, get_editor_command
    from .storage import Storage

    configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["json_errors"] = json_errors
    ctx.obj["storage"] = Storage(get_db_root())
    ctx.obj["editor"] = get_editor_command()


# ─────────────────────────────────────────────────────────────────────────────
# Write Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("title")
@click.pass_context
def write(ctx: click.Context, title: str):
    """Create or edit a note in $EDITOR (aliases: new, edit).

    Missing directories are created first. The editor defaults to nano
    when $EDITOR is not set.

    \b
    Examples:
      fsk write todo
      fsk new linux/kernel
      EDITOR="code --wait" fsk edit projects/fsk
    """
    from .editor import EditorLauncher

    launcher = EditorLauncher(ctx.obj["storage"], ctx.obj["editor"])
    if launcher.edit(title):
        click.echo(f"{click.style('✔', fg='green')} Note '{title}' saved.")
    else:
        click.echo(click.style(f"Note '{title}' was not created.", dim=True))


# ─────────────────────────────────────────────────────────────────────────────
# Get Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("title")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def get(ctx: click.Context, title: str, as_json: bool):
    """Print the raw content of a note (alias: cat).

    \b
    Examples:
      fsk get linux/kernel
      fsk cat todo --json
    """
    storage = ctx.obj["storage"]
    content = storage.read(title)

    if as_json:
        output({"title": title, "path": str(storage.resolve(title)), "content": content})
    elif not content.strip():
        click.echo(click.style("Note is empty.", dim=True), err=True)
    else:
        # color=True keeps escape sequences in the note when stdout is not a terminal
        click.echo(content, nl=not content.endswith("\n"), color=True)


# ─────────────────────────────────────────────────────────────────────────────
# Search Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("query")
@click.option("--terse", is_flag=True, help="Output titles only (one per line)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search(ctx: click.Context, query: str, terse: bool, as_json: bool):
    """Search note titles and contents for a keyword (alias: find).

    Matching is a case-insensitive substring test. Title matches are listed
    first; notes whose title matches are not opened.

    \b
    Examples:
      fsk search kernel
      fsk find "page cache" --terse
    """
    results = ctx.obj["storage"].search(query)

    if as_json:
        output([r.model_dump() for r in results])
        return

    if terse:
        for r in results:
            click.echo(r.title, color=True)
        return

    if not results:
        click.echo(f"{click.style('No results found for', fg='red')} '{query}'")
        return

    click.echo(f"{click.style('Found matches for', fg='cyan')} '{query}':")
    click.echo(_rule())
    for r in results:
        if r.is_title_match:
            click.echo(f"{click.style('#', fg='blue')} {click.style(r.title, bold=True)}")
        else:
            click.echo(f"{click.style('~', fg='green')} {r.title}")
            if r.preview:
                click.echo(f"   {click.style('↳', dim=True)} ", nl=False)
                click.echo(r.preview, color=True)
    click.echo(_rule())
    click.echo(f"{len(results)} result(s) found")


# ─────────────────────────────────────────────────────────────────────────────
# List Command
# ─────────────────────────────────────────────────────────────────────────────


def format_tree(nodes: list[ListingNode], prefix: str = "") -> str:
    """Format listing nodes as an ASCII tree."""
    lines = []
    for i, node in enumerate(nodes):
        is_last = i == len(nodes) - 1
        connector = "└── " if is_last else "├── "

        if node.kind == "directory":
            lines.append(f"{prefix}{connector}{click.style(node.name + '/', fg='blue', bold=True)}")
            extension = "    " if is_last else "│   "
            lines.append(format_tree(node.children, prefix + extension))
        else:
            lines.append(f"{prefix}{connector}{node.name}")

    return "\n".join(line for line in lines if line)


@cli.command("list")
@click.option("--flat", is_flag=True, help="Print one title per line instead of a tree")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(ctx: click.Context, flat: bool, as_json: bool):
    """List every note as a sorted tree (alias: ls).

    \b
    Examples:
      fsk list
      fsk ls --flat
    """
    tree = ctx.obj["storage"].list()

    if as_json:
        output(tree.model_dump())
        return

    if flat:
        for title in tree.titles():
            click.echo(title)
        return

    if tree.is_empty:
        click.echo(click.style("No notes found in database.", dim=True))
        return

    click.echo(click.style("Your Knowledge Base:", bold=True))
    click.echo(format_tree(tree.children))
    click.echo(f"\n{tree.directories} directories, {tree.notes} notes")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
