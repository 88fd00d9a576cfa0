# src/civicboard/cli.py
"""
CivicBoard Command Line Interface (CLI).

This module implements a terminal front end over the dashboard state layer
using `typer` and `rich`. It renders the same snapshots the web UI reads and
drives the same store actions.

Features
--------
- **Inspect**: `show` and `modules` print the persisted state.
- **Session**: an interactive loop over one live dashboard, so undo/redo act
  on real in-memory history (history itself is never persisted).
- **Clear**: remove all locally stored state.

Usage
-----
    $ civicboard show
    $ civicboard session --state-dir /tmp/board
    $ civicboard clear --yes
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from civicboard.core.settings import load_settings
from civicboard.core.storage import FileStorage
from civicboard.stores import Dashboard, build_dashboard

# Ensure env vars (like CIVICBOARD_STATE_DIR) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="CivicBoard: inspect and edit local dashboard state.",
    rich_markup_mode="markdown",
)
console = Console()

StateDirOption = Annotated[
    Path | None,
    typer.Option(
        "--state-dir",
        "-d",
        file_okay=False,
        dir_okay=True,
        help="Directory holding persisted state (defaults to CIVICBOARD_STATE_DIR).",
    ),
]

SESSION_HELP = """\
search [text]          set (or clear) the search query
category <label|all>   filter by category
mode all|favorites     switch view mode
fav <source-id>        toggle a favorite
density full|compact   card density
window <hours>         velocity window
save <name>            save current filters
apply <name>           apply saved filters
toggle <module-id>     enable/disable a module
priority <id> <n>      set module priority
vote <id> up|down      record a local vote
privacy                toggle privacy mode
undo / redo            across all stores
show / modules         print state
quit                   leave the session"""


# --------------------------------------------------------------------------- #
# Helpers: Wiring & Rendering
# --------------------------------------------------------------------------- #


def _open_dashboard(state_dir: Path | None) -> Dashboard:
    """Helper: Build a dashboard over file storage in ``state_dir``."""
    settings = load_settings()
    return build_dashboard(settings, storage=FileStorage(state_dir or settings.state_dir))


def _render_view(board: Dashboard) -> None:
    v = board.view.present
    table = Table(title="View", show_header=False, title_justify="left")
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("search", repr(v.search_query))
    table.add_row("category", v.selected_category or "(all)")
    table.add_row("mode", v.view_mode.value)
    table.add_row("density", v.density.value)
    table.add_row("window", f"{v.velocity_window}h")
    table.add_row("favorites", ", ".join(sorted(v.favorites)) or "-")
    table.add_row("saved", ", ".join(q.name for q in v.saved_queries) or "-")
    console.print(table)


def _render_modules(board: Dashboard) -> None:
    table = Table(title="Modules", title_justify="left")
    table.add_column("id", style="cyan")
    table.add_column("name")
    table.add_column("priority", justify="right")
    table.add_column("enabled", justify="center")
    for module in board.modules.ordered():
        mark = "[green]on[/green]" if module.enabled else "[red]off[/red]"
        table.add_row(module.id, module.name, str(module.priority), mark)
    console.print(table)


def _render_privacy(board: Dashboard) -> None:
    p = board.privacy.present
    console.print(f"[bold]Privacy mode:[/bold] {'on' if p.privacy_mode else 'off'}")
    ids = sorted(set(p.local_upvotes) | set(p.local_downvotes))
    for sid in ids:
        up, down = board.privacy.local_votes(sid)
        console.print(f"  {sid}: +{up} / -{down}")


def _render_history(board: Dashboard) -> None:
    parts = [f"{store.name}={store.status.value}" for store in (board.view, board.modules, board.privacy)]
    console.print(f"[dim]{'  '.join(parts)}[/dim]")


def _dispatch(board: Dashboard, line: str) -> bool:
    """
    Helper: Run one session command.

    Returns
    -------
    bool
        ``False`` when the session should end.
    """
    try:
        words = shlex.split(line)
    except ValueError as e:
        console.print(f"[red]Parse error:[/red] {e}")
        return True
    if not words:
        return True

    cmd, args = words[0].lower(), words[1:]
    ok: bool | None = None

    if cmd in ("quit", "exit"):
        return False
    if cmd == "help":
        console.print(SESSION_HELP)
    elif cmd == "show":
        _render_view(board)
        _render_modules(board)
        _render_privacy(board)
        _render_history(board)
    elif cmd == "modules":
        _render_modules(board)
    elif cmd == "search":
        ok = board.view.set_search_query(" ".join(args))
    elif cmd == "category" and args:
        label = " ".join(args)
        ok = board.view.set_selected_category(None if label == "all" else label)
    elif cmd == "mode" and len(args) == 1:
        ok = board.view.set_view_mode(args[0])
    elif cmd == "fav" and len(args) == 1:
        ok = board.view.toggle_favorite(args[0])
    elif cmd == "density" and len(args) == 1:
        ok = board.view.set_density(args[0])
    elif cmd == "window" and len(args) == 1 and args[0].isdigit():
        ok = board.view.set_velocity_window(int(args[0]))
    elif cmd == "save" and args:
        ok = board.view.save_query(" ".join(args))
    elif cmd == "apply" and args:
        ok = board.view.apply_saved_query(" ".join(args))
    elif cmd == "toggle" and len(args) == 1:
        ok = board.modules.toggle_module(args[0])
    elif cmd == "priority" and len(args) == 2 and args[1].lstrip("-").isdigit():
        ok = board.modules.set_priority(args[0], int(args[1]))
    elif cmd == "vote" and len(args) == 2:
        ok = board.privacy.increment_local_vote(args[0], args[1])
    elif cmd == "privacy":
        ok = board.privacy.toggle_privacy_mode()
    elif cmd == "undo":
        n = board.coordinator.undo_any()
        console.print(f"Undid {n} store(s)" if n else "[dim]Nothing to undo[/dim]")
    elif cmd == "redo":
        n = board.coordinator.redo_any()
        console.print(f"Redid {n} store(s)" if n else "[dim]Nothing to redo[/dim]")
    else:
        console.print(f"[red]Unknown or malformed command:[/red] {line!r} (try 'help')")

    if ok is True:
        console.print("[green]ok[/green]")
    elif ok is False:
        console.print("[yellow]Rejected[/yellow]")
    return True


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def show(state_dir: StateDirOption = None) -> None:
    """Print the persisted view, module and privacy state."""
    board = _open_dashboard(state_dir)
    _render_view(board)
    _render_modules(board)
    _render_privacy(board)


@app.command()  # type: ignore[misc]
def modules(state_dir: StateDirOption = None) -> None:
    """Print the module catalog in display order."""
    _render_modules(_open_dashboard(state_dir))


@app.command()  # type: ignore[misc]
def session(state_dir: StateDirOption = None) -> None:
    """
    Start an interactive session over one live dashboard.

    Every accepted command is persisted immediately; undo/redo work for the
    lifetime of the session.
    """
    board = _open_dashboard(state_dir)
    console.print(
        Panel.fit(
            "[bold cyan]CivicBoard session[/bold cyan]\nType 'help' for commands, 'quit' to leave.",
            border_style="cyan",
        )
    )
    while True:
        try:
            line = Prompt.ask("[bold]civicboard[/bold]", console=console)
        except (EOFError, KeyboardInterrupt):
            break
        if not _dispatch(board, line):
            break
    console.print("[dim]Bye.[/dim]")


@app.command()  # type: ignore[misc]
def clear(
    state_dir: StateDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt."),
    ] = False,
) -> None:
    """Delete all locally stored favorites, settings and votes."""
    if not yes and not Confirm.ask("Delete all local dashboard data?", default=False):
        console.print("[dim]Aborted.[/dim]")
        raise typer.Exit(code=1)
    _open_dashboard(state_dir).clear_local_data()
    console.print("[bold green]Local data cleared.[/bold green]")


if __name__ == "__main__":
    app()
