#!/usr/bin/env python3
"""Contact Directory — terminal client.  Run with:  python3 start.py"""
import sys
import os
from pathlib import Path

script_dir = os.path.dirname(os.path.abspath(__file__))
src_dir    = os.path.join(script_dir, "src")

sys.path.insert(0, src_dir)
os.environ["PYTHONPATH"] = src_dir + os.pathsep + os.environ.get("PYTHONPATH", "")
os.chdir(script_dir)

# ── First-run detection ───────────────────────────────────────────────────────
# Show a welcome message if local/contacts.conf doesn't exist yet
from contact_directory.config import is_first_run

def _welcome() -> None:
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console()
    console.print()
    console.print(Panel(
        Text.from_markup(
            "[bold #4d9fff]Welcome to Contact Directory[/]\n\n"
            "Settings live in [bold]local/contacts.conf[/]:\n\n"
            "  [bold #4d9fff]base_url[/]       where the contacts server runs\n"
            "  [dim]           default http://localhost:8080[/]\n\n"
            "  [bold #3ecf8e]exports/[/]       CSV exports and downloaded pictures\n\n"
            "[dim]Sign in first with [bold]contacts login[/] to add and edit your own contacts.[/]"
        ),
        title=Text("  Getting Started  ", style="dim #546075"),
        title_align="left",
        border_style="#2a3347",
        padding=(1, 2),
    ))
    console.print()
    console.input("[dim #546075]  Press Enter to continue…[/dim #546075]")

if is_first_run(Path(script_dir)):
    _welcome()

from contact_directory.cli import app
app(args=["shell"])
