from __future__ import annotations

import inspect
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from .app import ContactsApp
from .console import header_renderable
from .form import FormState
from .gateway import PictureFile
from .render import CardList, DELETE, EDIT


def _banner(console: Console) -> None:
    console.print()
    console.print(
        Panel.fit(
            " Contact Directory  •  v0.2.0  •  Python ",
            style="magenta",
            border_style="bright_black",
            padding=(0, 2),
        )
    )
    console.print()


def _pick_picture(console: Console, preview: str | None) -> PictureFile | None:
    if preview:
        console.print(f"[dim]Current picture: {preview}[/dim]")
    raw = Prompt.ask("Picture file (blank to keep / skip)", default="", console=console).strip()
    if not raw:
        return None
    path = Path(raw).expanduser()
    if not path.is_file():
        console.print(f"[red]No such file: {path}[/red]")
        return None
    return PictureFile.from_path(path)


async def _fill_and_submit(contacts: ContactsApp, console: Console) -> None:
    form = contacts.form
    while form.state is not FormState.CLOSED:
        console.print(Text(f"\n{form.title}", style="bold magenta"))
        form.fields.name = Prompt.ask("Name", default=form.fields.name, console=console)
        form.fields.address = Prompt.ask("Address", default=form.fields.address, console=console)
        form.fields.picture = _pick_picture(console, form.preview_url)
        result = await form.submit()
        if result is not None and result.ok:
            return
        # stays open with the inline error; let the user retry or give up
        if Prompt.ask("Try again?", choices=["y", "n"], default="y", console=console) == "n":
            form.cancel()


async def _dispatch(contacts: ContactsApp, action: str, console: Console) -> None:
    view = contacts.directory.view
    if not isinstance(view, CardList):
        console.print("[yellow]No contacts to act on.[/yellow]")
        return
    table = view.bindings(contacts.action_handlers())
    ids = sorted({cid for (act, cid) in table if act == action})
    if not ids:
        console.print(f"[yellow]You don't own any of the listed contacts, so there is nothing to {action}.[/yellow]")
        return
    contact_id = Prompt.ask(f"{action.title()} which contact?", choices=ids, console=console)
    outcome = table[(action, contact_id)]()
    if inspect.isawaitable(outcome):
        await outcome
    if action == EDIT and contacts.form.state is FormState.EDIT_OPEN:
        await _fill_and_submit(contacts, console)


async def run_shell(contacts: ContactsApp, console: Console) -> None:
    # Prompt.ask blocks the loop; every search is settled before the next prompt
    while True:
        _banner(console)
        console.print(header_renderable(contacts.session.username, contacts.visibility))
        term = contacts.ctx.search_term
        console.print(Text(f"\n  search: {term!r}" if term else "\n  search: (none)", style="dim"))

        options = ["s", "r", "q"]
        console.print("\n  s) Search      r) Refresh")
        if contacts.visibility.add_contact:
            console.print("  a) Add         e) Edit        d) Delete")
            options += ["a", "e", "d"]
        console.print("  q) Quit\n")

        choice = Prompt.ask("Option", choices=options, default="q", console=console).strip().lower()
        if choice == "q":
            break
        if choice == "s":
            contacts.search(Prompt.ask("Search", default="", console=console))
            await contacts.search_settled()
        elif choice == "r":
            await contacts.refresh()
        elif choice == "a":
            contacts.form.open_create()
            await _fill_and_submit(contacts, console)
        elif choice == "e":
            await _dispatch(contacts, EDIT, console)
        elif choice == "d":
            await _dispatch(contacts, DELETE, console)
