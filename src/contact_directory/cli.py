from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import auth
from .app import AppContext, ContactsApp
from .config import Paths, Settings, ensure_workspace
from .console import ConsoleNotifier, ConsoleTarget, header_renderable
from .downloads import download_picture, export_csv
from .gateway import PictureFile
from .transport import ApiClient, ContactsError

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="contacts: browse and manage a personal contact directory from the terminal.",
)
console = Console()


@dataclass
class CliOptions:
    base_url: str | None = None
    workspace: Path | None = None


@app.callback()
def main(
    ctx: typer.Context,
    base_url: str | None = typer.Option(
        None, "--base-url", envvar="CONTACTS_BASE_URL", help="Backend URL (overrides local/contacts.conf)"
    ),
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Directory holding local/ and exports/"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.obj = CliOptions(base_url=base_url, workspace=workspace)


# ── Shared plumbing ────────────────────────────────────────────────────────────

def _workspace(ctx: typer.Context) -> tuple[Paths, Settings]:
    opts: CliOptions = ctx.obj or CliOptions()
    paths, settings = ensure_workspace(opts.workspace)
    if opts.base_url:
        settings.base_url = opts.base_url.rstrip("/")
    return paths, settings


@asynccontextmanager
async def open_app(paths: Paths, settings: Settings) -> AsyncIterator[ContactsApp]:
    api = ApiClient(settings.base_url, settings.timeout, cookies=auth.load_cookies(paths.cookie_file))
    app_ctx = AppContext(
        api=api,
        target=ConsoleTarget(console, base_url=settings.base_url),
        notifier=ConsoleNotifier(console),
    )
    contacts = ContactsApp(app_ctx, search_delay=settings.search_delay)
    try:
        yield contacts
    finally:
        auth.save_cookies(paths.cookie_file, api.cookies)
        await contacts.aclose()


def _run(
    ctx: typer.Context,
    flow: Callable[[ContactsApp, Paths], Awaitable[int | None]],
    start: bool = True,
) -> None:
    paths, settings = _workspace(ctx)

    async def _go() -> int | None:
        async with open_app(paths, settings) as contacts:
            if start:
                await contacts.start()
            return await flow(contacts, paths)

    try:
        code = asyncio.run(_go())
    except ContactsError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)
    if code:
        raise typer.Exit(code=code)


def _require_owner(contacts: ContactsApp, contact_id: str) -> None:
    contact = contacts.ctx.store.find(contact_id)
    if contact is None:
        console.print(f"[bold red]No contact with id {contact_id} in the current list.[/bold red]")
        raise typer.Exit(code=2)
    if not contacts.session.owns(contact):
        # the server decides; this only warns
        console.print(f"[yellow]Contact {contact_id} belongs to {contact.owner_username}; "
                      "the server will probably refuse.[/yellow]")


def _picture(path: Path | None) -> PictureFile | None:
    if path is None:
        return None
    if not path.is_file():
        console.print(f"[bold red]Picture not found: {path}[/bold red]")
        raise typer.Exit(code=2)
    return PictureFile.from_path(path)


# ── Commands ───────────────────────────────────────────────────────────────────

@app.command()
def whoami(ctx: typer.Context) -> None:
    """Show the current session and which actions it unlocks."""
    async def flow(contacts: ContactsApp, _paths: Paths) -> None:
        console.print(header_renderable(contacts.session.username, contacts.visibility))

    _run(ctx, flow)


@app.command("list")
def list_contacts(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Filter by name"),
) -> None:
    """List contacts, optionally filtered by a search term."""
    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        contacts.ctx.search_term = search.strip()
        return 0 if await contacts.start() else 1

    _run(ctx, flow, start=False)


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n"),
    address: str = typer.Option(..., "--address", "-a"),
    picture: Path | None = typer.Option(None, "--picture", "-p", help="Image file to upload"),
) -> None:
    """Create a contact."""
    upload = _picture(picture)

    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        contacts.form.open_create()
        contacts.form.fields.name = name
        contacts.form.fields.address = address
        contacts.form.fields.picture = upload
        result = await contacts.form.submit()
        return 0 if result is not None and result.ok else 1

    _run(ctx, flow)


@app.command()
def edit(
    ctx: typer.Context,
    contact_id: str = typer.Argument(..., help="Contact id"),
    name: str | None = typer.Option(None, "--name", "-n"),
    address: str | None = typer.Option(None, "--address", "-a"),
    picture: Path | None = typer.Option(None, "--picture", "-p", help="Replace the picture"),
) -> None:
    """Update a contact you own. Omitted fields keep their current values."""
    upload = _picture(picture)

    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        _require_owner(contacts, contact_id)
        contacts.form.open_edit(contact_id)
        if name is not None:
            contacts.form.fields.name = name
        if address is not None:
            contacts.form.fields.address = address
        contacts.form.fields.picture = upload
        result = await contacts.form.submit()
        return 0 if result is not None and result.ok else 1

    _run(ctx, flow)


@app.command()
def delete(
    ctx: typer.Context,
    contact_id: str = typer.Argument(..., help="Contact id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete a contact you own."""
    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        _require_owner(contacts, contact_id)
        return 0 if await contacts.delete_contact(contact_id, confirmed=yes) else 1

    _run(ctx, flow)


@app.command()
def export(
    ctx: typer.Context,
    output: Path | None = typer.Option(None, "--output", "-o", help="CSV path (default exports/contacts.csv)"),
) -> None:
    """Download your contacts as CSV."""
    async def flow(contacts: ContactsApp, paths: Paths) -> None:
        out = await export_csv(contacts.ctx.api, output or paths.export_dir / "contacts.csv")
        console.print(f"[bold green]✓ Exported → {out}[/bold green]")

    _run(ctx, flow, start=False)


@app.command()
def picture(
    ctx: typer.Context,
    contact_id: str = typer.Argument(..., help="Contact id"),
    output: Path | None = typer.Option(None, "--output", "-o"),
) -> None:
    """Download a contact's picture."""
    async def flow(contacts: ContactsApp, paths: Paths) -> int:
        contact = contacts.ctx.store.find(contact_id)
        if contact is None:
            console.print(f"[bold red]No contact with id {contact_id}.[/bold red]")
            return 2
        out = await download_picture(
            contacts.ctx.api, contact, output or paths.export_dir / f"contact-{contact.id}.img"
        )
        console.print(f"[bold green]✓ Saved → {out}[/bold green]")
        return 0

    _run(ctx, flow)


@app.command()
def login(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Sign in and remember the session."""
    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        result = await auth.login(contacts.ctx.api, username, password)
        colour = "green" if result.ok else "red"
        console.print(f"[bold {colour}]{result.message}[/bold {colour}]")
        return 0 if result.ok else 1

    _run(ctx, flow, start=False)


@app.command()
def signup(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and sign in."""
    async def flow(contacts: ContactsApp, _paths: Paths) -> int:
        result = await auth.signup(contacts.ctx.api, username, password)
        colour = "green" if result.ok else "red"
        console.print(f"[bold {colour}]{result.message}[/bold {colour}]")
        return 0 if result.ok else 1

    _run(ctx, flow, start=False)


@app.command()
def logout(ctx: typer.Context) -> None:
    """Sign out and forget the stored session."""
    paths, settings = _workspace(ctx)

    async def _go() -> auth.AuthResult:
        async with ApiClient(settings.base_url, settings.timeout,
                             cookies=auth.load_cookies(paths.cookie_file)) as api:
            return await auth.logout(api)

    result = asyncio.run(_go())
    auth.clear_cookies(paths.cookie_file)
    colour = "green" if result.ok else "yellow"
    console.print(f"[bold {colour}]{result.message}[/bold {colour}]")


@app.command()
def shell(ctx: typer.Context) -> None:
    """Interactive menu: search, add, edit and delete."""
    from .launcher import run_shell

    async def flow(contacts: ContactsApp, _paths: Paths) -> None:
        await run_shell(contacts, console)

    _run(ctx, flow)


if __name__ == "__main__":
    app()
