from __future__ import annotations

from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.prompt import Confirm
from rich.status import Status
from rich.text import Text

from .notify import Notice, Placement, Severity
from .render import ContactCard, EmptyState, ErrorState, ListView
from .session import Visibility

# ── Palette ────────────────────────────────────────────────────────────────────
_ACCENT  = "#4d9fff"
_GREEN   = "#3ecf8e"
_RED     = "#f05c5c"
_PURPLE  = "#b07fff"
_TEXT    = "#c9d1e0"
_MID     = "#8896af"
_DIM     = "#546075"
_BORDER  = "#2a3347"

_SEVERITY_COLOUR = {
    Severity.INFO: _ACCENT,
    Severity.SUCCESS: _GREEN,
    Severity.ERROR: _RED,
}


def card_panel(card: ContactCard, base_url: str = "") -> Panel:
    body = Text()
    body.append(f"{card.address}\n", style=_TEXT)
    if card.weather:
        body.append(f"☁ {card.weather}\n", style=f"{_ACCENT}")
    body.append(card.owner_badge, style=f"dim {_MID}")
    if card.has_picture:
        body.append("\n▣ ", style=_PURPLE)
        body.append(f"{base_url}{card.picture}", style=f"dim {_DIM}")
    else:
        body.append("\n▢ no picture", style=f"dim {_DIM}")
    if card.actions:
        body.append("\n")
        body.append("  ".join(f"[{a}]" for a in card.actions), style=f"bold {_GREEN}")

    title = Text(card.name, style=f"bold {_TEXT}")
    return Panel(
        body,
        title=title,
        title_align="left",
        subtitle=Text(f"#{card.contact_id}", style=f"dim {_DIM}"),
        subtitle_align="right",
        border_style=_BORDER,
        padding=(0, 1),
    )


def view_renderable(view: ListView, base_url: str = "") -> RenderableType:
    if isinstance(view, ErrorState):
        return Panel(Text(view.message, style=f"bold {_RED}"), border_style=_RED, padding=(0, 2))
    if isinstance(view, EmptyState):
        return Text(f"  {view.message}", style=f"dim {_MID}")
    return Columns([card_panel(c, base_url) for c in view.cards], equal=True, expand=True)


def header_renderable(username: str | None, flags: Visibility) -> RenderableType:
    who = Text()
    if username:
        who.append("  signed in as ", style=f"dim {_DIM}")
        who.append(username, style=f"bold {_ACCENT}")
    else:
        who.append("  browsing anonymously", style=f"dim {_DIM}")
    controls = [
        label for label, shown in (
            ("add", flags.add_contact),
            ("export", flags.export),
            ("logout", flags.logout),
            ("login", flags.login),
            ("signup", flags.signup),
        ) if shown
    ]
    hint = Text("  " + "  ·  ".join(controls), style=f"dim {_MID}")
    return Group(who, hint)


class ConsoleTarget:
    """Draws list views on a rich console, with a spinner while loading."""

    def __init__(self, console: Console | None = None, base_url: str = "") -> None:
        self.console = console or Console()
        self.base_url = base_url
        self.view: ListView | None = None
        self._status: Status | None = None
        self._inflight = 0

    def show_loading(self) -> None:
        self._inflight += 1
        if self._status is None and self.console.is_terminal:
            self._status = self.console.status("Loading contacts…", spinner="dots")
            self._status.start()

    def hide_loading(self) -> None:
        self._inflight = max(0, self._inflight - 1)
        if self._inflight == 0 and self._status is not None:
            self._status.stop()
            self._status = None

    def show(self, view: ListView) -> None:
        self.view = view
        self.console.print()
        self.console.print(view_renderable(view, self.base_url))


class ConsoleNotifier:
    """Inline notices print under the form; interrupting ones wait for Enter."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.inline: Notice | None = None

    def notify(self, notice: Notice) -> None:
        colour = _SEVERITY_COLOUR[notice.severity]
        if notice.placement is Placement.INLINE:
            self.inline = notice
            self.console.print(Text(f"  {notice.message}", style=f"bold {colour}"))
            return
        self.console.print(Panel(Text(notice.message, style=f"bold {colour}"),
                                 border_style=colour, padding=(0, 2)))
        if self.console.is_terminal:
            self.console.input(f"[dim {_DIM}]  Press Enter to continue…[/dim {_DIM}]")

    def clear(self, placement: Placement) -> None:
        if placement is Placement.INLINE:
            self.inline = None

    def confirm(self, question: str) -> bool:
        return Confirm.ask(question, console=self.console, default=False)
