"""app.py — the application context and the flows that tie components together.

``AppContext`` holds everything one client instance owns: the session, the
contact snapshot with its edit target, the current search term, and where
views and notices go. ``ContactsApp`` wires the components around a context:

    start()            resolve session → sync("") → render
    search(term)       debounced sync with the typed term
    delete_contact(id) confirm → DELETE → sync (or alert on failure)
    form.submit()      create/update → sync (or inline error)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .debounce import Debouncer
from .form import FormController
from .gateway import DELETE_FAILED, MutationGateway
from .model import ANONYMOUS, Session
from .notify import Notifier, alert
from .session import Visibility, resolve_session, visibility
from .store import ContactStore
from .sync import DirectorySync, ViewTarget
from .transport import ApiClient

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Delete this contact?"


@dataclass
class AppContext:
    api: ApiClient
    target: ViewTarget
    notifier: Notifier
    session: Session = ANONYMOUS
    store: ContactStore = field(default_factory=ContactStore)
    search_term: str = ""


class ContactsApp:
    def __init__(self, ctx: AppContext, search_delay: float = 0.35) -> None:
        self.ctx = ctx
        self.directory = DirectorySync(ctx.api, ctx.store, ctx.target)
        self.gateway = MutationGateway(ctx.api)
        self.form = FormController(ctx.store, self.gateway, ctx.notifier, self.refresh)
        self._search = Debouncer(self._search_now, search_delay)

    @property
    def session(self) -> Session:
        return self.ctx.session

    @property
    def visibility(self) -> Visibility:
        return visibility(self.ctx.session)

    async def start(self) -> bool:
        self.ctx.session = await resolve_session(self.ctx.api)
        return await self.refresh()

    async def refresh(self) -> bool:
        return await self.directory.sync(self.ctx.search_term, self.ctx.session)

    # ── Search ────────────────────────────────────────────────────────────────

    def search(self, text: str) -> None:
        """Feed one keystroke's worth of search input; syncs after a quiet period."""
        self._search(text)

    async def _search_now(self, text: str) -> bool:
        self.ctx.search_term = text.strip()
        return await self.refresh()

    async def search_settled(self) -> None:
        await self._search.wait()

    # ── Delete ────────────────────────────────────────────────────────────────

    async def delete_contact(self, contact_id: str, confirmed: bool = False) -> bool:
        """Delete after the user says yes. ``confirmed`` means they already did."""
        if not confirmed and not self.ctx.notifier.confirm(DELETE_PROMPT):
            logger.debug("Delete of contact %s declined", contact_id)
            return False
        result = await self.gateway.remove(contact_id)
        if not result.ok:
            self.ctx.notifier.notify(alert(result.message or DELETE_FAILED))
            return False
        await self.refresh()
        return True

    def edit_contact(self, contact_id: str) -> bool:
        return self.form.open_edit(contact_id)

    def action_handlers(self) -> dict[str, object]:
        return {"edit": self.edit_contact, "delete": self.delete_contact}

    # ── Teardown ──────────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._search.close()
        await self.ctx.api.aclose()

    async def __aenter__(self) -> ContactsApp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
