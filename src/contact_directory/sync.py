from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Protocol

from .model import Session, contacts_from_json
from .render import ErrorState, ListView, render
from .store import ContactStore
from .transport import ApiClient, TransportFailure

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/api/contacts"


class ViewTarget(Protocol):
    """Where the list view is drawn (a console, or a recorder in tests)."""

    def show_loading(self) -> None: ...

    def hide_loading(self) -> None: ...

    def show(self, view: ListView) -> None: ...


@contextmanager
def loading(target: ViewTarget) -> Iterator[None]:
    target.show_loading()
    try:
        yield
    finally:
        target.hide_loading()


class DirectorySync:
    """Fetch the contact list and swap it into the store.

    Every ``sync`` takes a new generation number. Only the latest generation
    may touch the store or the view; an older response arriving late is
    dropped, so overlapping searches cannot overwrite a newer result.
    """

    def __init__(self, api: ApiClient, store: ContactStore, target: ViewTarget) -> None:
        self.api = api
        self.store = store
        self.target = target
        self._generation = 0
        self.view: ListView | None = None   # last view handed to the target

    @property
    def generation(self) -> int:
        return self._generation

    def _show(self, view: ListView) -> None:
        self.view = view
        self.target.show(view)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def sync(self, search_term: str, session: Session) -> bool:
        """Refresh the snapshot. Returns True when a fresh list was applied."""
        self._generation += 1
        generation = self._generation
        term = (search_term or "").strip()
        params = {"search": term} if term else None

        with loading(self.target):
            try:
                response = await self.api.get(CONTACTS_PATH, params=params)
                if not response.is_success:
                    raise TransportFailure(f"listing returned HTTP {response.status_code}")
                contacts = contacts_from_json(response.json())
            except (TransportFailure, ValueError) as exc:
                if not self._is_current(generation):
                    logger.debug("Dropping stale failure from sync #%d", generation)
                    return False
                # the snapshot stays; only the display reports the failure
                logger.warning("Unable to load contacts: %s", exc)
                self._show(ErrorState())
                return False

            if not self._is_current(generation):
                logger.debug("Dropping stale result from sync #%d (latest #%d)",
                             generation, self._generation)
                return False

            self.store.replace(contacts)
            logger.info("Loaded %d contact(s)%s", len(contacts),
                        f" matching {term!r}" if term else "")
            self._show(render(self.store.contacts, session))
            return True
