"""render.py — project the contact snapshot and session into a list view.

``render`` is pure: it returns a declarative view (empty state, error state,
or one card per contact) and never touches the terminal. Actions are named
(``edit`` / ``delete``) and bound to handlers through a fresh dispatch table
built from the just-rendered view, so handlers always see current data.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Union
from urllib.parse import quote

from .model import Contact, Session

EDIT = "edit"
DELETE = "delete"

PLACEHOLDER_PICTURE = "https://via.placeholder.com/400x180?text=No+Image"

EMPTY_SIGNED_IN = "No contacts yet. Add one using the button above."
EMPTY_ANONYMOUS = "No contacts yet. Sign in to create and manage contacts."
LOAD_FAILED = "Unable to load contacts right now."


def picture_url(contact: Contact) -> str:
    """Picture path for a contact; ``updated_at`` busts stale cached images."""
    cid = quote(contact.id, safe="")
    ts = quote(contact.updated_at, safe="")
    return f"/api/contacts/{cid}/picture?ts={ts}"


def weather_badge(contact: Contact) -> str | None:
    w = contact.weather
    if w is None:
        return None
    badge = f"{w.description} · {w.temperature_celsius:.1f}°C"
    if w.location:
        badge = f"{w.location}: {badge}"
    return badge


@dataclass(frozen=True)
class ContactCard:
    contact_id: str
    name: str
    address: str
    owner_badge: str
    picture: str
    has_picture: bool
    weather: str | None = None
    actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class EmptyState:
    message: str


@dataclass(frozen=True)
class ErrorState:
    message: str = LOAD_FAILED


@dataclass(frozen=True)
class CardList:
    cards: tuple[ContactCard, ...] = field(default_factory=tuple)

    def bindings(
        self, handlers: Mapping[str, Callable[[str], object]]
    ) -> dict[tuple[str, str], Callable[[], object]]:
        """Dispatch table ``(action, contact_id) -> callable`` for this render pass."""
        table: dict[tuple[str, str], Callable[[], object]] = {}
        for card in self.cards:
            for action in card.actions:
                handler = handlers.get(action)
                if handler is None:
                    continue
                table[(action, card.contact_id)] = _bind(handler, card.contact_id)
        return table


ListView = Union[CardList, EmptyState, ErrorState]


def _bind(handler: Callable[[str], object], contact_id: str) -> Callable[[], object]:
    return lambda: handler(contact_id)


def render_card(contact: Contact, session: Session) -> ContactCard:
    return ContactCard(
        contact_id=contact.id,
        name=contact.name,
        address=contact.address,
        owner_badge=f"Owner: {contact.owner_username}",
        picture=picture_url(contact) if contact.has_picture else PLACEHOLDER_PICTURE,
        has_picture=contact.has_picture,
        weather=weather_badge(contact),
        actions=(EDIT, DELETE) if session.owns(contact) else (),
    )


def render(contacts: tuple[Contact, ...], session: Session) -> CardList | EmptyState:
    if not contacts:
        return EmptyState(EMPTY_SIGNED_IN if session.authenticated else EMPTY_ANONYMOUS)
    return CardList(tuple(render_card(c, session) for c in contacts))
