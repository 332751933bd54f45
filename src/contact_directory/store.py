from __future__ import annotations

from dataclasses import dataclass, field

from .model import Contact, EditSession


@dataclass
class ContactStore:
    """Snapshot of the backend's contact list plus the current edit target."""

    contacts: tuple[Contact, ...] = ()
    edit: EditSession = field(default_factory=EditSession)

    def replace(self, contacts: tuple[Contact, ...]) -> None:
        self.contacts = tuple(contacts)

    def find(self, contact_id: object) -> Contact | None:
        wanted = str(contact_id)
        for contact in self.contacts:
            if contact.id == wanted:
                return contact
        return None
