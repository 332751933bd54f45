"""form.py — the create/edit contact form.

The form is either closed, open for a new contact, or open on an existing
contact. Submitting picks create or update from that state, hands the
payload to the gateway, and either closes (then refreshes the list from the
server) or stays open with the server's message shown inline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from .gateway import ContactPayload, MutationGateway, MutationResult, PictureFile, SAVE_FAILED
from .notify import Notifier, Placement, inline_error
from .render import picture_url
from .store import ContactStore

logger = logging.getLogger(__name__)


class FormState(str, Enum):
    CLOSED = "closed"
    CREATE_OPEN = "create"
    EDIT_OPEN = "edit"


@dataclass
class FormFields:
    name: str = ""
    address: str = ""
    picture: PictureFile | None = None   # a new upload is opt-in, never pre-filled

    def clear(self) -> None:
        self.name = ""
        self.address = ""
        self.picture = None


class FormController:
    def __init__(
        self,
        store: ContactStore,
        gateway: MutationGateway,
        notifier: Notifier,
        refresh: Callable[[], Awaitable[object]],
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.notifier = notifier
        self.refresh = refresh
        self.state = FormState.CLOSED
        self.fields = FormFields()
        self.preview_url: str | None = None
        self.submitting = False

    @property
    def title(self) -> str:
        return "Edit Contact" if self.state is FormState.EDIT_OPEN else "New Contact"

    @property
    def target_id(self) -> str | None:
        return self.store.edit.target_contact_id

    def open_create(self) -> None:
        self.store.edit.reset()
        self.fields.clear()
        self.preview_url = None
        self.notifier.clear(Placement.INLINE)
        self.state = FormState.CREATE_OPEN

    def open_edit(self, contact_id: object) -> bool:
        contact = self.store.find(contact_id)
        if contact is None:
            logger.debug("open_edit: contact %r not in snapshot", contact_id)
            return False
        self.store.edit.target_contact_id = contact.id
        self.fields.name = contact.name
        self.fields.address = contact.address
        self.fields.picture = None
        self.preview_url = picture_url(contact) if contact.has_picture else None
        self.notifier.clear(Placement.INLINE)
        self.state = FormState.EDIT_OPEN
        return True

    def cancel(self) -> None:
        self.state = FormState.CLOSED
        self.store.edit.reset()
        self.preview_url = None

    def payload(self) -> ContactPayload:
        return ContactPayload(
            name=self.fields.name.strip(),
            address=self.fields.address.strip(),
            picture=self.fields.picture,
        )

    async def submit(self) -> MutationResult | None:
        """Send the form. Returns None when there was nothing to submit."""
        if self.state is FormState.CLOSED or self.submitting:
            return None
        self.notifier.clear(Placement.INLINE)
        payload = self.payload()
        self.submitting = True
        try:
            if self.state is FormState.EDIT_OPEN and self.target_id is not None:
                result = await self.gateway.update(self.target_id, payload)
            else:
                result = await self.gateway.create(payload)
        finally:
            self.submitting = False

        if not result.ok:
            self.notifier.notify(inline_error(result.message or SAVE_FAILED))
            return result

        self.cancel()
        await self.refresh()
        return result
