"""gateway.py — create, update and delete contacts on the backend.

Writes are always sent as ``multipart/form-data``: text parts for ``name``
and ``address``, plus a ``picture`` file part only when a file was chosen.
The backend accepts the same encoding with or without the file, so callers
never need to pick one.

Every operation returns a ``MutationResult``; HTTP errors and transport
failures are reported through it rather than raised.
"""
from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from .transport import ApiClient, TransportFailure

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/api/contacts"
SAVE_FAILED = "Unable to save contact."
DELETE_FAILED = "Unable to delete contact."


@dataclass(frozen=True)
class PictureFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Path) -> PictureFile:
        path = Path(path)
        ctype, _ = mimetypes.guess_type(path.name)
        return cls(path.name, path.read_bytes(), ctype or "application/octet-stream")


@dataclass(frozen=True)
class ContactPayload:
    name: str
    address: str
    picture: PictureFile | None = None

    def multipart(self) -> list[tuple[str, tuple[Any, ...]]]:
        # a None filename makes httpx emit a plain form field part
        parts: list[tuple[str, tuple[Any, ...]]] = [
            ("name", (None, self.name)),
            ("address", (None, self.address)),
        ]
        if self.picture is not None:
            p = self.picture
            parts.append(("picture", (p.filename, p.content, p.content_type)))
        return parts


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    status: int | None = None
    message: str | None = None


def _field_values(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [v for item in value for v in _field_values(item)]
    return []


def extract_error_message(response: httpx.Response, fallback: str = SAVE_FAILED) -> str:
    """Best human-readable message from an error response body."""
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        values = [v for value in data.values() for v in _field_values(value)]
        if values:
            return ", ".join(values)
    elif isinstance(data, list):
        values = _field_values(data)
        if values:
            return ", ".join(values)
    return fallback


def _contact_path(contact_id: str) -> str:
    return f"{CONTACTS_PATH}/{quote(str(contact_id), safe='')}"


class MutationGateway:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    async def _write(self, method: str, path: str, payload: ContactPayload) -> MutationResult:
        try:
            response = await self.api.request(method, path, files=payload.multipart())
        except TransportFailure:
            return MutationResult(ok=False, message=SAVE_FAILED)
        if response.is_success:
            logger.info("%s %s saved '%s'", method, path, payload.name)
            return MutationResult(ok=True, status=response.status_code)
        message = extract_error_message(response)
        logger.warning("%s %s rejected (%d): %s", method, path, response.status_code, message)
        return MutationResult(ok=False, status=response.status_code, message=message)

    async def create(self, payload: ContactPayload) -> MutationResult:
        return await self._write("POST", CONTACTS_PATH, payload)

    async def update(self, contact_id: str, payload: ContactPayload) -> MutationResult:
        return await self._write("PUT", _contact_path(contact_id), payload)

    async def remove(self, contact_id: str) -> MutationResult:
        """Delete a contact. Only HTTP 204 counts as success."""
        path = _contact_path(contact_id)
        try:
            response = await self.api.request("DELETE", path)
        except TransportFailure:
            return MutationResult(ok=False, message=DELETE_FAILED)
        if response.status_code == 204:
            logger.info("Deleted contact id=%s", contact_id)
            return MutationResult(ok=True, status=204)
        logger.warning("DELETE %s returned %d", path, response.status_code)
        return MutationResult(ok=False, status=response.status_code, message=DELETE_FAILED)
