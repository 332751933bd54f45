from __future__ import annotations

import logging
from pathlib import Path

from .model import Contact
from .render import picture_url
from .transport import ApiClient, ContactsError

logger = logging.getLogger(__name__)

EXPORT_PATH = "/api/contacts/export"


class DownloadError(ContactsError):
    pass


async def _fetch(api: ApiClient, path: str) -> bytes:
    response = await api.get(path)
    if not response.is_success:
        raise DownloadError(f"GET {path} returned HTTP {response.status_code}")
    return response.content


async def export_csv(api: ApiClient, out_path: Path) -> Path:
    """Save the owner's CSV export. Requires a signed-in session."""
    data = await _fetch(api, EXPORT_PATH)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)
    logger.info("Exported %d byte(s) to %s", len(data), out_path)
    return out_path


async def download_picture(api: ApiClient, contact: Contact, out_path: Path) -> Path:
    if not contact.has_picture:
        raise DownloadError(f"Contact {contact.name!r} has no picture")
    data = await _fetch(api, picture_url(contact))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)
    return out_path
