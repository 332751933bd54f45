from __future__ import annotations

import logging
from dataclasses import dataclass

from .model import ANONYMOUS, Session
from .transport import ApiClient, TransportFailure

logger = logging.getLogger(__name__)

ME_PATH = "/api/auth/me"


@dataclass(frozen=True)
class Visibility:
    add_contact: bool
    export: bool
    logout: bool
    login: bool
    signup: bool


def visibility(session: Session) -> Visibility:
    signed_in = session.authenticated
    return Visibility(
        add_contact=signed_in,
        export=signed_in,
        logout=signed_in,
        login=not signed_in,
        signup=not signed_in,
    )


def session_from_payload(data: object) -> Session:
    if not isinstance(data, dict):
        return ANONYMOUS
    username = data.get("username") or None
    if "authenticated" in data:
        authenticated = bool(data["authenticated"])
    else:
        # the backend answers {"username": ...} for signed-in users only
        authenticated = username is not None
    if not authenticated:
        return ANONYMOUS
    return Session(authenticated=True, username=str(username) if username else None)


async def resolve_session(api: ApiClient) -> Session:
    """Ask the backend who we are. Any failure means anonymous, never an error."""
    try:
        response = await api.get(ME_PATH)
    except TransportFailure as exc:
        logger.warning("Failed to determine user: %s", exc)
        return ANONYMOUS
    if not response.is_success:
        logger.info("Identity check returned %d, continuing anonymously", response.status_code)
        return ANONYMOUS
    try:
        data = response.json()
    except ValueError:
        logger.warning("Identity response was not JSON, continuing anonymously")
        return ANONYMOUS
    session = session_from_payload(data)
    logger.info("Session resolved: %s", session.username if session.authenticated else "anonymous")
    return session
