"""auth.py — sign up, sign in and out, and keep the session cookie on disk.

The backend issues a cookie session on form login (``POST /login``) and on
signup. Cookies are saved to local/cookies.json so consecutive CLI runs share
one session, the way a browser tab would.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .gateway import extract_error_message
from .transport import ApiClient, TransportFailure

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
LOGOUT_PATH = "/logout"
SIGNUP_PATH = "/api/auth/signup"


@dataclass(frozen=True)
class AuthResult:
    ok: bool
    message: str = ""


# ── Cookie jar ─────────────────────────────────────────────────────────────────

def load_cookies(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable cookie file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items()}


def save_cookies(path: Path, cookies: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cookies, indent=2), encoding="utf-8")


def clear_cookies(path: Path) -> None:
    if path.exists():
        path.unlink()


# ── Account actions ────────────────────────────────────────────────────────────

async def login(api: ApiClient, username: str, password: str) -> AuthResult:
    """Form login. Success is a redirect that does not point at ``?error``."""
    try:
        response = await api.request(
            "POST", LOGIN_PATH, data={"username": username, "password": password}
        )
    except TransportFailure as exc:
        return AuthResult(False, str(exc))
    location = response.headers.get("location", "")
    if response.is_redirect and "error" not in location:
        logger.info("Signed in as %s", username)
        return AuthResult(True, f"Signed in as {username}")
    if response.is_success:
        return AuthResult(True, f"Signed in as {username}")
    logger.info("Login for %s rejected (%d, %s)", username, response.status_code, location)
    return AuthResult(False, "Invalid username or password.")


async def signup(api: ApiClient, username: str, password: str) -> AuthResult:
    try:
        response = await api.request(
            "POST", SIGNUP_PATH, json={"username": username, "password": password}
        )
    except TransportFailure as exc:
        return AuthResult(False, str(exc))
    if response.is_success:
        logger.info("Registered %s", username)
        return AuthResult(True, f"Welcome, {username}")
    return AuthResult(False, extract_error_message(response, "Unable to sign up."))


async def logout(api: ApiClient) -> AuthResult:
    try:
        response = await api.request("POST", LOGOUT_PATH)
    except TransportFailure as exc:
        return AuthResult(False, str(exc))
    if response.is_success or response.is_redirect:
        return AuthResult(True, "Signed out")
    return AuthResult(False, f"Logout returned HTTP {response.status_code}")
