from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Session:
    authenticated: bool = False
    username: str | None = None

    def owns(self, contact: Contact) -> bool:
        return self.authenticated and self.username == contact.owner_username


ANONYMOUS = Session()


@dataclass(frozen=True)
class Weather:
    description: str
    temperature_celsius: float
    location: str | None = None


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    address: str
    owner_username: str
    has_picture: bool = False
    updated_at: str = ""      # opaque version token, also the picture cache-buster
    weather: Weather | None = None


@dataclass
class EditSession:
    target_contact_id: str | None = None  # None → next submit creates

    def reset(self) -> None:
        self.target_contact_id = None


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def weather_from_dict(data: Any) -> Weather | None:
    if not isinstance(data, dict):
        return None
    try:
        temp = float(data.get("temperatureCelsius"))
    except (TypeError, ValueError):
        return None
    return Weather(
        description=_text(data.get("description")),
        temperature_celsius=temp,
        location=data.get("location") or None,
    )


def contact_from_dict(data: dict[str, Any]) -> Contact:
    """Build a Contact from one element of the listing response."""
    has_picture = data.get("hasPicture")
    if has_picture is None:
        # older payloads only carry a pictureUrl
        has_picture = bool(data.get("pictureUrl"))
    return Contact(
        id=_text(data.get("id")),
        name=_text(data.get("name")),
        address=_text(data.get("address")),
        owner_username=_text(data.get("ownerUsername")),
        has_picture=bool(has_picture),
        updated_at=_text(data.get("updatedAt")),
        weather=weather_from_dict(data.get("weather")),
    )


def contacts_from_json(payload: Any) -> tuple[Contact, ...]:
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of contacts, got {type(payload).__name__}")
    return tuple(contact_from_dict(item) for item in payload if isinstance(item, dict))
