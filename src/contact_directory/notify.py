from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Placement(str, Enum):
    INLINE = "inline"        # hosted by the open form
    INTERRUPT = "interrupt"  # blocking alert, no persistent host surface


@dataclass(frozen=True)
class Notice:
    message: str
    severity: Severity = Severity.INFO
    placement: Placement = Placement.INLINE


def inline_error(message: str) -> Notice:
    return Notice(message, Severity.ERROR, Placement.INLINE)


def alert(message: str) -> Notice:
    return Notice(message, Severity.ERROR, Placement.INTERRUPT)


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None: ...

    def clear(self, placement: Placement) -> None: ...

    def confirm(self, question: str) -> bool: ...
