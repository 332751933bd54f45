from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Paths:
    root: Path
    local_dir: Path
    export_dir: Path
    conf_file: Path
    cookie_file: Path


@dataclass
class Settings:
    base_url: str = "http://localhost:8080"
    timeout: float = 10.0
    search_delay: float = 0.35
    export_dir: str = "exports"


DEFAULT_CONF = """# contact-directory local config (TOML)
base_url = "http://localhost:8080"
timeout = 10.0
search_delay = 0.35
export_dir = "exports"
"""


def load_settings(conf: Path) -> Settings:
    """Read settings from a TOML file; missing keys keep their defaults."""
    settings = Settings()
    if not conf.exists():
        return settings
    try:
        data = tomllib.loads(conf.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        # malformed config falls back to defaults
        logger.warning("Ignoring unreadable config %s: %s", conf, exc)
        return settings

    settings.base_url = str(data.get("base_url", settings.base_url)).rstrip("/")
    settings.export_dir = str(data.get("export_dir", settings.export_dir))
    for key in ("timeout", "search_delay"):
        if key not in data:
            continue
        try:
            value = float(data[key])
        except (TypeError, ValueError):
            logger.warning("Config %s: %s must be a number, got %r", conf, key, data[key])
            continue
        if value < 0:
            logger.warning("Config %s: %s must not be negative", conf, key)
            continue
        setattr(settings, key, value)
    return settings


def conf_path(base: Path | None = None) -> Path:
    return Path(base or os.getcwd()) / "local" / "contacts.conf"


def is_first_run(base: Path | None = None) -> bool:
    """True until ensure_workspace has written local/contacts.conf."""
    return not conf_path(base).is_file()


def ensure_workspace(base: Path | None = None) -> tuple[Paths, Settings]:
    root = Path(base or os.getcwd())
    local = root / "local"
    conf = conf_path(root)

    local.mkdir(parents=True, exist_ok=True)
    if not conf.exists():
        conf.write_text(DEFAULT_CONF, encoding="utf-8")

    settings = load_settings(conf)
    export = root / settings.export_dir
    export.mkdir(parents=True, exist_ok=True)

    return (
        Paths(
            root=root,
            local_dir=local,
            export_dir=export,
            conf_file=conf,
            cookie_file=local / "cookies.json",
        ),
        settings,
    )

