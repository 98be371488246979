from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigError(Exception):
    """Raised for configuration that cannot be used (templates, custom entries, route policy)."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_present(name: str) -> bool:
    # DL_LAUNCH_NEWWINDOW is a presence flag: any non-empty value enables it.
    return bool(os.getenv(name))


@dataclass(frozen=True)
class Settings:
    # Docker / HTTP
    docker_url: str | None = os.getenv("DL_DOCKER")
    port: int = _env_int("DL_PORT", 8080)

    # Inventory sources
    policy_path: str | None = os.getenv("DL_POMERIUM")
    hide: str | None = os.getenv("DL_HIDE")
    custom_entries: str | None = os.getenv("DL_EXTRA")
    edit_config_url: str | None = os.getenv("DL_EDIT_CONFIG_URL")
    edit_container_url: str | None = os.getenv("DL_CONFIGURE_CONTAINER_URL")
    subnet_cache_s: int = _env_int("DL_SUBNET_CACHE_S", 600)

    # Presentation
    page_title: str | None = os.getenv("DL_TITLE")
    launch_new_window: bool = _env_present("DL_LAUNCH_NEWWINDOW")

    # Event log
    db_path: str = os.getenv("DL_DB_PATH", "dlaunch.db")


settings = Settings()
