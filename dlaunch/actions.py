from __future__ import annotations

import re
from dataclasses import dataclass

from .settings import ConfigError


APPDATA_ROOT = "/mnt/user/appdata/"

EDIT_APPDATA_LABEL = "\uf013 Edit AppData"
DOCKER_TEMPLATE_LABEL = "\uf1b2 Docker Template"


def parse_hide_list(raw: str | None) -> frozenset[str]:
    """``DL_HIDE``: network and/or container names separated by ',' or ';'."""
    if raw is None or not raw.strip():
        return frozenset()
    return frozenset(x.strip() for x in re.split(r"[,;]", raw) if x.strip())


def find_appdata_mount(name: str, mounts: list[str]) -> str | None:
    """Pick the mount holding a container's appdata.

    First a mount directly under ``/mnt/user/appdata/<name>``, then any
    appdata mount whose path merely contains the name. The second rule can
    pick another container's folder when names share a substring.
    """
    exact = next((m for m in mounts if m.startswith(APPDATA_ROOT + name)), None)
    if exact is not None:
        return exact
    return next((m for m in mounts if m.startswith(APPDATA_ROOT) and name in m), None)


@dataclass(frozen=True)
class EditConfigTemplate:
    """``DL_EDIT_CONFIG_URL`` in the form ``pathPrefix:urlTemplate`` with a ``{path}`` placeholder."""

    path_prefix: str
    template: str

    @classmethod
    def parse(cls, raw: str) -> "EditConfigTemplate":
        if ":" not in raw or "{path}" not in raw:
            raise ConfigError("Invalid format for DL_EDIT_CONFIG_URL, expected 'pathPrefix:url{path}'.")
        prefix, _, template = raw.partition(":")
        if "{path}" not in template:
            raise ConfigError("Invalid format for DL_EDIT_CONFIG_URL, '{path}' must follow the prefix.")
        return cls(path_prefix=prefix, template=template)

    def url_for(self, name: str, mounts: list[str]) -> str | None:
        mount = find_appdata_mount(name, mounts)
        if mount is None or not mount.startswith(self.path_prefix):
            return None
        parts = mount[len(self.path_prefix):].split("/")
        # keep everything up to and including the segment after "appdata"
        idx = parts.index("appdata") if "appdata" in parts else -1
        parts = parts[: idx + 2]
        return self.template.replace("{path}", "/".join(parts))


@dataclass(frozen=True)
class EditContainerTemplate:
    """``DL_CONFIGURE_CONTAINER_URL`` with a ``{name}`` placeholder."""

    template: str

    @classmethod
    def parse(cls, raw: str) -> "EditContainerTemplate":
        if "{name}" not in raw:
            raise ConfigError("Invalid format for DL_CONFIGURE_CONTAINER_URL, expected a '{name}' placeholder.")
        return cls(template=raw)

    def url_for(self, name: str) -> str:
        return self.template.replace("{name}", name)
