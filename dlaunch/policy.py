from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

import yaml

from .settings import ConfigError


@dataclass(frozen=True)
class Route:
    public_host: str
    internal_host: str


@dataclass(frozen=True)
class RoutePolicy:
    routes: tuple[Route, ...] = field(default_factory=tuple)

    def public_host_for(self, name: str) -> str | None:
        """Return the public host routed to container ``name`` (case-insensitive, first match)."""
        key = name.casefold()
        for r in self.routes:
            if r.internal_host.casefold() == key:
                return r.public_host
        return None


def _internal_host(to: object) -> str | None:
    if isinstance(to, list):
        to = to[0] if to else None
    if not isinstance(to, str) or not to.strip():
        return None
    try:
        return urlsplit(to.strip()).hostname
    except ValueError:
        return None


def load_policy(path: str | None) -> RoutePolicy:
    """Parse a Pomerium-style policy document into an ordered route list.

    Expected shape::

        policy:
          - from: https://plex.example.com
            to: http://plex:32400

    Entries without a usable ``to`` are skipped. No caching: the document is
    re-read on every call so out-of-band edits are picked up.
    """
    if not path:
        return RoutePolicy()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            doc = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigError(f"Cannot read route policy '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse route policy '{path}': {e}") from e

    if doc is None:
        return RoutePolicy()
    if not isinstance(doc, dict):
        raise ConfigError(f"Route policy '{path}' must be a mapping with a 'policy' list.")

    entries = doc.get("policy") or []
    if not isinstance(entries, list):
        raise ConfigError(f"Route policy '{path}': 'policy' must be a list.")

    routes: list[Route] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"Route policy '{path}': every policy entry must be a mapping.")
        host = _internal_host(entry.get("to"))
        public = entry.get("from")
        if host is None or public is None:
            continue
        routes.append(Route(public_host=str(public), internal_host=host))
    return RoutePolicy(routes=tuple(routes))
