from __future__ import annotations

import time
from threading import Lock
from typing import Any, Callable


DEFAULT_INTERVAL_S = 600


class SubnetCache:
    """Network name -> subnet CIDR, shared by all reconciliation calls.

    The whole map is dropped once ``interval_s`` has passed since the last
    clear (one clock for every key, no per-entry expiry). Negative results
    are cached too. The lock only guards the map; daemon calls happen outside
    it, so two concurrent misses on the same network may both query.
    """

    def __init__(self, interval_s: float = DEFAULT_INTERVAL_S, clock: Callable[[], float] = time.time) -> None:
        self.interval_s = interval_s
        self.clock = clock
        self.lock = Lock()
        self._entries: dict[str, str | None] = {}
        self._last_clear = clock()

    def _expire(self) -> None:
        now = self.clock()
        if now - self._last_clear > self.interval_s:
            self._entries.clear()
            self._last_clear = now

    def get(self, network_name: str) -> tuple[bool, str | None]:
        """Return (hit, subnet)."""
        with self.lock:
            self._expire()
            if network_name in self._entries:
                return True, self._entries[network_name]
            return False, None

    def put(self, network_name: str, subnet: str | None) -> None:
        with self.lock:
            self._entries[network_name] = subnet

    def subnet_for(self, client: Any, network_name: str) -> str | None:
        hit, subnet = self.get(network_name)
        if hit:
            return subnet
        subnet = lookup_subnet(client, network_name)
        self.put(network_name, subnet)
        return subnet


def lookup_subnet(client: Any, network_name: str) -> str | None:
    """Ask the daemon for the first IPAM subnet of ``network_name``."""
    match = next((n for n in client.networks.list() if n.name == network_name), None)
    if match is None:
        return None
    detail = client.networks.get(match.id)
    configs = ((detail.attrs or {}).get("IPAM") or {}).get("Config") or []
    if not configs:
        return None
    return configs[0].get("Subnet") or None
