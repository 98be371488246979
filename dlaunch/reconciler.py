from __future__ import annotations

from typing import Any, Callable, Iterable

from .actions import (
    DOCKER_TEMPLATE_LABEL,
    EDIT_APPDATA_LABEL,
    EditConfigTemplate,
    EditContainerTemplate,
    parse_hide_list,
)
from .custom_entries import parse_custom_entries
from .docker_ops import list_runtime_containers
from .models import ICON_LABEL, ContainerView, Port, RuntimeContainer, RuntimePort
from .navigation import resolve_navigate_url
from .policy import RoutePolicy, load_policy
from .settings import Settings
from .subnets import SubnetCache


def dedupe_ports(ports: Iterable[RuntimePort]) -> list[Port]:
    """One row per private port, then one per public port, sorted by private port.

    Lossy on purpose: first seen wins on either side.
    """
    seen_private: set[int | None] = set()
    by_private: list[RuntimePort] = []
    for p in ports:
        if p.private_port in seen_private:
            continue
        seen_private.add(p.private_port)
        by_private.append(p)

    seen_public: set[int | None] = set()
    rows: list[RuntimePort] = []
    for p in by_private:
        if p.public_port in seen_public:
            continue
        seen_public.add(p.public_port)
        rows.append(p)

    rows.sort(key=lambda p: p.private_port)
    return [Port(private_port=p.private_port, public_port=p.public_port, ip=p.ip, type=p.type) for p in rows]


class Reconciler:
    """Builds the launcher's container inventory.

    Merges the daemon's container list with the route policy, the hide-list,
    custom entries and subnet metadata. Everything except the subnet cache is
    re-read on every call.
    """

    def __init__(
        self,
        client_provider: Callable[[], Any],
        policy_path: str | None = None,
        hide: str | None = None,
        custom_entries: str | None = None,
        edit_config_url: str | None = None,
        edit_container_url: str | None = None,
        subnet_cache: SubnetCache | None = None,
    ) -> None:
        self.client_provider = client_provider
        self.policy_path = policy_path
        self.hide = hide
        self.custom_entries = custom_entries
        self.subnet_cache = subnet_cache or SubnetCache()
        # Templates are validated here so a bad value fails at start-up.
        self.edit_config = EditConfigTemplate.parse(edit_config_url) if edit_config_url is not None else None
        self.edit_container = (
            EditContainerTemplate.parse(edit_container_url) if edit_container_url is not None else None
        )

    @classmethod
    def from_settings(cls, s: Settings, client_provider: Callable[[], Any]) -> "Reconciler":
        return cls(
            client_provider,
            policy_path=s.policy_path,
            hide=s.hide,
            custom_entries=s.custom_entries,
            edit_config_url=s.edit_config_url,
            edit_container_url=s.edit_container_url,
            subnet_cache=SubnetCache(interval_s=s.subnet_cache_s),
        )

    def all_containers(self, root_host: str, launch_routes: bool = True) -> list[ContainerView]:
        client = self.client_provider()
        containers = list_runtime_containers(client)
        if not containers:
            return []
        return self.reconcile(root_host, containers, launch_routes)

    def resolve(self, root_host: str, name: str, launch_routes: bool = True) -> ContainerView | None:
        """Look up one live container by exact name.

        Custom-only entries are never found here: the daemon-side name filter
        has nothing to match them against. Use ``all_containers`` for those.
        """
        client = self.client_provider()
        containers = list_runtime_containers(client, name=name)
        if not containers:
            return None
        return next((v for v in self.reconcile(root_host, containers, launch_routes) if v.name == name), None)

    def reconcile(
        self, root_host: str, containers: Iterable[RuntimeContainer], launch_routes: bool = True
    ) -> list[ContainerView]:
        policy = load_policy(self.policy_path)
        hidden = parse_hide_list(self.hide)

        views: dict[str, ContainerView] = {}
        for c in containers:
            if c.name in hidden or any(n in hidden for n in c.network_names):
                continue
            view = self._view_for(c, policy, launch_routes)
            views[view.name] = view

        for view in views.values():
            if self.edit_config is not None:
                url = self.edit_config.url_for(view.name, view.mounts)
                if url is not None:
                    view.extra_actions[EDIT_APPDATA_LABEL] = url
            if self.edit_container is not None:
                view.extra_actions[DOCKER_TEMPLATE_LABEL] = self.edit_container.url_for(view.name)

        for entry in parse_custom_entries(self.custom_entries):
            if entry.name in views:
                views[entry.name].overlay(entry)
            else:
                views[entry.name] = ContainerView.from_custom(entry)

        # Custom entries are hidden the same way as live containers.
        for name in [n for n, v in views.items() if n in hidden or v.network_name in hidden]:
            del views[name]

        client = None
        for view in views.values():
            if view.network_name is not None:
                if client is None:
                    client = self.client_provider()
                subnet = self.subnet_cache.subnet_for(client, view.network_name)
                if subnet is not None:
                    view.network_name = f"{subnet} - {view.network_name}"
            view.navigate_url = resolve_navigate_url(view.navigate_url, root_host)

        return sorted(views.values(), key=lambda v: v.name)

    @staticmethod
    def _view_for(c: RuntimeContainer, policy: RoutePolicy, launch_routes: bool) -> ContainerView:
        primary = c.networks[0] if c.networks else None
        public_host = policy.public_host_for(c.name)
        navigate_url = None
        if public_host is not None:
            navigate_url = f"/launch/{c.name}" if launch_routes else public_host
        return ContainerView(
            name=c.name,
            state=c.state,
            running=c.state == "running",
            id=c.id,
            icon_url=c.labels.get(ICON_LABEL),
            network_name=primary.network_name if primary else None,
            ip_address=primary.ip_address if primary else None,
            navigate_url=navigate_url,
            mounts=list(c.mounts),
            ports=dedupe_ports(c.ports),
        )
