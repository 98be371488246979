from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ICON_LABEL = "net.unraid.docker.icon"


@dataclass(frozen=True)
class RuntimeEndpoint:
    network_name: str
    ip_address: str | None = None


@dataclass(frozen=True)
class RuntimePort:
    private_port: int
    public_port: int | None = None
    ip: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class RuntimeContainer:
    """One entry of the daemon's container list, read-only."""

    id: str
    name: str
    state: str
    networks: tuple[RuntimeEndpoint, ...] = ()
    mounts: tuple[str, ...] = ()
    ports: tuple[RuntimePort, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, attrs: Mapping[str, Any]) -> "RuntimeContainer":
        """Build from the raw JSON of ``GET /containers/json``."""
        names = attrs.get("Names") or []
        name = names[0].lstrip("/") if names else ""
        nets = ((attrs.get("NetworkSettings") or {}).get("Networks")) or {}
        return cls(
            id=attrs.get("Id", ""),
            name=name,
            state=attrs.get("State", ""),
            networks=tuple(
                RuntimeEndpoint(network_name=k, ip_address=(v or {}).get("IPAddress") or None)
                for k, v in nets.items()
            ),
            mounts=tuple(
                m["Source"] for m in (attrs.get("Mounts") or []) if (m.get("Source") or "").strip()
            ),
            ports=tuple(
                RuntimePort(
                    private_port=p.get("PrivatePort"),
                    public_port=p.get("PublicPort"),
                    ip=p.get("IP"),
                    type=p.get("Type"),
                )
                for p in (attrs.get("Ports") or [])
            ),
            labels=dict(attrs.get("Labels") or {}),
        )

    @property
    def network_names(self) -> list[str]:
        return [n.network_name for n in self.networks]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Port(_CamelModel):
    private_port: int | None = None
    public_port: int | None = None
    ip: str | None = None
    type: str | None = None


class CustomEntry(_CamelModel):
    """A user-declared container record; ``None`` means "not set"."""

    name: str
    state: str | None = None
    running: bool | None = None
    id: str | None = None
    icon_url: str | None = None
    navigate_url: str | None = None
    ip_address: str | None = None
    network_name: str | None = None
    mounts: list[str] | None = None
    ports: list[Port] | None = None
    extra_actions: dict[str, str] | None = None


# Fields a custom entry may override on a live view. ``name`` is the merge key.
OVERLAY_FIELDS = (
    "state",
    "running",
    "id",
    "icon_url",
    "navigate_url",
    "ip_address",
    "network_name",
    "mounts",
    "ports",
    "extra_actions",
)


class ContainerView(_CamelModel):
    name: str
    state: str | None = None
    running: bool | None = None
    id: str | None = None
    icon_url: str | None = None
    navigate_url: str | None = None
    ip_address: str | None = None
    network_name: str | None = None
    mounts: list[str] = Field(default_factory=list)
    ports: list[Port] = Field(default_factory=list)
    extra_actions: dict[str, str] = Field(default_factory=dict)

    def overlay(self, entry: CustomEntry) -> None:
        """Copy every field ``entry`` sets onto this view; unset fields keep the live value."""
        for f in OVERLAY_FIELDS:
            value = getattr(entry, f)
            if value is not None:
                setattr(self, f, value)

    @classmethod
    def from_custom(cls, entry: CustomEntry) -> "ContainerView":
        view = cls(name=entry.name)
        view.overlay(entry)
        return view
