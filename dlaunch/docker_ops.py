from __future__ import annotations

from threading import Lock
from typing import Any

import docker
from docker.errors import DockerException

from .models import RuntimeContainer
from .settings import settings


ALL_CONTAINERS_LIMIT = 1000

_client_lock = Lock()
_client: docker.DockerClient | None = None


def get_client() -> docker.DockerClient:
    """Docker client for ``DL_DOCKER`` (or the environment), created once and reused."""
    global _client
    with _client_lock:
        if _client is None:
            if settings.docker_url:
                _client = docker.DockerClient(base_url=settings.docker_url)
            else:
                _client = docker.from_env()
        return _client


def docker_available() -> bool:
    try:
        get_client().ping()
        return True
    except DockerException:
        return False


def list_runtime_containers(client: Any, name: str | None = None) -> list[RuntimeContainer]:
    """Snapshot of the daemon's containers, optionally filtered server-side by name.

    The daemon's ``name`` filter is a substring match, so callers that want one
    container still have to compare names themselves.
    """
    if name:
        containers = client.containers.list(all=True, filters={"name": name}, sparse=True)
    else:
        containers = client.containers.list(all=True, limit=ALL_CONTAINERS_LIMIT, sparse=True)
    return [RuntimeContainer.from_api(c.attrs) for c in containers]


def start_container(client: Any, container_id: str) -> None:
    client.containers.get(container_id).start()


def stop_container(client: Any, container_id: str) -> None:
    client.containers.get(container_id).stop()


def restart_container(client: Any, container_id: str) -> None:
    client.containers.get(container_id).restart()


def unpause_container(client: Any, container_id: str) -> None:
    client.containers.get(container_id).unpause()
