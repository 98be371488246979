import sys

import pytest
from docker.errors import NotFound


# Ensure project root is importable (so `import dlaunch...` and `import cli` work without installing)
import os as _os
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


def container_attrs(name, state="running", networks=None, mounts=(), ports=(), labels=None, cid=None):
    """Shape of one entry of the daemon's ``GET /containers/json``."""
    return {
        "Id": cid or f"id-{name}",
        "Names": [f"/{name}"],
        "State": state,
        "Labels": labels or {},
        "Ports": [
            {"IP": "0.0.0.0", "PrivatePort": priv, "PublicPort": pub, "Type": "tcp"} for priv, pub in ports
        ],
        "Mounts": [{"Type": "bind", "Source": m, "Destination": "/config"} for m in mounts],
        "NetworkSettings": {"Networks": {n: {"IPAddress": ip} for n, ip in (networks or {}).items()}},
    }


class FakeContainer:
    def __init__(self, attrs):
        self.attrs = attrs
        self.id = attrs["Id"]
        self.calls = []

    def start(self):
        self.calls.append("start")

    def stop(self):
        self.calls.append("stop")

    def restart(self):
        self.calls.append("restart")

    def unpause(self):
        self.calls.append("unpause")


class FakeContainers:
    def __init__(self):
        self.items = []
        self.list_filters = []

    def list(self, all=False, filters=None, limit=-1, sparse=False):
        self.list_filters.append(filters)
        items = self.items
        if filters and "name" in filters:
            # the daemon's name filter is a substring match
            items = [c for c in items if filters["name"] in c.attrs["Names"][0]]
        return list(items)

    def get(self, container_id):
        for c in self.items:
            if c.id == container_id:
                return c
        raise NotFound(f"No such container: {container_id}")


class FakeNetwork:
    def __init__(self, name, subnet=None):
        self.name = name
        self.id = f"net-{name}"
        config = [{"Subnet": subnet, "Gateway": "x"}] if subnet else []
        self.attrs = {"Name": name, "Id": self.id, "IPAM": {"Driver": "default", "Config": config}}


class FakeNetworks:
    def __init__(self):
        self.items = []
        self.inspects = 0

    def list(self):
        return list(self.items)

    def get(self, network_id):
        self.inspects += 1
        return next(n for n in self.items if n.id == network_id)


class FakeDockerClient:
    def __init__(self):
        self.containers = FakeContainers()
        self.networks = FakeNetworks()

    def add_container(self, *args, **kwargs):
        c = FakeContainer(container_attrs(*args, **kwargs))
        self.containers.items.append(c)
        return c

    def add_network(self, name, subnet=None):
        self.networks.items.append(FakeNetwork(name, subnet))

    def ping(self):
        return True


@pytest.fixture
def docker_client():
    return FakeDockerClient()


@pytest.fixture
def policy_file(tmp_path):
    """Write a route policy document and return its path."""

    def _write(text):
        p = tmp_path / "policy.yaml"
        p.write_text(text, encoding="utf-8")
        return str(p)

    return _write
