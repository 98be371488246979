from __future__ import annotations

import re


IPV4_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")
ROOT_RE = re.compile(r"^.+?\.(.+\..+$)")


def root_host_for(host: str) -> str:
    """Root domain used to expand ``.*`` navigate URLs.

    ``launcher.example.com`` -> ``example.com``; an IPv4 host is used verbatim.
    """
    if IPV4_RE.match(host):
        return host
    return ROOT_RE.sub(r"\1", host)


def resolve_navigate_url(url: str | None, root_host: str) -> str | None:
    if url is None:
        return None
    if url.endswith(".*"):
        url = url[:-2] + "." + root_host
    if "*" in url:
        # still ambiguous after substitution: not launchable
        return None
    return url
