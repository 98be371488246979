from __future__ import annotations

import json
from html import escape
from itertools import groupby

from .models import ContainerView


STYLE = """
body { background-color: #0f172a; color: #e2e8f0; font-family: 'Titillium Web', 'Segoe UI', sans-serif; padding: 20px; }
a { color: inherit; text-decoration: none; }
.network-label { display: block; color: #94a3b8; font-weight: 600; margin: 18px 0 8px; }
.container-grid { display: flex; flex-wrap: wrap; gap: 12px; }
.container-item { display: flex; gap: 10px; align-items: center; background: #1e293b; border: 1px solid #334155; border-radius: 10px; padding: 10px 14px; min-width: 220px; }
.c-launchable:hover { border-color: #38bdf8; }
.c-off { opacity: 0.7; }
.c-hidden { opacity: 0.5; }
.container-img { width: 40px; height: 40px; }
.container-title { font-weight: 600; }
.container-detail { font-size: 0.75em; color: #94a3b8; }
.running-status .green { color: #4ade80; }
.running-status .red { color: #f87171; }
.actions a { font-size: 0.8em; color: #60a5fa; margin-right: 8px; }
.error-box { background: #7f1d1d; padding: 16px; border-radius: 10px; }
.center { text-align: center; margin-top: 20%; }
"""


def _page(title: str | None, body: str, script: str = "") -> str:
    title_tag = f"<title>{escape(title)}</title>" if title else ""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    {title_tag}
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.2/css/all.min.css">
    <style>{STYLE}</style>
</head>
<body>
{body}
<script>{script}</script>
</body>
</html>
"""


def _running_status(running: bool | None) -> str:
    if running is True:
        return "<div class='running-status'><i class='fa-solid fa-play green'></i> ON</div>"
    if running is False:
        return "<div class='running-status'><i class='fa-solid fa-stop red'></i> OFF</div>"
    return ""


def _detail(c: ContainerView) -> str:
    """``network - ip`` and the ``private::public`` port list."""
    lines = []
    if c.network_name or c.ip_address:
        lines.append(f"<span>{escape(c.network_name or '')} - {escape(c.ip_address or '')}</span>")
    if c.ports:
        ports = ", ".join(
            f"{'' if p.private_port is None else p.private_port}::{'' if p.public_port is None else p.public_port}"
            for p in c.ports
        )
        lines.append(f"<span>{escape(ports)}</span>")
    return f"<div class='container-detail'>{'<br/>'.join(lines)}</div>" if lines else ""


def _tile(c: ContainerView, new_window: bool) -> str:
    icon = f"<img class='container-img' src='{escape(c.icon_url)}'>" if c.icon_url else ""
    name = escape(c.name)
    links = [f"<a href='{escape(url)}'>{escape(label)}</a>" for label, url in c.extra_actions.items()]
    if c.id:
        action = "stop" if c.running else "start"
        links.append(f"<a href='/{action}/{name}'>{action}</a>")
        links.append(f"<a href='/restart/{name}'>restart</a>")
    actions = f"<div class='actions'>{''.join(links)}</div>" if links else ""
    inner = (
        f"{icon}<div><div class='container-title'>{name}</div>{_running_status(c.running)}"
        f"{_detail(c)}{actions}</div>"
    )

    if not c.navigate_url:
        return f"<div class='container-item c-hidden'>{inner}</div>"
    target = " target='_blank'" if new_window else ""
    onoff = "c-on" if c.running else "c-off"
    return (
        f"<div class='container-item c-launchable {onoff}'>"
        f"<a href='{escape(c.navigate_url)}'{target}>{inner}"
        "<i class='fa-solid fa-rocket launch-icon'></i></a></div>"
    )


def dashboard_page(title: str | None, containers: list[ContainerView] | None, new_window: bool = False) -> str:
    """Inventory grouped by network. ``containers=None`` means the data was not ready in time."""
    if containers is None:
        return _page(title, "<div class='center'>Loading...</div>", "window.location.replace('/?wait=1');")
    if not containers:
        return _page(title, "<div class='error-box'>There were no containers returned by the API.</div>")

    def network_key(c: ContainerView) -> str:
        return c.network_name or ""

    groups = []
    for net, items in groupby(sorted(containers, key=lambda c: (network_key(c), c.name)), key=network_key):
        tiles = "".join(_tile(c, new_window) for c in items)
        groups.append(f"<span class='network-label'>{escape(net)}</span><div class='container-grid'>{tiles}</div>")
    body = f"<div class='network-group'>{''.join(groups)}</div>"
    return _page(title, body, "setTimeout(() => window.location.reload(), 3000);")


def launch_page(title: str | None, container_name: str, navigate_url: str, wait_s: int = 5) -> str:
    """Shown while a container is starting; navigates once the wait is over."""
    body = f"<div class='center'><div class='network-label'>Waiting for {escape(container_name)}...</div></div>"
    script = f"setTimeout(() => {{ window.location.href = {json.dumps(navigate_url)}; }}, {int(wait_s) * 1000});"
    return _page(title, body, script)


def action_page(title: str | None, message: str, post_url: str) -> str:
    body = (
        f"<div class='center'><div class='network-label'>{escape(message)}</div>"
        f"<form id='action' method='post' action='{escape(post_url)}'></form></div>"
    )
    return _page(title, body, "document.getElementById('action').submit();")
