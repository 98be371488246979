from __future__ import annotations

import argparse
import json
import sys

import requests


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Docker Launcher CLI")
    p.add_argument("--api", default="http://localhost:8080", help="API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_status = sub.add_parser("status", help="Show the container inventory, or one container")
    s_status.add_argument("name", nargs="?")

    for cmd in ("start", "stop", "restart"):
        s = sub.add_parser(cmd, help=f"{cmd.capitalize()} a container")
        s.add_argument("name")

    s_ev = sub.add_parser("events", help="Show events")
    s_ev.add_argument("--limit", type=int, default=20)

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "status":
        url = f"{base}/status/{args.name}" if args.name else f"{base}/status"
        r = requests.get(url, timeout=10)
        if r.status_code == 404:
            print(f"Container '{args.name}' not found", file=sys.stderr)
            return 1
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "events":
        _print(requests.get(f"{base}/events", params={"limit": args.limit}, timeout=10).json())
        return 0

    if args.cmd in {"start", "stop", "restart"}:
        # The API answers with a redirect to the dashboard; the status code is all we need.
        r = requests.post(f"{base}/{args.cmd}/{args.name}", timeout=30, allow_redirects=False)
        if r.status_code == 404:
            print(f"Container '{args.name}' not found", file=sys.stderr)
            return 1
        if r.status_code >= 400:
            print(r.text, file=sys.stderr)
            return 1
        _print({"container": args.name, "action": args.cmd, "ok": True})
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
