from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from docker.errors import DockerException, NotFound
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse

from dlaunch import db
from dlaunch.docker_ops import (
    docker_available,
    get_client,
    restart_container,
    start_container,
    stop_container,
    unpause_container,
)
from dlaunch.models import ContainerView
from dlaunch.navigation import root_host_for
from dlaunch.pages import action_page, dashboard_page, launch_page
from dlaunch.reconciler import Reconciler
from dlaunch.settings import ConfigError, settings


# How long "/" waits for the inventory before rendering without it.
# The fallback page then loads "/?wait=1", which skips the race.
PRELOAD_TIMEOUT_S = 0.3

_reconciler: Reconciler | None = None
_preload_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="preload")


def get_reconciler() -> Reconciler:
    global _reconciler
    if _reconciler is None:
        _reconciler = Reconciler.from_settings(settings, get_client)
    return _reconciler


def get_docker_client() -> Any:
    return get_client()


@asynccontextmanager
async def lifespan(app: FastAPI):
    db.init_db()
    # Builds the reconciler now so malformed URL templates stop the server at start-up.
    get_reconciler()
    db.log_event("INFO", "Launcher started")
    yield


app = FastAPI(title="Docker Launcher", lifespan=lifespan)


@app.exception_handler(ConfigError)
def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    db.log_event("ERROR", f"Configuration error: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(NotFound)
def docker_not_found_handler(request: Request, exc: NotFound) -> PlainTextResponse:
    return PlainTextResponse("Container not found", status_code=404)


@app.exception_handler(DockerException)
def docker_error_handler(request: Request, exc: DockerException) -> JSONResponse:
    db.log_event("ERROR", f"Docker error: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=503, content={"detail": f"Docker is not available: {exc}"})


def _root_host(request: Request) -> str:
    return root_host_for(request.headers.get("host") or request.url.netloc)


def _require(reconciler: Reconciler, request: Request, name: str) -> ContainerView:
    c = reconciler.resolve(_root_host(request), name, launch_routes=False)
    if c is None:
        raise HTTPException(status_code=404, detail=f"Container '{name}' not found")
    return c


# --- PAGES ---
@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, wait: bool = False, reconciler: Reconciler = Depends(get_reconciler)) -> str:
    if wait:
        containers = reconciler.all_containers(_root_host(request))
        return dashboard_page(settings.page_title, containers, settings.launch_new_window)
    future = _preload_pool.submit(reconciler.all_containers, _root_host(request))
    try:
        containers = future.result(timeout=PRELOAD_TIMEOUT_S)
    except FutureTimeout:
        containers = None
    return dashboard_page(settings.page_title, containers, settings.launch_new_window)


@app.get("/launch/{name}")
def launch(
    name: str,
    request: Request,
    reconciler: Reconciler = Depends(get_reconciler),
    client: Any = Depends(get_docker_client),
):
    c = reconciler.resolve(_root_host(request), name, launch_routes=False)
    if c is None:
        return PlainTextResponse("Container not found", status_code=404)
    if not (c.navigate_url or "").strip():
        return PlainTextResponse("Container has no navigation target", status_code=412)

    if c.state in {"created", "exited"}:
        start_container(client, c.id)
        db.log_event("INFO", "Started for launch", container_name=c.name)
        return HTMLResponse(launch_page(settings.page_title, c.name, c.navigate_url))
    if c.state == "paused":
        unpause_container(client, c.id)
        db.log_event("INFO", "Unpaused for launch", container_name=c.name)
        return HTMLResponse(launch_page(settings.page_title, c.name, c.navigate_url))
    if c.state == "restarting":
        return HTMLResponse(launch_page(settings.page_title, c.name, c.navigate_url))
    if c.state == "running":
        return RedirectResponse(c.navigate_url, status_code=302)
    return PlainTextResponse(f"Unhandled container state: '{c.state}'", status_code=500)


# --- STATUS ---
@app.get("/status", response_model=list[ContainerView])
def status_all(request: Request, reconciler: Reconciler = Depends(get_reconciler)) -> list[ContainerView]:
    return reconciler.all_containers(_root_host(request))


@app.get("/status/{name}", response_model=ContainerView)
def status_one(name: str, request: Request, reconciler: Reconciler = Depends(get_reconciler)) -> ContainerView:
    return _require(reconciler, request, name)


# --- CONTROL ---
_CONTROL = {
    "start": ("Starting", start_container),
    "stop": ("Stopping", stop_container),
    "restart": ("Restarting", restart_container),
}


@app.get("/{action}/{name}", response_class=HTMLResponse)
def control_page(action: str, name: str) -> str:
    if action not in _CONTROL:
        raise HTTPException(status_code=404)
    verb, _ = _CONTROL[action]
    return action_page(settings.page_title, f"{verb} {name}...", f"/{action}/{name}")


@app.post("/{action}/{name}")
def control(
    action: str,
    name: str,
    request: Request,
    reconciler: Reconciler = Depends(get_reconciler),
    client: Any = Depends(get_docker_client),
) -> RedirectResponse:
    if action not in _CONTROL:
        raise HTTPException(status_code=404)
    c = _require(reconciler, request, name)
    _, op = _CONTROL[action]
    op(client, c.id)
    db.log_event("INFO", f"{action} requested", container_name=c.name)
    return RedirectResponse("/", status_code=303)


# --- OPS ---
@app.get("/events")
def events(limit: int = 50) -> list[dict[str, Any]]:
    return [asdict(e) for e in db.list_events(limit)]


@app.get("/healthz")
def healthz() -> dict[str, Any]:
    return {"status": "healthy", "docker": docker_available()}


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
