import logging
import time
from urllib.parse import unquote

from aiohttp import web

from .api import ApiDispatcher
from .client import RELOAD_PATH
from .hub import ReloadHub
from .loader import PythonModuleLoader
from .log import color_enabled, colored_status, status_level
from .static import StaticResponder
from .watcher import ChangeWatcher

logger = logging.getLogger(__name__)


class LiveServer:
    def __init__(self, config, loader=None):
        self.config = config
        self.loader = loader or PythonModuleLoader()
        self.hub = ReloadHub()
        self.static = StaticResponder(config)
        self.api = None
        if config.api_root is not None:
            self.api = ApiDispatcher(config.api_root, self.loader)
        self.watcher = ChangeWatcher(config.root_path, config.watched_extensions, self.hub)
        self.live_reload = config.watch

    def disable_live_reload(self):
        self.live_reload = False
        self.static.inject = False

    # -------- lifecycle --------
    async def on_startup(self, app):
        if self.config.watch and not self.watcher.start():
            self.disable_live_reload()

    async def on_shutdown(self, app):
        await self.hub.close_all()

    async def on_cleanup(self, app):
        await self.watcher.stop()

    # -------- routing --------
    def api_subpath(self, path):
        prefix = self.config.api_prefix
        if self.api is None or prefix is None:
            return None
        if path == prefix or path.startswith(prefix + "/"):
            return path[len(prefix):]
        return None

    async def handle(self, request: web.Request) -> web.StreamResponse:
        raw_path = request_path(request)
        path = unquote(raw_path)

        if path == RELOAD_PATH and self.live_reload:
            return await self.hub.handle(request)

        subpath = self.api_subpath(path)
        if subpath is not None:
            return await self.api.handle(request, subpath)

        return await self.static.respond(raw_path)


SERVER = web.AppKey("server", LiveServer)


def request_path(request) -> str:
    """The still-encoded path, without query string or fragment."""
    raw = request.raw_path
    for sep in ("?", "#"):
        raw = raw.split(sep, 1)[0]
    return raw or "/"


def client_address(request) -> str:
    headers = request.headers
    forwarded = headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return headers.get("X-Real-IP") or request.remote or "-"


# -------- middlewares --------
def _decorate(response, cors_origin):
    if getattr(response, "prepared", False):
        return
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    if cors_origin:
        response.headers["Access-Control-Allow-Origin"] = cors_origin


@web.middleware
async def response_headers(request, handler):
    origin = request.app[SERVER].config.cors_origin
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        _decorate(exc, origin)
        raise
    _decorate(response, origin)
    return response


@web.middleware
async def access_log(request, handler):
    started = time.perf_counter()
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        _log_request(request, exc.status, started)
        raise
    _log_request(request, response.status, started)
    return response


def _log_request(request, status, started):
    elapsed = (time.perf_counter() - started) * 1000
    logger.log(
        status_level(status),
        "-- %s %s %s %s %.1fms",
        client_address(request),
        request.method,
        unquote(request_path(request)),
        colored_status(status, color=color_enabled(logger)),
        elapsed,
    )


# -------- app --------
def create_app(config, loader=None) -> web.Application:
    server = LiveServer(config, loader)
    app = web.Application(middlewares=[access_log, response_headers])
    app[SERVER] = server
    app.on_startup.append(server.on_startup)
    app.on_shutdown.append(server.on_shutdown)
    app.on_cleanup.append(server.on_cleanup)
    app.router.add_route("*", "/{path:.*}", server.handle)
    return app


def run(config, loader=None):
    app = create_app(config, loader)
    logger.info("File server running on %s serving %s", config.url, config.root_path)
    web.run_app(app, host=config.host, port=config.port, access_log=None, print=None)
    logger.info("Server shutdown")
