"""Route requests under the API namespace to user handler files."""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote

from aiohttp import web

from .guard import Rejected, guard

logger = logging.getLogger(__name__)


class ApiPathRejected(Exception):
    pass


@dataclass(frozen=True)
class ApiRoute:
    name: str
    path: Path


def resolve(api_root, subpath: str, suffixes: Iterable[str]) -> Optional[ApiRoute]:
    """Find the handler file for ``subpath``, trying ``suffixes`` in order.

    ``users/profile`` maps to ``<api_root>/users/profile<suffix>``.
    """
    name = subpath.strip("/")
    if not name:
        return None
    for suffix in suffixes:
        try:
            resolved = guard(quote(name + suffix), api_root)
        except FileNotFoundError:
            continue
        if isinstance(resolved, Rejected):
            raise ApiPathRejected(name)
        if resolved.path.is_file():
            return ApiRoute(name, resolved.path)
    return None


async def dispatch(route: ApiRoute, method: str, request, loader) -> web.StreamResponse:
    method = method.upper()
    try:
        handlers = await asyncio.to_thread(loader.load_handlers, route.path)
    except Exception:
        logger.exception("Error loading API route %s from %s", route.name, route.path)
        return web.Response(status=500, text="Internal Server Error")

    handler = handlers.get(method)
    if handler is None:
        return web.Response(
            status=405,
            text=f"Method {method} not allowed for {route.name}",
            headers={"Allow": ", ".join(sorted(handlers))},
        )

    try:
        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Error handling API request %s %s", method, route.name)
        return web.Response(status=500, text="Internal Server Error")

    if not isinstance(response, web.StreamResponse):
        logger.error(
            "API handler %s %s returned %s instead of a response",
            method, route.name, type(response).__name__,
        )
        return web.Response(status=500, text="Internal Server Error")
    return response


class ApiDispatcher:
    def __init__(self, api_root, loader):
        self.api_root = Path(api_root)
        self.loader = loader

    async def handle(self, request, subpath: str) -> web.StreamResponse:
        name = subpath.strip("/")
        try:
            route = await asyncio.to_thread(
                resolve, self.api_root, name, self.loader.suffixes
            )
        except (ApiPathRejected, PermissionError):
            return web.Response(status=403, text="Forbidden")
        except Exception:
            logger.exception("Error resolving API route %s", name)
            return web.Response(status=500, text="Internal Server Error")
        if route is None:
            return web.Response(status=404, text=f"API endpoint not found: {name}")
        return await dispatch(route, request.method, request, self.loader)
