"""File, directory-listing and not-found responses for the served tree."""

import asyncio
import logging
import os
from pathlib import Path
from typing import List
from urllib.parse import unquote

from aiohttp import web

from .client import inject_reload_script
from .guard import Rejected, guard
from .mime import content_type, is_html, is_revalidated, mime
from .templates import ListingEntry, render_directory_listing, render_not_found

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"
NO_CACHE = "no-cache, no-store, must-revalidate"
REVALIDATE = "public, max-age=0, must-revalidate"
HTML_TYPE = "text/html; charset=utf-8"


def forbidden() -> web.Response:
    return web.Response(status=403, text="Forbidden")


def internal_error() -> web.Response:
    return web.Response(status=500, text="Internal Server Error")


def list_directory(path: Path) -> List[ListingEntry]:
    """Immediate children, directories first, each group in ordinal order."""
    with os.scandir(path) as it:
        entries = [ListingEntry(e.name, e.is_dir()) for e in it]
    return sorted(entries, key=lambda e: (not e.is_dir, e.name))


def _read_bytes(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _ensure_readable(path: Path) -> None:
    # FileResponse opens the file only once it is being sent
    with open(path, "rb"):
        pass


class StaticResponder:
    def __init__(self, config):
        self.config = config
        self.root = config.root_path
        self.inject = config.watch

    async def respond(self, raw_path: str) -> web.StreamResponse:
        display_path = unquote(raw_path)
        try:
            return await self._resolve(raw_path, display_path)
        except PermissionError:
            return forbidden()
        except Exception:
            logger.exception("Error serving %s", display_path)
            return internal_error()

    async def _resolve(self, raw_path, display_path, fallback=False):
        try:
            resolved = guard(raw_path, self.root)
        except FileNotFoundError:
            return await self._missing(display_path, fallback)
        if isinstance(resolved, Rejected):
            return forbidden()

        path = resolved.path
        if path.is_dir():
            index_raw = raw_path.rstrip("/") + "/" + INDEX_FILE
            try:
                index = guard(index_raw, self.root)
            except FileNotFoundError:
                entries = await asyncio.to_thread(list_directory, path)
                html = render_directory_listing(
                    display_path, entries, show_parent=path != self.root
                )
                return self._directory_listing(html)
            if isinstance(index, Rejected):
                return forbidden()
            path = index.path

        try:
            return await self.serve_file(path)
        except (FileNotFoundError, IsADirectoryError):
            # removed or replaced between the guard and the read
            return await self._missing(display_path, fallback)

    async def _missing(self, display_path, fallback):
        if self.config.spa and not fallback:
            return await self._resolve("/" + INDEX_FILE, display_path, fallback=True)
        return web.Response(
            status=404,
            text=render_not_found(display_path),
            headers={"Content-Type": HTML_TYPE, "Cache-Control": NO_CACHE},
        )

    def _directory_listing(self, html: str) -> web.Response:
        body = html.encode("utf-8")
        if self.inject:
            body = inject_reload_script(body)
        return web.Response(
            body=body,
            headers={"Content-Type": HTML_TYPE, "Cache-Control": NO_CACHE},
        )

    async def serve_file(self, path: Path) -> web.StreamResponse:
        mime_type = mime(path.suffix)
        headers = {"Content-Type": content_type(mime_type)}

        if not is_html(mime_type):
            if is_revalidated(mime_type):
                headers["Cache-Control"] = REVALIDATE
            await asyncio.to_thread(_ensure_readable, path)
            return web.FileResponse(path, headers=headers)

        body = await asyncio.to_thread(_read_bytes, path)
        if self.inject:
            body = inject_reload_script(body)
        headers["Cache-Control"] = NO_CACHE
        headers["Pragma"] = "no-cache"
        headers["Expires"] = "0"
        return web.Response(body=body, headers=headers)
