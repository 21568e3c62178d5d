"""WebSocket sessions that receive reload messages."""

import asyncio
import json
import logging

from aiohttp import WSCloseCode, WSMsgType, web

logger = logging.getLogger(__name__)

SEND_TIMEOUT = 5.0
HEARTBEAT = 30.0


class ReloadHub:
    """Owns the live sessions; every mutation happens under one lock."""

    def __init__(self, send_timeout: float = SEND_TIMEOUT):
        self.send_timeout = send_timeout
        self._sessions = set()
        self._lock = asyncio.Lock()

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session):
        return session in self._sessions

    async def register(self, session) -> int:
        async with self._lock:
            self._sessions.add(session)
            return len(self._sessions)

    async def remove(self, session) -> int:
        async with self._lock:
            self._sessions.discard(session)
            return len(self._sessions)

    async def broadcast(self, message) -> int:
        """Send ``message`` to every open session; returns the delivery count."""
        payload = json.dumps(message.to_json())
        async with self._lock:
            sessions = list(self._sessions)
            results = await asyncio.gather(
                *(self._send(ws, payload) for ws in sessions),
                return_exceptions=True,
            )
            delivered = 0
            for ws, result in zip(sessions, results):
                if result is True:
                    delivered += 1
                    continue
                if isinstance(result, BaseException):
                    logger.warning("Failed to send to live-reload client: %r", result)
                self._sessions.discard(ws)
        return delivered

    async def _send(self, ws, payload) -> bool:
        if ws.closed:
            return False
        try:
            await asyncio.wait_for(ws.send_str(payload), self.send_timeout)
        except (ConnectionError, RuntimeError, asyncio.TimeoutError) as exc:
            logger.warning("Failed to send to live-reload client: %s", exc)
            return False
        return True

    async def close_all(self):
        async with self._lock:
            sessions = list(self._sessions)
            self._sessions.clear()
        results = await asyncio.gather(
            *(ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown") for ws in sessions),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.warning("Failed to close live-reload client: %r", result)

    # -------- WebSocket --------
    async def handle(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse(heartbeat=HEARTBEAT)
        await ws.prepare(request)
        count = await self.register(ws)
        logger.info("WebSocket client connected (%d total)", count)

        try:
            async for msg in ws:
                # clients never send anything meaningful
                if msg.type == WSMsgType.ERROR:
                    logger.warning("WebSocket error: %s", ws.exception())
                    break
        finally:
            count = await self.remove(ws)
            logger.info("WebSocket client disconnected (%d remaining)", count)
        return ws
