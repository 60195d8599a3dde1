"""The HTTP server: middleware around the order book application and its entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import time
from collections.abc import Sequence

import uvicorn
from starlette.applications import Starlette
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from yolo.api import create_app
from yolo.server_config import ServerConfig
from yolo.server_state import ServerState

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0
INNER_TIMEOUT = 3.0


class _TimeoutMiddleware:
    """Answer 408 when a request takes longer than `timeout` seconds."""

    def __init__(self, app: ASGIApp, timeout: float) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def tracked_send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, tracked_send), self.timeout)
        except TimeoutError:
            if started:
                raise
            await send({"type": "http.response.start", "status": 408, "headers": []})
            await send({"type": "http.response.body", "body": b""})


class _TraceMiddleware:
    """Log each request with its status and latency."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method, path = scope.get("method", ""), scope.get("path", "")
        start = time.perf_counter()
        logger.debug("started processing request %s %s", method, path)

        async def traced_send(message: Message) -> None:
            if message["type"] == "http.response.start":
                latency_ms = (time.perf_counter() - start) * 1000
                logger.debug(
                    "finished processing request %s %s status=%s latency=%.3fms",
                    method, path, message["status"], latency_ms,
                )
            await send(message)

        await self.app(scope, receive, traced_send)


def build_app(state: ServerState | None = None) -> Starlette:
    """The API application with tracing and request timeouts."""
    app = create_app(ServerState.default() if state is None else state)
    app.add_middleware(_TimeoutMiddleware, timeout=INNER_TIMEOUT)
    app.add_middleware(_TraceMiddleware)
    app.add_middleware(_TimeoutMiddleware, timeout=REQUEST_TIMEOUT)
    return app


def _configure_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "DEBUG").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Read the configuration and serve the API until interrupted."""
    parser = argparse.ArgumentParser(
        prog="yolo-server",
        description="Serve the order book API using config/ in the current directory.",
    )
    parser.parse_args(argv)

    config = ServerConfig.read()
    _configure_logging()

    app = build_app(ServerState.default())
    logger.debug("listening on %s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level="info")
    return 0