# lovely_docs_mcp/http_app.py
"""Streamable HTTP front end.

Every POST to /mcp gets its own stateless FastMCP server whose filters are the
configured defaults merged with the request's query string, e.g.
``/mcp?include-ecosystems=python&exclude-libs=old``.
"""
from __future__ import annotations

import datetime
import pathlib
import time
from typing import Any, Mapping, Optional

import uvicorn
from starlette.applications import Starlette
from starlette.datastructures import QueryParams
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .filters import FilterOptions, parse_filter_list
from .logger import logger
from .mcp import build_server
from .models import Library

# FilterOptions field -> query string key
QUERY_KEYS = {
    "include_libs": "include-libs",
    "include_ecosystems": "include-ecosystems",
    "exclude_libs": "exclude-libs",
    "exclude_ecosystems": "exclude-ecosystems",
}


def filters_from_query(params: QueryParams) -> FilterOptions:
    """Repeated keys and comma separated values are both accepted."""
    return FilterOptions(
        **{field: parse_filter_list(params.getlist(key)) for field, key in QUERY_KEYS.items()}
    )


class FilteredMCPEndpoint:
    """ASGI endpoint building one MCP server per request."""

    def __init__(
        self,
        libraries: Mapping[str, Library],
        defaults: Optional[FilterOptions] = None,
        doc_dir: Optional[pathlib.Path] = None,
        **settings: Any,
    ):
        self.libraries = libraries
        self.defaults = defaults or FilterOptions()
        self.doc_dir = doc_dir
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope)
        options = self.defaults.merge(filters_from_query(request.query_params))
        started = time.monotonic()

        server = build_server(
            self.libraries,
            options,
            doc_dir=self.doc_dir,
            stateless_http=True,
            json_response=True,
            **self.settings,
        )
        app = server.streamable_http_app()
        async with server.session_manager.run():
            await app(scope, receive, send)

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(f"{request.method} {request.url.path} handled in {elapsed_ms:.1f} ms")


def create_app(
    libraries: Mapping[str, Library],
    defaults: Optional[FilterOptions] = None,
    doc_dir: Optional[pathlib.Path] = None,
    **settings: Any,
) -> Starlette:
    started = time.monotonic()

    async def health(_request: Request) -> JSONResponse:
        uptime = time.monotonic() - started
        return JSONResponse(
            {
                "status": "ok",
                "uptime": int(uptime),
                "uptimeMs": int(uptime * 1000),
                "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
                "transport": "http",
                "libraries": len(libraries),
            }
        )

    endpoint = FilteredMCPEndpoint(libraries, defaults, doc_dir, **settings)
    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/mcp", endpoint),
        ]
    )


def run_http(
    libraries: Mapping[str, Library],
    defaults: Optional[FilterOptions],
    doc_dir: Optional[pathlib.Path],
    host: str,
    port: int,
    log_level: str = "info",
) -> None:
    # FastMCP derives its allowed Host headers from the bind address.
    app = create_app(libraries, defaults, doc_dir, host=host, port=port)
    logger.info(f"Lovely Docs MCP HTTP server running on http://{host}:{port}/mcp")
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    uvicorn.Server(config).run()
