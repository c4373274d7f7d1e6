"""Tests for the streamable HTTP front end and per-request filters."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
from starlette.datastructures import QueryParams
from starlette.responses import PlainTextResponse
from starlette.testclient import TestClient

from lovely_docs_mcp import http_app
from lovely_docs_mcp.filters import FilterOptions
from lovely_docs_mcp.http_app import create_app, filters_from_query


class RecordingServer:
    """Stands in for FastMCP: answers every request with 'ok'."""

    def __init__(self):
        self.session_manager = self
        self.sessions = 0

    @asynccontextmanager
    async def run(self):
        self.sessions += 1
        yield

    def streamable_http_app(self):
        return PlainTextResponse("ok")


@pytest.fixture
def built(monkeypatch):
    """Capture the arguments of each build_server call."""
    calls = []

    def fake_build_server(libraries, options=None, doc_dir=None, **settings):
        server = RecordingServer()
        calls.append({"options": options, "doc_dir": doc_dir, "settings": settings, "server": server})
        return server

    monkeypatch.setattr(http_app, "build_server", fake_build_server)
    return calls


@pytest.mark.http
class TestFiltersFromQuery:
    """Test query string -> FilterOptions."""

    def test_empty(self):
        assert filters_from_query(QueryParams("")).is_empty()

    def test_comma_separated_and_repeated(self):
        params = QueryParams("include-libs=a,b&include-libs=c&exclude-ecosystems=js")
        options = filters_from_query(params)
        assert options.include_libs == ["a", "b", "c"]
        assert options.exclude_ecosystems == ["js"]
        assert options.include_ecosystems == []

    def test_unknown_keys_ignored(self):
        assert filters_from_query(QueryParams("verbose=1&includeLibs=a")).is_empty()


@pytest.mark.http
class TestHttpApp:
    """Test routing and per-request server construction."""

    def test_health(self, libraries):
        client = TestClient(create_app(libraries))
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["libraries"] == 2

    def test_query_filters_merged_over_defaults(self, libraries, built):
        defaults = FilterOptions(exclude_libs=["old"])
        client = TestClient(create_app(libraries, defaults))

        response = client.post("/mcp?include-ecosystems=python&exclude-libs=libA", json={})
        assert response.status_code == 200
        assert response.text == "ok"

        options = built[0]["options"]
        assert options.include_ecosystems == ["python"]
        assert options.exclude_libs == ["old", "libA"]

    def test_server_per_request(self, libraries, built):
        client = TestClient(create_app(libraries, FilterOptions(include_libs=["libB"])))
        client.post("/mcp", json={})
        client.post("/mcp?include-libs=libA", json={})

        assert len(built) == 2
        assert built[0]["options"].include_libs == ["libB"]
        assert built[1]["options"].include_libs == ["libB", "libA"]
        assert all(call["server"].sessions == 1 for call in built)

    def test_servers_are_stateless_json(self, libraries, built, tmp_path):
        client = TestClient(create_app(libraries, doc_dir=tmp_path, host="0.0.0.0"))
        client.post("/mcp", json={})

        call = built[0]
        assert call["doc_dir"] == tmp_path
        assert call["settings"]["stateless_http"] is True
        assert call["settings"]["json_response"] is True
        assert call["settings"]["host"] == "0.0.0.0"
