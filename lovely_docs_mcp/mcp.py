# lovely_docs_mcp/mcp.py
from __future__ import annotations

import pathlib
from typing import Any, Dict, Literal, Mapping, Optional, Union

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ResourceError, ToolError

from .cache import get_ecosystems, get_library_summaries, library_index
from .errors import QueryError
from .filters import FilterOptions, filter_ecosystems, filter_libraries
from .logger import logger
from .models import MARKDOWN_LEVELS, Library, LibrarySummary, PageResult, is_markdown_level
from .query import get_page, get_page_index
from .utils import decode_page_path, to_yaml

SERVER_NAME = "lovely-docs-mcp"
URI_SCHEME = "lovely-docs://"

# Levels offered by the getPage tool; essence is reachable through resources.
ToolLevel = Literal["fulltext", "digest", "short_digest"]


# ---- rendering (transport independent) ----
def render_library_list(
    summaries: Mapping[str, LibrarySummary],
    ecosystem: Optional[str] = None,
    verbose: bool = False,
) -> str:
    idx = library_index(summaries, ecosystem or "*")
    payload: Union[Dict[str, Optional[str]], list] = idx if verbose else list(idx)
    return to_yaml(payload)


def _check_visible(visible: Mapping[str, LibrarySummary], library: str) -> None:
    if library not in visible:
        raise ToolError(f"Library not found or excluded: {library}")


def render_page_list(
    libraries: Mapping[str, Library],
    visible: Mapping[str, LibrarySummary],
    library: str,
    verbose: bool = False,
) -> Any:
    """Page listing for a visible library, as plain data."""
    _check_visible(visible, library)
    result = get_page_index(libraries, library, verbose)
    if isinstance(result, QueryError):
        raise ToolError(result.message)
    return result


def page_text(page: PageResult) -> str:
    if page.children is None:
        return page.text
    return page.text + "\nAvailable sub-pages:\n" + to_yaml(page.children)


def render_page(
    libraries: Mapping[str, Library],
    visible: Mapping[str, LibrarySummary],
    library: str,
    page: Optional[str] = None,
    level: Optional[str] = None,
) -> str:
    _check_visible(visible, library)
    if level is not None and not is_markdown_level(level):
        raise ToolError(
            f"Invalid level: {level}. Must be one of: {', '.join(MARKDOWN_LEVELS)}"
        )
    result = get_page(libraries, library, page, level)
    if isinstance(result, QueryError):
        raise ToolError(result.message)
    return page_text(result)


# ---- MCP server ----
def build_server(
    libraries: Mapping[str, Library],
    options: Optional[FilterOptions] = None,
    doc_dir: Optional[pathlib.Path] = None,
    **settings: Any,
) -> FastMCP:
    """FastMCP server over an already loaded library collection.

    The collection is shared, never copied or mutated; filters are applied once
    here and decide which libraries the server exposes.
    """
    options = options or FilterOptions()
    summaries = get_library_summaries(libraries)
    visible = filter_libraries(summaries, options)
    ecosystems = sorted(filter_ecosystems(get_ecosystems(summaries), options))
    eco_list = ", ".join(ecosystems)

    logger.info(
        f"Serving {len(visible)}/{len(libraries)} libraries, ecosystems: [{eco_list}]"
    )

    mcp = FastMCP(SERVER_NAME, **settings)

    @mcp.tool(name="health_ping", description="Returns simple pong")
    def ping() -> str:
        return "pong"

    @mcp.tool(
        name="admin_cache_status",
        description="Report the documentation directory and loaded library counts.",
    )
    def cache_status() -> Dict[str, Any]:
        return {
            "doc_dir": str(doc_dir) if doc_dir else None,
            "libraries_loaded": len(libraries),
            "libraries_visible": len(visible),
            "ecosystems": ecosystems,
            "filters": options.model_dump(),
        }

    @mcp.tool(
        name="listLibraries",
        description=(
            f"List available docs. Optionally filter by ecosystem: [{eco_list}]. "
            "Set verbose=true for descriptions."
        ),
    )
    def list_libraries(ecosystem: Optional[str] = None, verbose: bool = False) -> str:
        return render_library_list(visible, ecosystem, verbose)

    @mcp.tool(
        name="listPages",
        description=(
            "List documentation pages for a library. "
            "Get available libraries with the `listLibraries` tool"
        ),
    )
    def list_pages(library: str, verbose: bool = False) -> str:
        return to_yaml(render_page_list(libraries, visible, library, verbose))

    @mcp.tool(
        name="getPage",
        description=(
            "Get markdown content for a documentation page. Provide the library name, "
            "optional page path within the library, and detail level "
            "(fulltext, digest, short_digest)."
        ),
    )
    def get_page_tool(
        library: str, page: Optional[str] = None, level: Optional[ToolLevel] = None
    ) -> str:
        return render_page(libraries, visible, library, page, level)

    # ---- resources ----
    def doc_index(ecosystem: str, verbose: bool) -> str:
        return render_library_list(visible, ecosystem, verbose)

    @mcp.resource(
        URI_SCHEME + "doc-index/{ecosystem}",
        name="doc-index",
        description=f"Index of available libraries. Ecosystems: [{eco_list}] or * for all.",
        mime_type="text/yaml",
    )
    def doc_index_resource(ecosystem: str) -> str:
        return doc_index(ecosystem, False)

    @mcp.resource(
        URI_SCHEME + "doc-index-verbose/{ecosystem}",
        name="doc-index-verbose",
        description="Index of available libraries with their descriptions.",
        mime_type="text/yaml",
    )
    def doc_index_verbose_resource(ecosystem: str) -> str:
        return doc_index(ecosystem, True)

    def page_index(name: str, verbose: bool) -> str:
        try:
            pages = render_page_list(libraries, visible, name, verbose)
        except ToolError as e:
            raise ResourceError(str(e)) from e
        return to_yaml({"/": pages})

    @mcp.resource(
        URI_SCHEME + "index/{name}",
        name="page-index",
        description="Index of pages for a library.",
        mime_type="text/yaml",
    )
    def page_index_resource(name: str) -> str:
        return page_index(name, False)

    @mcp.resource(
        URI_SCHEME + "index-verbose/{name}",
        name="page-index-verbose",
        description="Index of pages for a library, with the essence of every page.",
        mime_type="text/yaml",
    )
    def page_index_verbose_resource(name: str) -> str:
        return page_index(name, True)

    def doc_page(name: str, level: str, page: Optional[str]) -> str:
        try:
            return render_page(libraries, visible, name, page, level)
        except ToolError as e:
            raise ResourceError(str(e)) from e

    @mcp.resource(
        URI_SCHEME + "page/{name}/{level}",
        name="doc-page-root",
        description=(
            "Root page of a library. level: [fulltext, digest, short_digest, essence] "
            "- digest is a good default"
        ),
        mime_type="text/markdown",
    )
    def doc_page_root_resource(name: str, level: str) -> str:
        return doc_page(name, level, None)

    @mcp.resource(
        URI_SCHEME + "page/{name}/{level}/{page}",
        name="doc-page",
        description=(
            "A doc page. page: path inside the library, percent-encoded (a%2Fb). "
            "level: [fulltext, digest, short_digest, essence]"
        ),
        mime_type="text/markdown",
    )
    def doc_page_resource(name: str, level: str, page: str) -> str:
        return doc_page(name, level, decode_page_path(page))

    return mcp
