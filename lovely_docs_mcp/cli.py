# lovely_docs_mcp/cli.py
"""Command line entry point: run the MCP server or list available libraries."""
from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Mapping, Optional

from .cache import get_library_summaries, scan_libraries
from .config import ConfigError, ServerConfig, load_config
from .filters import filter_libraries
from .http_app import run_http
from .logger import logger, setup_logging
from .mcp import build_server
from .models import LibrarySummary
from .query import flatten_page_paths, get_page_index


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--doc-dir",
        help="Directory with one subdirectory per library (env: LOVELY_DOCS_DOC_DIR)",
    )
    parser.add_argument("--include-libs", nargs="+", help="Limit to specific library keys")
    parser.add_argument(
        "--include-ecosystems", nargs="+", help="Limit to specific ecosystems"
    )
    parser.add_argument("--exclude-libs", nargs="+", help="Exclude specific library keys")
    parser.add_argument(
        "--exclude-ecosystems", nargs="+", help="Exclude specific ecosystems"
    )
    parser.add_argument(
        "--max-workers", type=int, help="Threads used to load libraries at startup"
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lovely-docs-mcp",
        description="Serve pre-generated library documentation over MCP",
    )
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the MCP server (default)")
    _add_common_args(serve)
    serve.add_argument(
        "-t",
        "--transport",
        choices=["stdio", "streamable-http"],
        help="Transport mode (default: stdio)",
    )
    serve.add_argument("--host", help="Bind address for HTTP mode (default: 127.0.0.1)")
    serve.add_argument("-p", "--port", type=int, help="Port for HTTP mode (default: 3000)")

    lst = sub.add_parser("list", aliases=["l"], help="List available documentation libraries")
    _add_common_args(lst)
    lst.add_argument(
        "--pages", action="store_true", help="Also print the page paths of each library"
    )
    return parser


def group_by_ecosystem(
    summaries: Mapping[str, LibrarySummary],
) -> Dict[str, List[str]]:
    """Ecosystem -> library keys; untagged libraries go under 'Other' (last)."""
    groups: Dict[str, List[str]] = {}
    other: List[str] = []
    for key, lib in summaries.items():
        if not lib.ecosystems:
            other.append(key)
        for eco in lib.ecosystems:
            groups.setdefault(eco, []).append(key)
    if other:
        groups["Other"] = other
    return groups


def list_command(config: ServerConfig, show_pages: bool = False) -> int:
    libraries = scan_libraries(config.doc_dir, config.max_workers)
    summaries = filter_libraries(get_library_summaries(libraries), config.filters)

    if not summaries:
        print("No libraries found.")
        return 0

    print("\nAvailable Libraries:")
    for eco, keys in group_by_ecosystem(summaries).items():
        print(f"\n{eco}:")
        for key in keys:
            print(f"  {summaries[key].name} → {key}")
            if show_pages:
                for path in flatten_page_paths(get_page_index(libraries, key)):
                    print(f"      {path}")
    print()
    return 0


def serve_command(config: ServerConfig) -> int:
    libraries = scan_libraries(config.doc_dir, config.max_workers)
    if config.transport == "streamable-http":
        run_http(
            libraries,
            config.filters,
            config.doc_dir,
            config.host,
            config.port,
            log_level=config.log_level,
        )
        return 0
    server = build_server(libraries, config.filters, doc_dir=config.doc_dir)
    logger.info(f"Lovely Docs MCP server running on {config.transport}")
    server.run(transport=config.transport)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0].startswith("-"):
        argv.insert(0, "serve")
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        setup_logging()
        logger.error(str(e))
        return 1
    setup_logging(config.log_level)

    if args.command in ("list", "l"):
        return list_command(config, show_pages=args.pages)
    return serve_command(config)


if __name__ == "__main__":
    sys.exit(main())
