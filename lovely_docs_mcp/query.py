# lovely_docs_mcp/query.py
"""Path resolution and page/listing queries over a loaded library collection.

Failures are returned as QueryError instances instead of being raised, so a
transport can map them to its own error responses.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from .cache import get_library
from .errors import LibraryNotFoundError, PageNotFoundError, QueryError, UnknownLibraryError
from .logger import logger
from .models import DocNode, EssenceNode, Library, PageResult

ROOT_PATH = "/"

# Levels a reader navigates further from; these get a sub-page listing.
NAVIGABLE_LEVELS = ("digest", "fulltext")
DEFAULT_LEVEL = "digest"

Listing = List[Any]


def normalize_path(path: Optional[str]) -> str:
    """'', None and '/' -> '/'; anything else -> '/a/b' without trailing slash."""
    if not path or path == ROOT_PATH:
        return ROOT_PATH
    trimmed = path.strip("/")
    return f"/{trimmed}" if trimmed else ROOT_PATH


def resolve_node(root: DocNode, path: Optional[str]) -> Optional[DocNode]:
    path = normalize_path(path)
    if path == ROOT_PATH:
        return root
    node = root
    for part in path[1:].split("/"):
        child = node.children.get(part)
        if child is None:
            return None
        node = child
    return node


def get_markdown(library: Library, path: Optional[str], level: str) -> Optional[str]:
    """Variant text at path, or None when the node or the variant is missing.

    An empty string is real content; check for None, not falsiness.
    """
    node = resolve_node(library.tree, path)
    if node is None:
        return None
    return node.markdown.get(level)


def build_essence_subtree(node: DocNode) -> Optional[EssenceNode]:
    """Keep only nodes that are relevant or lead to a relevant descendant."""
    children: Dict[str, EssenceNode] = {}
    for key, child in node.children.items():
        sub = build_essence_subtree(child)
        if sub is not None:
            children[key] = sub
    if not node.relevant and not children:
        return None
    return EssenceNode(essence=node.markdown.essence, children=children)


def get_essence_subtree(
    libraries: Mapping[str, Library], library_key: str, path: Optional[str] = ROOT_PATH
) -> Optional[EssenceNode]:
    lib = get_library(libraries, library_key)
    if lib is None:
        return None
    node = resolve_node(lib.tree, path)
    if node is None:
        return None
    return build_essence_subtree(node)


def render_nested_compact(node: EssenceNode) -> Listing:
    items: Listing = []
    for key, child in node.children.items():
        if child.children:
            items.append({key: render_nested_compact(child)})
        else:
            items.append(key)
    return items


def render_nested_verbose(node: EssenceNode) -> Listing:
    items: Listing = []
    for key, child in node.children.items():
        if child.children:
            items.append(
                {key: {"essence": child.essence, "children": render_nested_verbose(child)}}
            )
        else:
            items.append({key: child.essence})
    return items


def render_nested(node: EssenceNode, verbose: bool = False) -> Listing:
    """Listing of node's children in manifest order.

    Compact: leaves are bare keys, inner nodes are {key: [...]}.
    Verbose: leaves are {key: essence}, inner nodes are
    {key: {"essence": ..., "children": [...]}}.
    """
    return render_nested_verbose(node) if verbose else render_nested_compact(node)


def flatten_page_paths(listing: Any) -> List[str]:
    """Turn a compact listing into page paths: '/', 'a', 'a/b', ..."""
    paths = [ROOT_PATH]

    def visit(nodes: Any, trail: List[str]) -> None:
        if not isinstance(nodes, list):
            return
        for item in nodes:
            if isinstance(item, str):
                paths.append("/".join(trail + [item]))
            elif isinstance(item, dict):
                for key, sub in item.items():
                    nxt = trail + [key]
                    paths.append("/".join(nxt))
                    visit(sub, nxt)

    visit(listing, [])
    return paths


def get_page_index(
    libraries: Mapping[str, Library], library_key: str, verbose: bool = False
) -> Union[Listing, Dict[str, Any], QueryError]:
    """Listing of the whole library, {} when nothing in it is relevant."""
    if get_library(libraries, library_key) is None:
        return UnknownLibraryError(f"Unknown library: {library_key}")
    tree = get_essence_subtree(libraries, library_key, ROOT_PATH)
    if tree is None:
        return {}
    return render_nested(tree, verbose)


def get_page(
    libraries: Mapping[str, Library],
    library_key: str,
    path: Optional[str] = None,
    level: Optional[str] = None,
) -> Union[PageResult, QueryError]:
    lib = get_library(libraries, library_key)
    if lib is None:
        return LibraryNotFoundError(f"Library not found: {library_key}")

    level = level or DEFAULT_LEVEL
    norm = normalize_path(path)
    node = resolve_node(lib.tree, norm)
    if node is None:
        return PageNotFoundError(f"Page not found in {library_key} at path {norm}")
    text = node.markdown.get(level)
    if text is None:
        return PageNotFoundError(
            f"Page {norm} in {library_key} has no '{level}' content "
            f"(available: {', '.join(node.markdown.available()) or 'none'})"
        )

    children: Optional[Listing] = None
    if level in NAVIGABLE_LEVELS:
        sub = get_essence_subtree(libraries, library_key, norm)
        if sub is not None:
            children = render_nested(sub)
    logger.debug(f"get_page({library_key}, {norm}, {level}) -> {len(text)} chars")
    return PageResult(text=text, children=children)
