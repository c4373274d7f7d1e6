# lovely_docs_mcp/loader.py
"""Build an in-memory library from an index.json manifest and its markdown files.

Layout of one library directory::

    <library>/index.json
    <library>/digest.md, essence.md, ...        (root page variants)
    <library>/<child>/digest.md, ...            (one directory per child key)
"""
from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, Union

from pydantic import ValidationError

from .errors import ManifestParseError, MarkdownReadError
from .logger import logger
from .models import (
    MARKDOWN_LEVELS,
    DocNode,
    Library,
    Manifest,
    ManifestNode,
    MarkdownVariants,
)

MANIFEST_NAME = "index.json"


def drop_nulls(obj: Any) -> Any:
    """Remove keys whose value is JSON null so optional fields read as absent."""
    if isinstance(obj, dict):
        return {k: drop_nulls(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [drop_nulls(v) for v in obj]
    return obj


def read_manifest(library_root: pathlib.Path) -> Manifest:
    index_path = library_root / MANIFEST_NAME
    try:
        raw = index_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(index_path, f"cannot read manifest: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestParseError(index_path, f"invalid JSON: {e}") from e
    try:
        return Manifest.model_validate(drop_nulls(data))
    except ValidationError as e:
        logger.debug(f"Schema errors in {index_path}: {e.errors()}")
        raise ManifestParseError(
            index_path, f"schema validation failed ({e.error_count()} errors)"
        ) from e


def load_markdown_variants(node_dir: pathlib.Path) -> MarkdownVariants:
    """Read every <level>.md present in node_dir. Unreadable files count as absent."""
    variants: Dict[str, str] = {}
    for level in MARKDOWN_LEVELS:
        path = node_dir / f"{level}.md"
        if not path.is_file():
            continue
        try:
            variants[level] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(str(MarkdownReadError(path, str(e))))
    return MarkdownVariants(**variants)


def build_tree_node(node_dir: pathlib.Path, node: ManifestNode) -> DocNode:
    children = {
        key: build_tree_node(node_dir / key, child)
        for key, child in node.children.items()
    }
    return DocNode(
        display_name=node.display_name,
        orig_path=node.orig_path,
        relevant=node.relevant,
        token_counts=node.token_counts,
        usage=node.usage,
        markdown=load_markdown_variants(node_dir),
        children=children,
    )


def load_library(library_root: Union[str, pathlib.Path]) -> Library:
    """Load one library directory. The directory name becomes the library key.

    Raises:
        ManifestParseError: manifest missing, not JSON, or schema-invalid.
    """
    root = pathlib.Path(library_root)
    logger.debug(f"Loading {root}")
    manifest = read_manifest(root)
    tree = build_tree_node(root, manifest.map)
    logger.debug(f"Loaded {root} -> {manifest.name}")
    return Library(
        key=root.name,
        name=manifest.name,
        source=manifest.source,
        source_type=manifest.source_type,
        date=manifest.date,
        model=manifest.model,
        commit=manifest.commit,
        ecosystems=manifest.ecosystems,
        tree=tree,
    )
