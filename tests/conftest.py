"""Pytest configuration and fixtures for Lovely Docs MCP tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from lovely_docs_mcp.cache import scan_libraries

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s'
)

logger = logging.getLogger(__name__)


def make_node(
    display_name: str,
    relevant: bool = True,
    children: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Manifest node descriptor as written by the generator."""
    return {
        "displayName": display_name,
        "origPath": f"docs/{display_name.lower().replace(' ', '-')}.md",
        "relevant": relevant,
        "usage": None,
        "token_counts": None,
        "children": children or {},
        **extra,
    }


def make_manifest(name: str, root: Dict[str, Any], ecosystems: Any = None, **extra: Any) -> Dict[str, Any]:
    manifest = {
        "name": name,
        "map": root,
        "source": {"name": name, "repo": f"https://example.com/{name}.git", "doc_dir": "docs", "commit": None},
        "source_type": "git",
        "date": "2025-01-01",
        "model": "test-model",
        "commit": "abc123",
        "ecosystems": ecosystems,
    }
    manifest.update(extra)
    return manifest


def write_library(
    root: Path,
    key: str,
    manifest: Any,
    pages: Optional[Dict[str, Dict[str, str]]] = None,
) -> Path:
    """Write <root>/<key>/index.json plus markdown files.

    pages maps a node path ('' for the root, 'a/b' otherwise) to
    {level: text}; each becomes <node dir>/<level>.md.
    """
    lib_dir = root / key
    lib_dir.mkdir(parents=True, exist_ok=True)
    text = manifest if isinstance(manifest, str) else json.dumps(manifest)
    (lib_dir / "index.json").write_text(text, encoding="utf-8")
    for node_path, variants in (pages or {}).items():
        node_dir = lib_dir / node_path if node_path else lib_dir
        node_dir.mkdir(parents=True, exist_ok=True)
        for level, content in variants.items():
            (node_dir / f"{level}.md").write_text(content, encoding="utf-8")
    return lib_dir


@pytest.fixture
def doc_db(tmp_path: Path) -> Path:
    """Two libraries: libA (js, one relevant leaf) and libB (python, nested)."""
    root = tmp_path / "docs"
    write_library(
        root,
        "libA",
        make_manifest(
            "Lib A",
            make_node("Lib A", relevant=False, children={"guide": make_node("Guide")}),
            ecosystems=["js"],
        ),
        pages={
            "": {"digest": "root digest", "essence": "Lib A essence"},
            "guide": {"digest": "guide digest", "essence": "guide essence"},
        },
    )
    write_library(
        root,
        "libB",
        make_manifest(
            "Lib B",
            make_node(
                "Lib B",
                relevant=True,
                children={
                    "api": make_node(
                        "API",
                        relevant=False,
                        children={
                            "models": make_node("Models"),
                            "internals": make_node("Internals", relevant=False),
                        },
                    ),
                    "changelog": make_node("Changelog", relevant=False),
                    "intro": make_node("Intro"),
                },
            ),
            ecosystems=["python"],
        ),
        pages={
            "": {"digest": "B root digest", "essence": "Lib B essence", "fulltext": "B full"},
            "api": {"digest": "api digest", "essence": "api essence"},
            "api/models": {
                "digest": "models digest",
                "essence": "models essence",
                "short_digest": "",
            },
            "api/internals": {"digest": "internals digest"},
            "changelog": {"digest": "changes"},
            "intro": {"digest": "intro digest", "essence": "intro essence"},
        },
    )
    return root


@pytest.fixture
def libraries(doc_db: Path):
    """Loaded collection for doc_db."""
    return scan_libraries(doc_db)
