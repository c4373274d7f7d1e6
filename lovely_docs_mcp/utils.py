# lovely_docs_mcp/utils.py
"""Shared helpers for turning query results into text payloads."""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import unquote

import yaml


def to_yaml(value: Any) -> str:
    """Block-style YAML, keys kept in insertion order."""
    return yaml.safe_dump(
        value, sort_keys=False, allow_unicode=True, default_flow_style=False
    ).strip()


def decode_page_path(raw: str) -> Optional[str]:
    """Percent-decoded page path without outer slashes; None for the root."""
    return unquote(raw).strip("/") or None
