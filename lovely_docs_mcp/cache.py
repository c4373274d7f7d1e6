# lovely_docs_mcp/cache.py
from __future__ import annotations

import os
import pathlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Mapping, Optional, Set, Union

from .loader import MANIFEST_NAME, load_library
from .logger import logger
from .models import Library, LibrarySummary


def _default_workers() -> int:
    return min(8, os.cpu_count() or 1)


def scan_libraries(
    root: Union[str, pathlib.Path], max_workers: Optional[int] = None
) -> Dict[str, Library]:
    """Load every library found directly under root.

    A subdirectory is a library iff it holds an index.json. The directory name
    is the key. A library that fails to load is logged and skipped; it never
    stops the rest of the scan.

    Args:
        root: Directory containing one subdirectory per library.
        max_workers: Loader threads (default: min(CPU count, 8)).

    Returns:
        Libraries keyed by directory name, ordered by key.
    """
    root = pathlib.Path(root)
    if not root.is_dir():
        logger.warning(f"Documentation directory not found: {root}")
        return {}

    candidates = sorted(
        p for p in root.iterdir() if p.is_dir() and (p / MANIFEST_NAME).is_file()
    )
    logger.debug(f"Scanning {len(candidates)} candidate libraries in {root}")

    loaded: Dict[str, Library] = {}
    if candidates:
        with ThreadPoolExecutor(max_workers=max_workers or _default_workers()) as executor:
            futures = {executor.submit(load_library, path): path for path in candidates}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    loaded[path.name] = future.result()
                except Exception as e:
                    logger.error(f"Failed to load library {path.name}: {e}")

    libraries = {key: loaded[key] for key in sorted(loaded)}
    logger.info(f"Loaded {len(libraries)} libraries from {root}")
    return libraries


def get_library_summaries(libraries: Mapping[str, Library]) -> Dict[str, LibrarySummary]:
    return {key: lib.summary() for key, lib in libraries.items()}


def get_library(libraries: Mapping[str, Library], key: str) -> Optional[Library]:
    lib = libraries.get(key)
    logger.debug(f"get_library({key}) -> {lib.name if lib else None}")
    return lib


def get_ecosystems(summaries: Mapping[str, LibrarySummary]) -> Set[str]:
    ecosystems: Set[str] = set()
    for lib in summaries.values():
        ecosystems.update(lib.ecosystems)
    return ecosystems


def library_index(
    summaries: Mapping[str, LibrarySummary], ecosystem: str = "*"
) -> Dict[str, Optional[str]]:
    """Map library key -> essence, limited to one ecosystem unless ecosystem is '*'."""
    return {
        key: lib.essence
        for key, lib in summaries.items()
        if ecosystem == "*" or ecosystem in lib.ecosystems
    }
