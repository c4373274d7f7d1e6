# lovely_docs_mcp/config.py
"""Server configuration: CLI argument > environment variable > default."""
from __future__ import annotations

import os
import pathlib
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import LovelyDocsError
from .filters import FilterOptions, parse_filter_list

ENV_PREFIX = "LOVELY_DOCS_"

Transport = Literal["stdio", "streamable-http"]


class ConfigError(LovelyDocsError):
    """Raised when the server configuration is incomplete or invalid."""


class ServerConfig(BaseModel):
    doc_dir: pathlib.Path
    transport: Transport = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    filters: FilterOptions = Field(default_factory=FilterOptions)
    max_workers: Optional[int] = Field(default=None, ge=1)
    log_level: str = "INFO"


def _env(name: str, environ: Mapping[str, str]) -> Optional[str]:
    value = environ.get(ENV_PREFIX + name)
    return value if value else None


def _pick(arg: Any, name: str, environ: Mapping[str, str], default: Any = None) -> Any:
    if arg is not None:
        return arg
    env = _env(name, environ)
    return env if env is not None else default


def load_config(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build a ServerConfig from parsed CLI args (any attribute holder) and env.

    Raises:
        ConfigError: no documentation directory, or a value fails validation.
    """
    environ = os.environ if environ is None else environ

    def arg(name: str) -> Any:
        return getattr(args, name, None) if args is not None else None

    doc_dir = _pick(arg("doc_dir"), "DOC_DIR", environ)
    if not doc_dir:
        raise ConfigError(
            "No documentation directory. Pass --doc-dir or set LOVELY_DOCS_DOC_DIR."
        )

    filters = FilterOptions(
        include_libs=parse_filter_list(_pick(arg("include_libs"), "INCLUDE_LIBS", environ)),
        include_ecosystems=parse_filter_list(
            _pick(arg("include_ecosystems"), "INCLUDE_ECOSYSTEMS", environ)
        ),
        exclude_libs=parse_filter_list(_pick(arg("exclude_libs"), "EXCLUDE_LIBS", environ)),
        exclude_ecosystems=parse_filter_list(
            _pick(arg("exclude_ecosystems"), "EXCLUDE_ECOSYSTEMS", environ)
        ),
    )

    try:
        return ServerConfig(
            doc_dir=pathlib.Path(doc_dir).expanduser(),
            transport=_pick(arg("transport"), "TRANSPORT", environ, "stdio"),
            host=_pick(arg("host"), "HOST", environ, "127.0.0.1"),
            port=_pick(arg("port"), "PORT", environ, 3000),
            filters=filters,
            max_workers=_pick(arg("max_workers"), "MAX_WORKERS", environ),
            log_level=_pick(arg("log_level"), "LOG_LEVEL", environ, "INFO"),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
