# lovely_docs_mcp/models.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

MarkdownLevel = Literal["fulltext", "digest", "short_digest", "essence"]

# Fixed order; also the file stem of each variant on disk.
MARKDOWN_LEVELS: Tuple[str, ...] = ("fulltext", "digest", "short_digest", "essence")

SourceType = Literal["git", "web"]


def is_markdown_level(value: object) -> bool:
    return isinstance(value, str) and value in MARKDOWN_LEVELS


# ---- on-disk manifest (index.json) ----
class TokenCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    fulltext: Optional[int] = None
    digest: Optional[int] = None
    short_digest: Optional[int] = None


class Usage(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: int
    output: int
    details: Optional[Any] = None


class ManifestNode(BaseModel):
    """One node descriptor of the `map` tree. Children are keyed by directory name."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    orig_path: str = Field(alias="origPath")
    relevant: bool
    usage: Optional[Usage] = None
    token_counts: Optional[TokenCounts] = None
    children: Dict[str, "ManifestNode"] = Field(default_factory=dict)

    @field_validator("children")
    @classmethod
    def _plain_child_keys(cls, v: Dict[str, "ManifestNode"]) -> Dict[str, "ManifestNode"]:
        # Keys are joined onto the library directory when loading markdown.
        for key in v:
            if key in ("", ".", "..") or "/" in key or "\\" in key:
                raise ValueError(f"child key {key!r} is not a plain directory name")
        return v


class ManifestSource(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    name: Optional[str] = None
    doc_dir: Optional[str] = None
    repo: Optional[str] = None
    commit: Optional[str] = None
    comment: Optional[str] = None


class Manifest(BaseModel):
    name: str
    map: ManifestNode
    source: ManifestSource
    source_type: SourceType
    date: str
    model: str
    commit: str
    ecosystems: List[str] = Field(default_factory=list)


# ---- in-memory tree ----
class MarkdownVariants(BaseModel):
    """Detail-level texts of a page. None means the variant was never generated."""

    model_config = ConfigDict(frozen=True)

    fulltext: Optional[str] = None
    digest: Optional[str] = None
    short_digest: Optional[str] = None
    essence: Optional[str] = None

    def get(self, level: str) -> Optional[str]:
        if not is_markdown_level(level):
            return None
        return getattr(self, level)

    def available(self) -> List[str]:
        return [level for level in MARKDOWN_LEVELS if getattr(self, level) is not None]


class DocNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    orig_path: str
    relevant: bool
    token_counts: Optional[TokenCounts] = None
    usage: Optional[Usage] = None
    markdown: MarkdownVariants = Field(default_factory=MarkdownVariants)
    children: Dict[str, "DocNode"] = Field(default_factory=dict)


class LibrarySummary(BaseModel):
    """Library without its page tree, for listing and filtering."""

    model_config = ConfigDict(frozen=True)

    name: str
    source: ManifestSource
    source_type: SourceType
    ecosystems: List[str] = Field(default_factory=list)
    essence: Optional[str] = None


class Library(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    source: ManifestSource
    source_type: SourceType
    date: str
    model: str
    commit: str
    ecosystems: List[str] = Field(default_factory=list)
    tree: DocNode

    @property
    def essence(self) -> Optional[str]:
        return self.tree.markdown.essence

    def summary(self) -> LibrarySummary:
        return LibrarySummary(
            name=self.name,
            source=self.source,
            source_type=self.source_type,
            ecosystems=list(self.ecosystems),
            essence=self.essence,
        )


# ---- query results ----
class EssenceNode(BaseModel):
    """Pruned view of a subtree: essence text plus relevance-bearing children."""

    essence: Optional[str] = None
    children: Dict[str, "EssenceNode"] = Field(default_factory=dict)


class PageResult(BaseModel):
    text: str
    children: Optional[List[Any]] = None


ManifestNode.model_rebuild()
DocNode.model_rebuild()
EssenceNode.model_rebuild()
