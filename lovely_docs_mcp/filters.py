# lovely_docs_mcp/filters.py
"""Include/exclude rules over library keys and ecosystem tags."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Set, TypeVar, Union

from pydantic import BaseModel, Field


class _HasEcosystems(Protocol):
    ecosystems: List[str]


L = TypeVar("L", bound=_HasEcosystems)


class FilterOptions(BaseModel):
    include_libs: List[str] = Field(default_factory=list)
    include_ecosystems: List[str] = Field(default_factory=list)
    exclude_libs: List[str] = Field(default_factory=list)
    exclude_ecosystems: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.include_libs
            or self.include_ecosystems
            or self.exclude_libs
            or self.exclude_ecosystems
        )

    def merge(self, other: "FilterOptions") -> "FilterOptions":
        """Concatenate each rule list, self first."""
        return FilterOptions(
            include_libs=self.include_libs + other.include_libs,
            include_ecosystems=self.include_ecosystems + other.include_ecosystems,
            exclude_libs=self.exclude_libs + other.exclude_libs,
            exclude_ecosystems=self.exclude_ecosystems + other.exclude_ecosystems,
        )


def parse_filter_list(value: Union[None, str, Iterable[str]]) -> List[str]:
    """Accept 'a, b,c', ['a', 'b'] or None; return trimmed non-empty items."""
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[str] = value.split(",")
    else:
        items = (part for v in value for part in str(v).split(","))
    return [s.strip() for s in items if s.strip()]


def filter_libraries(libs: Mapping[str, L], options: Optional[FilterOptions]) -> Dict[str, L]:
    """Apply, in order: include by key, include by ecosystem, exclude by key,
    exclude by ecosystem.

    Ecosystem inclusion keeps a library with ANY listed tag. Ecosystem exclusion
    drops a library only when ALL of its tags are excluded; untagged libraries
    are never dropped by it.
    """
    res: Dict[str, L] = dict(libs)
    if options is None:
        return res

    include_libs = set(options.include_libs)
    include_ecosystems = set(options.include_ecosystems)
    exclude_libs = set(options.exclude_libs)
    exclude_ecosystems = set(options.exclude_ecosystems)

    if include_libs:
        res = {k: v for k, v in res.items() if k in include_libs}
    if include_ecosystems:
        res = {
            k: v for k, v in res.items() if any(e in include_ecosystems for e in v.ecosystems)
        }
    for key in exclude_libs:
        res.pop(key, None)
    if exclude_ecosystems:
        res = {
            k: v
            for k, v in res.items()
            if not v.ecosystems or not all(e in exclude_ecosystems for e in v.ecosystems)
        }
    return res


def filter_ecosystems(ecosystems: Iterable[str], options: Optional[FilterOptions]) -> Set[str]:
    res = set(ecosystems)
    if options is None:
        return res
    if options.include_ecosystems:
        res &= set(options.include_ecosystems)
    res -= set(options.exclude_ecosystems)
    return res
