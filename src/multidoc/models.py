"""Data types shared by the merge pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .search import SearchEngine


ASSETS_DIR = Path(__file__).parent / "assets"
TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class DocSource:
    """One documentation site to merge.

    Attributes:
        upstream: Directory holding the pre-built site
        path: Mount path of the site inside the merged tree (e.g. "a" or "pkg/dev")
        name: Label shown in the global navigation
    """

    upstream: Path
    path: str
    name: str

    def __post_init__(self):
        object.__setattr__(self, "upstream", Path(self.upstream))
        object.__setattr__(self, "path", str(self.path).strip("/"))


@dataclass(frozen=True)
class BrandImage:
    """Leftmost navigation logo. Both paths are relative to the merged tree root."""

    path: str
    imagepath: str


def _default_engine() -> "SearchEngine":
    from .search.flexsearch import FlexSearch

    return FlexSearch()


@dataclass
class SearchConfig:
    """
    Search settings for the merged site.

    Pass ``False`` instead of a SearchConfig to disable search entirely.

    Attributes:
        index_versions: Version directory names whose pages are indexed, in order
        engine: Search back end responsible for widget markup and the index
    """

    index_versions: tuple[str, ...] = ("stable",)
    engine: "SearchEngine" = field(default_factory=_default_engine)

    def __post_init__(self):
        if isinstance(self.index_versions, str):
            self.index_versions = (self.index_versions,)
        # ordered set
        self.index_versions = tuple(dict.fromkeys(str(v) for v in self.index_versions))


SearchSetting = Union[SearchConfig, bool]


def search_enabled(search: Optional[SearchSetting]) -> bool:
    """Return True unless search is disabled (``False``/``None`` sentinel)."""
    return isinstance(search, SearchConfig)


def resolve_search(search: Optional[SearchSetting]) -> SearchSetting:
    """
    Normalize a search argument.

    ``True`` selects the default SearchConfig; ``False`` and ``None`` both
    disable search, as they do for search_enabled.
    """
    if search is True:
        return SearchConfig()
    if not search_enabled(search):
        return False
    return search


@dataclass(frozen=True)
class InjectionSettings:
    """
    Names the injection pass relies on.

    Attributes:
        default_stylesheet: Stylesheet every page receives, relative to the merged root
        shared_script: File name of the renderer's shared script the injector is appended to
        marker_id: id of the renderer's top-level content wrapper under <body>
        nav_id: id of the injected navigation element
        injector_script: Script appended to every shared script file
    """

    default_stylesheet: str = "assets/__default/multidoc.css"
    shared_script: str = "documenter.js"
    marker_id: str = "documenter"
    nav_id: str = "multi-page-nav"
    injector_script: Path = ASSETS_DIR / "__default" / "multidoc_injector.js"


DEFAULT_SETTINGS = InjectionSettings()


@dataclass(frozen=True)
class PageWarning:
    path: Path
    message: str


@dataclass(frozen=True)
class MergeResult:
    outdir: Path
    pages: int
    warnings: list[PageWarning]
    search_index: list[Path]
