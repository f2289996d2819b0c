"""Search back-end interface."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Iterator

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..dom import parse_html

if TYPE_CHECKING:
    from ..models import DocSource, SearchConfig

# Documenter wraps the rendered page body in <article id="documenter-page">
CONTENT_SELECTORS = ("article#documenter-page", "article.content", "div.docs-main")


class SearchEngine(ABC):
    """
    A search back end for the merged site.

    The injection pass asks the engine for its scripts, stylesheets and widget
    markup; build_search_index runs once every page has been injected.
    """

    name: str = ""

    def inject_scripts(self, scripts: list[str]) -> None:
        """Add engine scripts to the per-page script list (in place)."""

    def inject_styles(self, stylesheets: list[str]) -> None:
        """Add engine stylesheets to the per-page stylesheet list (in place)."""

    @abstractmethod
    def inject_html(self, navitems: Tag) -> None:
        """Append the search widget to the navigation item container."""

    @abstractmethod
    def build_search_index(self, root: Path, docs: list[DocSource], config: SearchConfig) -> list[Path]:
        """
        Write the search index under the merged tree.

        Returns:
            Paths of the written artifacts, relative to root

        Raises:
            SearchIndexBuildError: If the index could not be written
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def iter_html_files(root: Path) -> Iterator[Path]:
    """Yield every regular .html file under root in a stable order, skipping the root redirect."""
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not filename.endswith(".html") or path == root / "index.html":
                continue
            if path.is_symlink() or not path.is_file():
                continue
            yield path


def in_version(relative: PurePosixPath, version: str) -> bool:
    """Return True if a directory component of the page path equals version."""
    return version in relative.parts[:-1]


def iter_version_pages(root: Path, version: str) -> Iterator[tuple[Path, PurePosixPath]]:
    """Yield (absolute path, root-relative path) for the pages belonging to a version."""
    for path in iter_html_files(root):
        relative = PurePosixPath(path.relative_to(root).as_posix())
        if in_version(relative, version):
            yield path, relative


def parse_page(path: Path) -> BeautifulSoup:
    return parse_html(path.read_text(encoding="utf-8", errors="replace"))


def find_content(soup: BeautifulSoup) -> Tag | None:
    """Locate the rendered documentation content, ignoring navigation chrome."""
    for selector in CONTENT_SELECTORS:
        content = soup.select_one(selector)
        if content is not None:
            return content
    return None


def page_title(soup: BeautifulSoup, fallback: str) -> str:
    title = soup.find("title")
    if title is None:
        return fallback
    return " ".join(title.get_text().split()) or fallback
