"""Client-side search: per-version JSON records loaded into FlexSearch in the browser."""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from bs4.element import Comment, NavigableString, Tag

from ..dom import new_tag
from ..exceptions import SearchIndexBuildError
from .base import SearchEngine, find_content, iter_version_pages, page_title, parse_page

if TYPE_CHECKING:
    from ..models import DocSource, SearchConfig

logger = logging.getLogger(__name__)

FLEXSEARCH_BUNDLE = "https://cdn.jsdelivr.net/gh/nextapps-de/flexsearch@0.7.31/dist/flexsearch.bundle.js"
INTEGRATION_SCRIPT = "assets/__default/flexsearch_integration.js"
SEARCH_DATA_DIR = "search-data"

HEADINGS = {"h1", "h2", "h3"}
SKIPPED_TAGS = {"nav", "script", "style", "footer"}


def _text(node) -> str:
    if isinstance(node, Tag):
        return " ".join(node.get_text(" ").split())
    return " ".join(str(node).split())


def split_sections(content: Tag) -> list[dict]:
    """
    Split a rendered page into heading sections.

    Returns:
        List of dicts with "anchor", "title" and "content"; text before the
        first heading becomes a section without title.
    """
    sections = []
    current = {"anchor": "", "title": "", "parts": []}

    for child in content.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Tag):
            if child.name in SKIPPED_TAGS:
                continue
            if child.name in HEADINGS:
                sections.append(current)
                current = {"anchor": child.get("id", ""), "title": _text(child), "parts": []}
                continue
        elif not isinstance(child, NavigableString):
            continue
        text = _text(child)
        if text:
            current["parts"].append(text)
    sections.append(current)

    return [
        {"anchor": s["anchor"], "title": s["title"], "content": " ".join(s["parts"])}
        for s in sections
        if s["title"] or s["parts"]
    ]


def version_filename(version: str) -> str:
    return version.replace("/", "_") + ".json"


class FlexSearch(SearchEngine):
    name = "flexsearch"

    def inject_scripts(self, scripts: list[str]) -> None:
        scripts.insert(0, INTEGRATION_SCRIPT)
        scripts.insert(0, FLEXSEARCH_BUNDLE)

    def inject_html(self, navitems: Tag) -> None:
        div = new_tag("div", {"class": ["search", "nav-item"]})
        div.append(new_tag("input", {"id": "search-input", "placeholder": "Search..."}))
        div.append(new_tag("ul", {"id": "search-result-container", "class": ["suggestions", "hidden"]}))
        div.append(new_tag("div", {"class": ["search-keybinding"]}, text="/"))
        navitems.append(div)

    def collect_records(self, root: Path, version: str) -> list[dict]:
        """Build the search records for every page of one version."""
        records = []
        for path, relative in iter_version_pages(root, version):
            soup = parse_page(path)
            content = find_content(soup)
            if content is None:
                logger.warning("No indexable content in %s", path)
                continue
            pagetitle = page_title(soup, relative.stem)
            for section in split_sections(content):
                ref = str(relative)
                if section["anchor"]:
                    ref = f"{ref}#{section['anchor']}"
                records.append({
                    "id": len(records),
                    "title": section["title"] or pagetitle,
                    "pagetitle": pagetitle,
                    "ref": ref,
                    "content": section["content"],
                })
        return records

    def build_search_index(self, root: Path, docs: list[DocSource], config: SearchConfig) -> list[Path]:
        root = Path(root)
        data_dir = root / SEARCH_DATA_DIR
        written = []
        manifest = {"versions": []}

        try:
            data_dir.mkdir(parents=True, exist_ok=True)
            for version in config.index_versions:
                records = self.collect_records(root, version)
                filename = version_filename(version)
                (data_dir / filename).write_text(
                    json.dumps(records, indent=2, sort_keys=True, ensure_ascii=False),
                    encoding="utf-8",
                )
                written.append(PurePosixPath(SEARCH_DATA_DIR, filename))
                manifest["versions"].append({
                    "version": version,
                    "file": filename,
                    "records": len(records),
                })
                logger.info("Indexed %d sections for version %s", len(records), version)

            (data_dir / "index.json").write_text(
                json.dumps(manifest, indent=2, sort_keys=True), encoding="utf-8"
            )
        except OSError as e:
            raise SearchIndexBuildError(f"Failed to write search index: {e}") from e

        written.append(PurePosixPath(SEARCH_DATA_DIR, "index.json"))
        return [Path(p) for p in written]
