# Shared fixtures: small Documenter-like sites on disk

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from multidoc.dom import PARSER
from multidoc.models import DocSource


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en"><head><meta charset="UTF-8"/><title>{title}</title><link href="{css}" rel="stylesheet" type="text/css"/></head><body><div id="documenter"><nav class="docs-sidebar"><a href="index.html">Home</a></nav><div class="docs-main"><article class="content" id="documenter-page"><h1 id="Intro"><a class="docs-heading-anchor" href="#Intro">Intro</a></h1><p>Welcome to {title}.</p><h2 id="Usage">Usage</h2><p>Call make to merge {title}.</p><nav class="docs-footer"><a href="#">Next</a></nav></article></div></div></body></html>
"""


def documenter_page(title: str, depth: int = 0) -> str:
    """Render a page the way Documenter lays it out."""
    css = "../" * depth + "assets/documenter.css"
    return PAGE_TEMPLATE.format(title=title, css=css)


def write_site(root: Path, title: str, pages=("index.html",), with_git: bool = False) -> Path:
    """Write a pre-built documentation site with a shared documenter.js."""
    root.mkdir(parents=True, exist_ok=True)
    for page in pages:
        path = root / page
        path.parent.mkdir(parents=True, exist_ok=True)
        depth = len(Path(page).parts) - 1
        path.write_text(documenter_page(f"{title} {Path(page).stem}", depth), encoding="utf-8")
    assets = root / "assets"
    assets.mkdir(exist_ok=True)
    (assets / "documenter.css").write_text("body { margin: 0; }\n")
    (assets / "documenter.js").write_text("// documenter runtime\n")
    if with_git:
        (root / ".git").mkdir()
        (root / ".git" / "HEAD").write_text("ref: refs/heads/gh-pages\n")
    return root


def read_soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(Path(path).read_text(encoding="utf-8"), PARSER)


@pytest.fixture
def two_sites(tmp_path):
    """Two upstream sites mounted at "a" and "b"."""
    upstream = tmp_path / "upstream"
    site_a = write_site(upstream / "A", "A", pages=("index.html", "guide/usage.html"), with_git=True)
    site_b = write_site(upstream / "B", "B", pages=("index.html", "api/reference.html"))
    return [
        DocSource(upstream=site_a, path="a", name="A Docs"),
        DocSource(upstream=site_b, path="b", name="B Docs"),
    ]


@pytest.fixture
def versioned_sites(tmp_path):
    """Two upstream sites that carry a "stable" and a "dev" build each."""
    upstream = tmp_path / "upstream"
    site_a = write_site(
        upstream / "A", "A",
        pages=("stable/index.html", "stable/guide.html", "dev/index.html"),
    )
    site_b = write_site(upstream / "B", "B", pages=("stable/index.html",))
    return [
        DocSource(upstream=site_a, path="a", name="A Docs"),
        DocSource(upstream=site_b, path="b", name="B Docs"),
    ]
