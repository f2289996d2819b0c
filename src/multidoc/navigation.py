"""Global navigation bar injected at the top of every page."""

import os
from pathlib import Path
from typing import Optional

from bs4.element import Tag

from .dom import new_tag
from .models import DEFAULT_SETTINGS, BrandImage, DocSource, InjectionSettings, SearchSetting, search_enabled
from .staging import index_suffix


def relative_href(target: Path, start: Path) -> str:
    """Relative link from directory start to target, with forward slashes."""
    return Path(os.path.relpath(target, start)).as_posix()


def is_active(thispagepath: Path, mount: Path) -> bool:
    """Return True if the page directory lies inside the mounted site."""
    thispagepath = Path(thispagepath)
    return thispagepath == mount or mount in thispagepath.parents


def make_global_nav(
    root: Path,
    docs: list[DocSource],
    thispagepath: Path,
    brand_image: Optional[BrandImage],
    search: SearchSetting,
    pretty_urls: bool,
    settings: InjectionSettings = DEFAULT_SETTINGS,
) -> Tag:
    """
    Build the navigation fragment for one page.

    All links are relative to the page's own directory, so the fragment is
    built again for every page.

    Args:
        root: Merged tree root
        docs: Merged sites, in navigation order
        thispagepath: Directory containing the page being injected
        brand_image: Optional logo shown first
        search: SearchConfig, or False when search is disabled
        pretty_urls: Link to "<path>/" instead of "<path>/index.html"
        settings: Injection names (navigation id)

    Returns:
        Detached <nav> tag
    """
    root = Path(root)
    thispagepath = Path(thispagepath)
    nav = new_tag("nav", {"id": settings.nav_id})

    if brand_image is not None:
        brand = new_tag("a", {
            "class": ["brand"],
            "href": relative_href(root / brand_image.path, thispagepath),
        })
        brand.append(new_tag("img", {"src": relative_href(root / brand_image.imagepath, thispagepath)}))
        nav.append(brand)

    navitems = new_tag("div", {"id": "nav-items", "class": ["hidden-on-mobile"]})
    nav.append(navitems)

    for doc in docs:
        mount = root / doc.path
        classes = ["nav-link", "active", "nav-item"] if is_active(thispagepath, mount) else ["nav-link", "nav-item"]
        navitems.append(new_tag(
            "a",
            {"href": relative_href(mount, thispagepath) + index_suffix(pretty_urls), "class": classes},
            text=doc.name,
        ))

    if search_enabled(search):
        search.engine.inject_html(navitems)

    nav.append(new_tag("a", {"id": "multidoc-toggler"}))
    return nav
