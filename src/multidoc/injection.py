"""Inject shared stylesheets, scripts and the global navigation into every page."""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from .dom import first_child, iter_preorder, new_tag, parse_html
from .exceptions import NavigationMarkerMissing, PageError, ParseError
from .models import (
    DEFAULT_SETTINGS,
    BrandImage,
    DocSource,
    InjectionSettings,
    PageWarning,
    SearchSetting,
    search_enabled,
)
from .navigation import make_global_nav, relative_href

logger = logging.getLogger(__name__)

# head + body
MAX_INJECTIONS = 2


def is_absolute_url(reference: str) -> bool:
    """Return True for references that must not be made page-relative."""
    return reference.startswith("/") or "://" in reference


def resolve_reference(reference: str, relroot: str) -> str:
    if is_absolute_url(reference):
        return reference
    return f"{relroot}/{reference}"


def make_global_stylesheets(stylesheets: list[str], relroot: str) -> list[Tag]:
    return [
        new_tag("link", {
            "rel": "stylesheet",
            "type": "text/css",
            "href": resolve_reference(stylesheet, relroot),
        })
        for stylesheet in stylesheets
    ]


def make_global_scripts(scripts: list[str], relroot: str) -> list[Tag]:
    return [
        new_tag("script", {
            "src": resolve_reference(script, relroot),
            "type": "text/javascript",
            "charset": "utf-8",
        })
        for script in scripts
    ]


def js_injector(settings: InjectionSettings = DEFAULT_SETTINGS) -> str:
    return Path(settings.injector_script).read_text(encoding="utf-8")


def append_injector(path: Path, settings: InjectionSettings = DEFAULT_SETTINGS) -> bool:
    """
    Append the navigation injector to the renderer's shared script.

    Returns:
        False if the file already carries the injector
    """
    injector = js_injector(settings)
    existing = Path(path).read_text(encoding="utf-8", errors="replace")
    if injector.strip() in existing:
        return False
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n" + injector)
    return True


def head_already_injected(head: Tag, default_href: str) -> bool:
    return any(link.get("href") == default_href for link in head.find_all("link", recursive=False))


def inject_page(
    path: Path,
    root: Path,
    docs: list[DocSource],
    brand_image: Optional[BrandImage],
    stylesheets: list[str],
    scripts: list[str],
    search: SearchSetting,
    pretty_urls: bool,
    settings: InjectionSettings = DEFAULT_SETTINGS,
) -> None:
    """
    Inject one page in place.

    Stylesheets are appended to <head> in order and scripts are prepended in
    order, so the last configured script ends up first. The navigation is
    prepended to <body> only if the body starts with the renderer's marker
    element.

    Raises:
        ParseError: If the page cannot be parsed; the file is left untouched
        NavigationMarkerMissing: If there is no body or it lacks the marker; the
            page is still written with its head injection
    """
    path = Path(path)
    pagedir = path.parent
    relroot = relative_href(root, pagedir)
    link_tags = make_global_stylesheets(stylesheets, relroot)
    script_tags = make_global_scripts(scripts, relroot)
    default_href = resolve_reference(settings.default_stylesheet, relroot)

    try:
        soup = parse_html(path.read_text(encoding="utf-8", errors="replace"))
    except ParserRejectedMarkup as e:
        raise ParseError(f"could not parse page: {e}", path) from e

    injected = 0
    body_seen = False
    missing_marker = False

    for el in iter_preorder(soup):
        if injected >= MAX_INJECTIONS:
            break
        if not isinstance(el, Tag):
            continue

        if el.name == "head":
            if not head_already_injected(el, default_href):
                for link in link_tags:
                    el.append(link)
                for script in script_tags:
                    el.insert(0, script)
            injected += 1
        elif el.name == "body":
            body_seen = True
            if not el.contents:
                continue
            content = first_child(el)
            if isinstance(content, Tag) and content.get("id") == settings.nav_id:
                injected += 1
            elif isinstance(content, Tag) and content.get("id") == settings.marker_id:
                el.insert(0, make_global_nav(
                    root, docs, pagedir, brand_image, search, pretty_urls, settings
                ))
                injected += 1
            else:
                missing_marker = True

    path.write_text(str(soup), encoding="utf-8")

    if not body_seen:
        raise NavigationMarkerMissing("could not inject global nav, page has no <body>", path)
    if missing_marker:
        raise NavigationMarkerMissing(
            f"could not inject global nav, <body> does not start with #{settings.marker_id}", path
        )


def inject_styles_and_global_navigation(
    root: Path,
    docs: list[DocSource],
    brand_image: Optional[BrandImage],
    custom_stylesheets: list[str],
    custom_scripts: list[str],
    search: SearchSetting,
    pretty_urls: bool,
    settings: InjectionSettings = DEFAULT_SETTINGS,
    on_page: Optional[Callable[[Path], None]] = None,
    on_warning: Optional[Callable[[Path, str], None]] = None,
) -> tuple[int, list[PageWarning]]:
    """
    Walk the merged tree and inject every generated page.

    Args:
        root: Merged tree root
        docs: Merged sites, in navigation order
        brand_image: Optional navigation logo
        custom_stylesheets: Stylesheets relative to root (or absolute URLs)
        custom_scripts: Scripts relative to root (or absolute URLs)
        search: SearchConfig, or False when search is disabled
        pretty_urls: Drop "index.html" from navigation links
        settings: Injection names
        on_page: Callback(relative path) after each injected page
        on_warning: Callback(relative path, message) for each non-fatal page problem

    Returns:
        Tuple of (number of injected pages, recorded warnings)
    """
    root = Path(root)
    stylesheets = list(custom_stylesheets)
    scripts = list(custom_scripts)

    if search_enabled(search):
        search.engine.inject_scripts(scripts)
        search.engine.inject_styles(stylesheets)
    stylesheets.insert(0, settings.default_stylesheet)

    pages = 0
    warnings = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename

            if filename == settings.shared_script:
                if path.is_file() and not path.is_symlink():
                    append_injector(path, settings)
                continue
            # the redirect page is ours
            if path == root / "index.html":
                continue
            if not filename.endswith(".html"):
                continue
            if path.is_symlink() or not path.is_file():
                continue

            try:
                inject_page(
                    path, root, docs, brand_image, stylesheets, scripts,
                    search, pretty_urls, settings,
                )
            except (PageError, OSError) as e:
                relative = path.relative_to(root)
                message = f"{relative.as_posix()}: {e}"
                logger.warning("%s", message)
                warnings.append(PageWarning(path=relative, message=message))
                if on_warning:
                    on_warning(relative, message)
                # marker-less pages still got their head injection
                if not isinstance(e, NavigationMarkerMissing):
                    continue

            pages += 1
            if on_page:
                on_page(path.relative_to(root))

    logger.info("Injected %d pages under %s", pages, root)
    return pages, warnings
