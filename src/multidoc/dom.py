"""Small helpers around BeautifulSoup trees."""

from typing import Iterator, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, Tag

# libxml2 supplies the <html> and <body> elements a page leaves implicit
PARSER = "lxml"

_factory = BeautifulSoup("", PARSER)


def parse_html(markup: str) -> BeautifulSoup:
    """
    Parse a page into a tree with the document structure HTML5 implies.

    Omitted <html>, <head> and <body> tags are allowed by HTML5. libxml2 adds
    <head> only when it sees head content, so an empty one is inserted here.
    """
    soup = BeautifulSoup(markup, PARSER)
    html = soup.find("html")
    if html is not None and html.find("head", recursive=False) is None:
        html.insert(0, new_tag("head"))
    return soup


def new_tag(name: str, attrs: Optional[dict] = None, text: Optional[str] = None) -> Tag:
    """Create a detached tag that can be inserted into any parsed page."""
    tag = _factory.new_tag(name, attrs=dict(attrs or {}))
    if text is not None:
        tag.string = text
    return tag


def iter_preorder(node: PageElement) -> Iterator[PageElement]:
    """
    Walk a tree in document (pre-)order.

    Children are read after their parent has been yielded, so nodes inserted
    into the current element while it is being visited are walked too.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, Tag):
            stack.extend(reversed(current.contents))


def first_child(tag: Tag) -> Optional[PageElement]:
    """Return the first child node, skipping whitespace-only text."""
    for child in tag.contents:
        if isinstance(child, NavigableString) and not isinstance(child, Comment):
            if not child.strip():
                continue
        return child
    return None
