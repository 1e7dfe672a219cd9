"""Internal keyword hyperlinking for generated HTML."""

import re
from typing import Mapping, Optional

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

LINK_CLASS = "internal-link"

# Text inside these elements is never linked
_SKIP_PARENTS = {"a", "script", "style", "code", "pre", "textarea", "button"}

# Non-text string nodes BeautifulSoup also returns from find_all(string=True)
_SPECIAL_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


def _keyword_pattern(keyword: str) -> re.Pattern:
    """Case-insensitive, whole-word pattern for *keyword*."""
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", re.IGNORECASE)


def _is_linkable(node: NavigableString) -> bool:
    if isinstance(node, _SPECIAL_STRINGS):
        return False
    return not any(parent.name in _SKIP_PARENTS for parent in node.parents)


def _link_first(soup: BeautifulSoup, pattern: re.Pattern, href: str) -> bool:
    """Wrap the first linkable match of *pattern* in an anchor. Return True on success."""
    for node in soup.find_all(string=True):
        if not _is_linkable(node):
            continue
        text = str(node)
        match = pattern.search(text)
        if not match:
            continue

        anchor: Tag = soup.new_tag("a", attrs={"href": href, "class": LINK_CLASS})
        anchor.string = match.group(0)
        pieces = []
        if match.start():
            pieces.append(NavigableString(text[: match.start()]))
        pieces.append(anchor)
        if match.end() < len(text):
            pieces.append(NavigableString(text[match.end():]))
        node.replace_with(*pieces)
        return True
    return False


def inject_links(html: str, link_map: Optional[Mapping[str, str]]) -> str:
    """Link the first whole-word occurrence of each keyword in *link_map*.

    Only text nodes are scanned, so attribute values and markup are never
    rewritten, and text already inside an ``<a>`` element (including anchors
    added for an earlier keyword) is left alone.  Longer keywords are applied
    first so that ``"SEO tools"`` wins over ``"SEO"`` when both are mapped.

    When nothing is linked the input is returned unchanged.
    """
    if not html or not link_map:
        return html

    soup = BeautifulSoup(html, "html.parser")
    changed = False
    for keyword in sorted(link_map, key=len, reverse=True):
        keyword_text = keyword.strip()
        if not keyword_text:
            continue
        if _link_first(soup, _keyword_pattern(keyword_text), link_map[keyword]):
            changed = True

    return str(soup) if changed else html
