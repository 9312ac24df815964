"""Parsers for the spec-up markup this package consumes.

Covers the ``[[xref: spec, term]]`` reference marker, the ``[[def: ...]]``
definition marker, the Markdown cleanup applied before transclusion, and the
glossary list of a rendered ``index.html``.
"""

from __future__ import annotations

import re

import lxml.html
import structlog
from lxml import etree

from specxref.models.xref import IndexedTerm

log = structlog.get_logger()

XREF_MARKER_RE = re.compile(r"\[\[xref:(.*?)\]\]")
_DEF_LINE_RE = re.compile(r"^\s*\[\[def:[^\]]*\]\]")
_DEF_MARKER_RE = re.compile(r"\[\[def:[^\]]*?\]\]")
_LEADING_TILDE_RE = re.compile(r"^\s*~\s*")

GLOSSARY_LIST_XPATH = (
    "//dl[contains(concat(' ', normalize-space(@class), ' '), ' terms-and-definitions-list ')]"
)


def split_marker(body: str) -> tuple[str, str] | None:
    """Split the inside of an xref marker on its first comma.

    ``" PE, Holder "`` → ``("PE", "Holder")``. Returns None when there is no
    comma or either side is empty after trimming.
    """
    spec, sep, term = body.partition(",")
    if not sep:
        return None
    spec, term = spec.strip(), term.strip()
    if not spec or not term:
        return None
    return spec, term


def is_line_with_definition(line: str) -> bool:
    """True if the line opens with a ``[[def: ...]]`` marker."""
    return _DEF_LINE_RE.match(line) is not None


def clean_markdown(content: str) -> str:
    """Strip spec-up markers from term Markdown before rendering it.

    Removes ``[[def: ...]]`` markers, one leading ``~`` per line (the
    definition continuation marker), ``[[ref:`` openers and every ``]]``.
    """
    content = _DEF_MARKER_RE.sub("", content)
    content = "\n".join(_LEADING_TILDE_RE.sub("", line, count=1) for line in content.split("\n"))
    return content.replace("[[ref:", "").replace("]]", "")


def next_element(element: etree._Element) -> etree._Element | None:
    """Next sibling that is an element (comments and processing instructions skipped)."""
    sibling = element.getnext()
    while sibling is not None and not isinstance(sibling.tag, str):
        sibling = sibling.getnext()
    return sibling


def direct_text(element: etree._Element) -> str:
    """Concatenate the element's own (stripped) text nodes, ignoring child elements."""
    return "".join(text.strip() for text in element.xpath("text()"))


def parse_glossary(html: str) -> list[IndexedTerm] | None:
    """Extract every term and its definitions from a rendered spec page.

    Returns None when the page has no ``dl.terms-and-definitions-list``.
    Each ``<dt>`` carrying a ``span[id^="term:"]`` yields one term whose
    definition is the outer HTML of all immediately following ``<dd>``
    elements, joined by newlines. Terms with an empty label are skipped.
    """
    try:
        document = lxml.html.document_fromstring(html)
    except etree.ParserError:
        log.warning("glossary_document_empty")
        return None
    lists = document.xpath(GLOSSARY_LIST_XPATH)
    if not lists:
        return None

    terms: list[IndexedTerm] = []
    for dt in lists[0].iter("dt"):
        spans = dt.xpath(".//span[starts-with(@id, 'term:')]")
        if not spans:
            continue

        label = direct_text(spans[0]) or spans[0].text_content().strip()
        if not label:
            continue

        definitions: list[str] = []
        sibling = next_element(dt)
        while sibling is not None and sibling.tag == "dd":
            definitions.append(lxml.html.tostring(sibling, encoding="unicode", with_tail=False))
            sibling = next_element(sibling)

        terms.append(IndexedTerm(term=label, definition="\n".join(definitions)))

    return terms
