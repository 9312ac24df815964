"""Transclusion of resolved external terms into a rendered glossary.

For every ``<dt>`` holding a ``<span class="transcluded-xref-term">``
placeholder with a matching record, two ``<dd>`` siblings are inserted right
after the ``<dt>``, in this order:

  1. ``dd.transcluded-xref-term.meta-info-content-wrapper``   provenance table
  2. ``dd.transcluded-xref-term.transcluded-xref-term-embedded``  definition

Placeholders without a match are left untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import lxml.html
import structlog
from lxml import etree
from markdown_it import MarkdownIt

from specxref.parser import clean_markdown, direct_text

if TYPE_CHECKING:
    from specxref.models.xref import ReferenceRecord, XrefDataset
    from specxref.protocols import MarkdownRenderer

log = structlog.get_logger()

PLACEHOLDER_CLASS = "transcluded-xref-term"
EMBEDDED_CLASS = "transcluded-xref-term-embedded"
META_INFO_CLASS = "meta-info-content-wrapper"

PLACEHOLDER_XPATH = (
    f"//dt//span[contains(concat(' ', normalize-space(@class), ' '), ' {PLACEHOLDER_CLASS} ')]"
)


class MarkdownItRenderer:
    """CommonMark with tables and raw HTML, as spec-up renders definitions."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark", {"html": True}).enable("table")

    def render(self, markdown: str) -> str:
        return self._md.render(markdown)


def find_record(dataset: XrefDataset, label: str) -> ReferenceRecord | None:
    """First resolved record for ``label``; exact match wins over a case-insensitive one."""
    resolved = [record for record in dataset.xrefs if record.content is not None]
    for record in resolved:
        if record.term == label:
            return record
    wanted = label.casefold()
    for record in resolved:
        if record.term.casefold() == wanted:
            return record
    return None


def build_meta_markdown(record: ReferenceRecord) -> str:
    """Provenance table; any missing field reads ``Unknown``."""
    avatar = f"![avatar]({record.avatar_url})" if record.avatar_url else ""
    owner = record.owner or "Unknown"
    repo = f"[{record.repo}]({record.repo_url})" if record.repo and record.repo_url else "Unknown"
    commit_hash = record.commit_hash or "Unknown"
    return (
        "| Property | Value |\n"
        "| -------- | ----- |\n"
        f"| Owner | {avatar} {owner} |\n"
        f"| Repo | {repo} |\n"
        f"| Commit hash | {commit_hash} |\n"
    )


def _definition_block(classes: str, markup: str) -> etree._Element:
    dd = lxml.html.Element("dd")
    dd.set("class", classes)
    if not markup.strip():
        return dd

    fragments = lxml.html.fragments_fromstring(markup)
    if fragments and isinstance(fragments[0], str):
        dd.text = fragments.pop(0)
    for fragment in fragments:
        dd.append(fragment)
    return dd


def insert_trefs(
    root: etree._Element,
    dataset: XrefDataset,
    renderer: MarkdownRenderer,
) -> int:
    """Insert provenance and definition blocks after each matched placeholder.

    Returns the number of placeholders that were transcluded.
    """
    inserted = 0
    for span in root.xpath(PLACEHOLDER_XPATH):
        label = direct_text(span)
        record = find_record(dataset, label)
        if record is None:
            log.debug("tref_no_match", term=label)
            continue

        dt = next(span.iterancestors("dt"), None)
        if dt is None:
            continue

        meta = _definition_block(
            f"{PLACEHOLDER_CLASS} {META_INFO_CLASS}",
            renderer.render(build_meta_markdown(record)),
        )
        definition = _definition_block(
            f"{PLACEHOLDER_CLASS} {EMBEDDED_CLASS}",
            renderer.render(clean_markdown(record.content or "")),
        )
        dt.addnext(meta)
        meta.addnext(definition)
        inserted += 1

    log.info("trefs_inserted", count=inserted)
    return inserted


def transclude_html(
    html: str,
    dataset: XrefDataset,
    renderer: MarkdownRenderer | None = None,
) -> str:
    """Return ``html`` with every matched placeholder transcluded."""
    root = lxml.html.document_fromstring(html)
    insert_trefs(root, dataset, renderer or MarkdownItRenderer())
    doctype = root.getroottree().docinfo.doctype
    return lxml.html.tostring(root, encoding="unicode", doctype=doctype or None)
