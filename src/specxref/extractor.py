"""Reference extraction.

Scans the project's term files for ``[[xref: spec, term]]`` markers and turns
them into ReferenceRecords enriched with the repository details configured in
``specs.json``. Pure business logic apart from collect_documents().
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlparse

import structlog

from specxref.models.xref import ReferenceRecord
from specxref.parser import XREF_MARKER_RE, split_marker

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from specxref.models.specs import SpecsConfig

log = structlog.get_logger()


def extract_markers(markdown: str) -> list[tuple[str, str]]:
    """Return ``(external_spec, term)`` for every xref marker in ``markdown``."""
    found: list[tuple[str, str]] = []
    for match in XREF_MARKER_RE.finditer(markdown):
        pair = split_marker(match.group(1))
        if pair is None:
            log.warning("xref_marker_malformed", marker=match.group(0))
            continue
        found.append(pair)
    return found


def parse_repo_url(repo_url: str) -> tuple[str, str] | None:
    """``https://github.com/owner/repo`` → ``("owner", "repo")``."""
    segments = urlparse(repo_url).path.split("/")
    if len(segments) < 3 or not segments[1] or not segments[2]:
        return None
    return segments[1], segments[2].removesuffix(".git")


def extract_references(
    documents: Iterable[str], specs_config: SpecsConfig
) -> list[ReferenceRecord]:
    """Build one ReferenceRecord per distinct ``(external_spec, term)`` pair.

    Order follows first appearance. A spec missing from the configuration
    keeps an unset ``repo_url``; later stages skip such records.
    """
    seen: dict[tuple[str, str], ReferenceRecord] = {}
    for markdown in documents:
        for external_spec, term in extract_markers(markdown):
            if (external_spec, term) not in seen:
                seen[(external_spec, term)] = ReferenceRecord(
                    external_spec=external_spec, term=term
                )

    records = list(seen.values())
    for record in records:
        _apply_config(record, specs_config)

    log.info("xrefs_extracted", count=len(records))
    return records


def _apply_config(record: ReferenceRecord, specs_config: SpecsConfig) -> None:
    for spec in specs_config.specs:
        for repo in spec.external_specs_repos:
            if repo.external_spec == record.external_spec:
                record.repo_url = repo.url
                record.terms_dir = repo.terms_dir
        for mapping in spec.external_specs:
            if record.external_spec in mapping:
                record.site = mapping[record.external_spec]

    if record.repo_url is None:
        log.warning(
            "xref_repo_not_configured",
            external_spec=record.external_spec,
            term=record.term,
        )
        return

    parsed = parse_repo_url(record.repo_url)
    if parsed is None:
        log.warning("xref_repo_url_invalid", repo_url=record.repo_url)
        return
    record.owner, record.repo = parsed


def collect_documents(specs_config: SpecsConfig, base_dir: Path) -> list[str]:
    """Read every Markdown file in the configured term directories."""
    documents: list[str] = []
    for spec in specs_config.specs:
        terms_dir = base_dir / spec.terms_path
        if not terms_dir.is_dir():
            log.warning("terms_directory_missing", path=str(terms_dir))
            continue
        for path in sorted(terms_dir.glob("*.md")):
            log.debug("terms_file_scanned", path=str(path))
            documents.append(path.read_text(encoding="utf-8"))
    return documents
