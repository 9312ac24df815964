"""Dataset aggregation and persistence.

Merges resolution results into the reference records and writes the
consolidated dataset three ways:

  output/xrefs-data.json                      current snapshot
  output/xrefs-data.js                        ``const allXrefs = {...};``
  output/xrefs-history/xrefs-data-<ms>.js     one per run, never rewritten
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from specxref.cache import write_text_atomic
from specxref.models.xref import XrefDataset
from specxref.provenance import get_latest_commit, term_file_path

if TYPE_CHECKING:
    from pathlib import Path

    from specxref.github import GitHubClient
    from specxref.models.xref import ReferenceRecord, ResolvedTerm

log = structlog.get_logger()

SNAPSHOT_JSON = "xrefs-data.json"
SNAPSHOT_JS = "xrefs-data.js"
HISTORY_DIR = "xrefs-history"
JS_VARIABLE = "allXrefs"


@dataclass(frozen=True)
class DatasetPaths:
    json_path: Path
    js_path: Path
    history_path: Path


def apply_resolution(record: ReferenceRecord, resolved: ResolvedTerm) -> None:
    """Copy a resolver's findings onto the reference record."""
    record.content = resolved.content
    record.owner = resolved.owner
    record.repo = resolved.repo
    record.repo_url = resolved.repo_url
    record.avatar_url = resolved.avatar_url
    if resolved.commit_hash:
        record.commit_hash = resolved.commit_hash


async def enrich_commit_hashes(records: list[ReferenceRecord], github: GitHubClient) -> None:
    """Fill in missing commit hashes from each term's conventional file path.

    Runs sequentially and returns only after every record has been attempted.
    """
    for record in records:
        if record.commit_hash:
            continue
        if record.repo_url is None or record.owner is None or record.repo is None:
            log.warning(
                "commit_skipped_no_repo",
                external_spec=record.external_spec,
                term=record.term,
            )
            continue
        path = term_file_path(record.terms_dir, record.term)
        record.commit_hash = await get_latest_commit(github, record.owner, record.repo, path)


def build_dataset(records: list[ReferenceRecord]) -> XrefDataset:
    return XrefDataset(xrefs=list(records))


def to_js_assignment(dataset: XrefDataset) -> str:
    return f"const {JS_VARIABLE} = {json.dumps(dataset.dump(), indent=2)};"


def write_dataset(
    dataset: XrefDataset,
    output_dir: Path,
    *,
    now: datetime | None = None,
) -> DatasetPaths:
    """Persist the snapshot pair and a new history entry."""
    now = now or datetime.now(UTC)
    stamp = int(now.timestamp() * 1000)

    paths = DatasetPaths(
        json_path=output_dir / SNAPSHOT_JSON,
        js_path=output_dir / SNAPSHOT_JS,
        history_path=output_dir / HISTORY_DIR / f"xrefs-data-{stamp}.js",
    )

    js_text = to_js_assignment(dataset)
    write_text_atomic(paths.json_path, json.dumps(dataset.dump(), indent=2))
    write_text_atomic(paths.js_path, js_text)
    write_text_atomic(paths.history_path, js_text)

    log.info(
        "dataset_written",
        xrefs=len(dataset.xrefs),
        path=str(paths.json_path),
        history=str(paths.history_path),
    )
    return paths


def load_dataset(path: Path) -> XrefDataset | None:
    """Read a dataset back from its JSON snapshot or JS-assignment variant."""
    try:
        text = path.read_text(encoding="utf-8").strip()
        prefix = f"const {JS_VARIABLE} = "
        if text.startswith(prefix):
            text = text.removeprefix(prefix).removesuffix(";")
        return XrefDataset.model_validate_json(text)
    except (OSError, ValidationError):
        log.error("dataset_load_failed", path=str(path), exc_info=True)
        return None
