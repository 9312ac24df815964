"""Reference collection pipeline.

extract → resolve each reference in turn → enrich commit hashes → write.
References are processed strictly one after another; the dataset is written
only after every reference has had its attempt, so partial results are never
published.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from specxref.aggregator import (
    apply_resolution,
    build_dataset,
    enrich_commit_hashes,
    write_dataset,
)
from specxref.errors import ErrorCode, XrefError
from specxref.extractor import collect_documents, extract_references
from specxref.models.specs import SpecsConfig

if TYPE_CHECKING:
    from pathlib import Path

    from specxref.models.xref import ReferenceRecord, XrefDataset
    from specxref.state import AppState

log = structlog.get_logger()


def load_specs_config(path: Path) -> SpecsConfig:
    """Read and validate the project's specs.json. Fatal on failure."""
    try:
        return SpecsConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError) as exc:
        raise XrefError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Cannot load {path}: {exc}",
        ) from exc


async def resolve_record(record: ReferenceRecord, state: AppState) -> bool:
    """Resolve one reference in place. Returns True if a definition was found."""
    bound = log.bind(external_spec=record.external_spec, term=record.term)
    if record.repo_url is None:
        bound.warning("xref_skipped", reason="repo_not_configured")
        return False

    resolver = await state.selector.select(record)
    bound.info("xref_resolving", strategy=resolver.kind)
    resolved = await resolver.resolve_term(record)
    if resolved is None:
        bound.warning("xref_unresolved", strategy=resolver.kind)
        return False

    apply_resolution(record, resolved)
    bound.info("xref_resolved", strategy=resolver.kind, commit_hash=record.commit_hash)
    return True


async def collect_xrefs(
    state: AppState,
    specs_config: SpecsConfig,
    base_dir: Path,
    output_dir: Path | None = None,
) -> XrefDataset:
    """Run the whole pipeline and persist the dataset."""
    records = extract_references(collect_documents(specs_config, base_dir), specs_config)

    resolved_count = 0
    for record in records:
        if await resolve_record(record, state):
            resolved_count += 1

    await enrich_commit_hashes(records, state.github)

    dataset = build_dataset(records)
    write_dataset(dataset, output_dir or base_dir / state.settings.output.dir)
    log.info("collect_complete", xrefs=len(records), resolved=resolved_count)
    return dataset
