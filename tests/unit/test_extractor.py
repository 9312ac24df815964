"""Unit tests for specxref.extractor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from specxref.extractor import (
    collect_documents,
    extract_markers,
    extract_references,
    parse_repo_url,
)

if TYPE_CHECKING:
    from pathlib import Path

    from specxref.models.specs import SpecsConfig


class TestExtractMarkers:
    def test_trims_spec_and_term(self) -> None:
        markdown = "A [[xref:  PE ,  Holder ]] and [[xref:test-1,Aal]]."
        assert extract_markers(markdown) == [("PE", "Holder"), ("test-1", "Aal")]

    def test_term_keeps_later_commas(self) -> None:
        assert extract_markers("[[xref: PE, Holder, verifier]]") == [("PE", "Holder, verifier")]

    def test_malformed_marker_skipped(self) -> None:
        assert extract_markers("[[xref: PE]] [[xref: PE, Holder]]") == [("PE", "Holder")]

    def test_other_markers_ignored(self) -> None:
        assert extract_markers("[[def: holder]] [[ref: holder]]") == []


class TestParseRepoUrl:
    def test_github_url(self) -> None:
        assert parse_repo_url("https://github.com/owner/repo") == ("owner", "repo")

    def test_trailing_parts(self) -> None:
        assert parse_repo_url("https://github.com/owner/repo/tree/main") == ("owner", "repo")

    def test_git_suffix(self) -> None:
        assert parse_repo_url("https://github.com/owner/repo.git") == ("owner", "repo")

    def test_missing_repo(self) -> None:
        assert parse_repo_url("https://github.com/owner") is None


class TestExtractReferences:
    def test_duplicates_collapse(self, specs_config: SpecsConfig) -> None:
        documents = [
            "[[xref: PE, Holder]]",
            "Again [[xref: PE, Holder]] and [[xref:PE,Holder]]",
        ]
        records = extract_references(documents, specs_config)
        assert len(records) == 1
        assert records[0].identity == ("PE", "Holder")

    def test_identity_is_case_sensitive(self, specs_config: SpecsConfig) -> None:
        records = extract_references(["[[xref: PE, Holder]] [[xref: PE, holder]]"], specs_config)
        assert [r.term for r in records] == ["Holder", "holder"]

    def test_enriched_from_config(self, specs_config: SpecsConfig) -> None:
        records = extract_references(["[[xref: test-1, Aal]]"], specs_config)
        record = records[0]
        assert record.repo_url == "https://github.com/blockchainbird/spec-up-xref-test-1"
        assert record.terms_dir == "spec/term-definitions"
        assert record.owner == "blockchainbird"
        assert record.repo == "spec-up-xref-test-1"
        assert record.site == "https://blockchainbird.github.io/spec-up-xref-test-1/"

    def test_unknown_spec_kept_without_repo(self, specs_config: SpecsConfig) -> None:
        records = extract_references(["[[xref: nope, Thing]]"], specs_config)
        assert len(records) == 1
        assert records[0].repo_url is None
        assert records[0].owner is None

    def test_first_seen_order(self, specs_config: SpecsConfig) -> None:
        records = extract_references(
            ["[[xref: test-1, Aal]]", "[[xref: PE, Holder]] [[xref: test-1, Aal]]"],
            specs_config,
        )
        assert [r.term for r in records] == ["Aal", "Holder"]


class TestCollectDocuments:
    def test_reads_markdown_files(self, tmp_path: Path, specs_config: SpecsConfig) -> None:
        terms_dir = tmp_path / "spec" / "terms-definitions"
        terms_dir.mkdir(parents=True)
        (terms_dir / "b.md").write_text("[[xref: PE, Holder]]", encoding="utf-8")
        (terms_dir / "a.md").write_text("[[xref: test-1, Aal]]", encoding="utf-8")
        (terms_dir / "notes.txt").write_text("[[xref: PE, Ignored]]", encoding="utf-8")

        documents = collect_documents(specs_config, tmp_path)
        assert documents == ["[[xref: test-1, Aal]]", "[[xref: PE, Holder]]"]

    def test_missing_directory_skipped(self, tmp_path: Path, specs_config: SpecsConfig) -> None:
        assert collect_documents(specs_config, tmp_path) == []
