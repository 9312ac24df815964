"""Unit tests for the specxref command line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from specxref.aggregator import write_dataset
from specxref.cli import main
from specxref.models.xref import ReferenceRecord, XrefDataset

if TYPE_CHECKING:
    from pathlib import Path

PAGE = (
    "<html><body><dl class=\"terms-and-definitions-list\">"
    "<dt><span class=\"transcluded-xref-term\">Holder</span></dt>"
    "</dl></body></html>"
)


class TestTransclude:
    def test_writes_output(self, tmp_path: Path) -> None:
        dataset = XrefDataset(
            xrefs=[ReferenceRecord(external_spec="PE", term="Holder", content="~ Holds things.")]
        )
        paths = write_dataset(dataset, tmp_path / "output")
        page = tmp_path / "index.html"
        page.write_text(PAGE, encoding="utf-8")
        out = tmp_path / "out.html"

        argv = ["transclude", str(page), "--dataset", str(paths.js_path), "--output", str(out)]
        code = main(argv)

        assert code == 0
        html = out.read_text(encoding="utf-8")
        assert "meta-info-content-wrapper" in html
        assert "<p>Holds things.</p>" in html

    def test_missing_dataset(self, tmp_path: Path) -> None:
        page = tmp_path / "index.html"
        page.write_text(PAGE, encoding="utf-8")
        assert main(["transclude", str(page), "--dataset", str(tmp_path / "absent.json")]) == 1
        assert page.read_text(encoding="utf-8") == PAGE


class TestCollect:
    def test_invalid_specs_file(self, tmp_path: Path) -> None:
        specs = tmp_path / "specs.json"
        specs.write_text("{not json", encoding="utf-8")
        assert main(["collect", "--specs", str(specs)]) == 2


class TestTranscludeInputs:
    def test_empty_input_html(self, tmp_path: Path) -> None:
        paths = write_dataset(XrefDataset(xrefs=[]), tmp_path / "output")
        page = tmp_path / "index.html"
        page.write_text("   \n", encoding="utf-8")
        assert main(["transclude", str(page), "--dataset", str(paths.json_path)]) == 1
        assert page.read_text(encoding="utf-8") == "   \n"

    def test_log_level_flag(self, tmp_path: Path) -> None:
        paths = write_dataset(XrefDataset(xrefs=[]), tmp_path / "output")
        page = tmp_path / "index.html"
        page.write_text(PAGE, encoding="utf-8")
        argv = ["--log-level", "DEBUG", "transclude", str(page), "--dataset", str(paths.json_path)]
        assert main(argv) == 0
