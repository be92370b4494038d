"""Tests for the developer command line."""

import json

import pytest

from invoice_engine.extraction import ExtractedInvoiceRecord
from main import collect_inputs, main, parse_arguments, resolve_output_path, run_extraction


class StubExtractor:
    """Extractor returning a fixed record and remembering its inputs."""

    def __init__(self):
        self.seen = []

    def extract(self, document):
        self.seen.append(document)
        return ExtractedInvoiceRecord(first_name="Jean", last_name="DUPONT", template_name="generic")


class TestArguments:
    """Tests for argument parsing."""

    def test_output_modes(self):
        """--output is optional and may be given without a value."""
        assert parse_arguments(["-i", "a.pdf"]).output is None
        assert parse_arguments(["-i", "a.pdf", "-o"]).output == ""
        assert parse_arguments(["-i", "a.pdf", "-o", "out.json"]).output == "out.json"


class TestCollectInputs:
    """Tests for collect_inputs."""

    def test_directory(self, tmp_path):
        """Only PDF files are collected, sorted by name."""
        for name in ("b.PDF", "a.pdf", "notes.txt"):
            (tmp_path / name).write_bytes(b"x")
        assert [p.name for p in collect_inputs(str(tmp_path))] == ["a.pdf", "b.PDF"]

    def test_missing_path(self, tmp_path):
        """A missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            collect_inputs(str(tmp_path / "missing"))

    def test_non_pdf_file(self, tmp_path):
        """A single non-PDF file is refused."""
        path = tmp_path / "notes.txt"
        path.write_text("x")
        with pytest.raises(ValueError):
            collect_inputs(str(path))


class TestResolveOutputPath:
    """Tests for resolve_output_path."""

    def test_file_path(self, tmp_path):
        """A path with a suffix is used as is; its parent is created."""
        target = tmp_path / "nested" / "results.json"
        assert resolve_output_path(str(target)) == target
        assert target.parent.is_dir()

    def test_directory_gets_timestamped_name(self, tmp_path):
        """A directory receives extraction_<timestamp>.json."""
        path = resolve_output_path(str(tmp_path / "out"))
        assert path.parent == tmp_path / "out"
        assert path.name.startswith("extraction_")
        assert path.suffix == ".json"


class TestRunExtraction:
    """Tests for run_extraction and main."""

    def test_results_carry_source(self, tmp_path):
        """Each result names its file."""
        (tmp_path / "facture.pdf").write_bytes(b"x")
        extractor = StubExtractor()
        results = run_extraction(str(tmp_path), extractor)
        assert results == [{'source': "facture.pdf", **extractor.extract(None).to_dict()}]

    def test_main_prints_json(self, tmp_path, capsys):
        """Without --output the records are printed to stdout."""
        (tmp_path / "broken.pdf").write_bytes(b"not a pdf")
        assert main(["--input", str(tmp_path), "--quiet"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results[0]['source'] == "broken.pdf"
        assert results[0]['is_fallback'] is True

    def test_main_writes_file(self, tmp_path):
        """--output writes the JSON file."""
        (tmp_path / "broken.pdf").write_bytes(b"not a pdf")
        target = tmp_path / "results.json"
        assert main(["--input", str(tmp_path / "broken.pdf"), "--output", str(target), "--quiet"]) == 0
        assert json.loads(target.read_text(encoding="utf-8"))[0]['last_name'] == "Client"

    def test_main_missing_input(self, tmp_path):
        """A missing input exits with status 1."""
        assert main(["--input", str(tmp_path / "missing.pdf"), "--quiet"]) == 1
