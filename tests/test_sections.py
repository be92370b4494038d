"""Tests for section bounding."""

import re

from invoice_engine.extraction.sections import CLIENT_SECTION, SectionSpec, collect_section
from tests.conftest import make_fragments


class TestCollectSection:
    """Tests for collect_section with the client headers."""

    def test_section_between_headers(self, sold_to_fragments):
        """Only fragments between the start and end headers are kept."""
        section = collect_section(sold_to_fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT", "5 Rue X, 75001 Paris"]

    def test_sorted_top_to_bottom(self):
        """Emission order does not matter: higher y comes first."""
        fragments = make_fragments([
            ("Vendu à :", 100),
            ("75001 Paris", 70),
            ("Jean DUPONT", 90),
            ("5 Rue X", 80),
        ])
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT", "5 Rue X", "75001 Paris"]

    def test_no_end_header_runs_to_page_bottom(self):
        """Without an end header, everything below the start is kept."""
        fragments = make_fragments([
            ("Client :", 100),
            ("Jean DUPONT", 90),
            ("Merci de votre achat", 10),
        ])
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT", "Merci de votre achat"]

    def test_excludes_blank_and_header_fragments(self):
        """Blank runs and repeated start headers are dropped."""
        fragments = make_fragments([
            ("Facturé à :", 100),
            ("   ", 95),
            ("Client", 92),
            ("Jean DUPONT", 90),
            ("Livraison", 50),
        ])
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT"]

    def test_fragments_above_header_are_excluded(self):
        """Content printed above the start header is not in the section."""
        fragments = make_fragments([
            ("ICI-Store SAS", 120),
            ("Customer", 100),
            ("Jean DUPONT", 90),
        ])
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT"]

    def test_end_header_above_start_is_ignored(self):
        """An end header must lie below the start header."""
        fragments = make_fragments([
            ("Sold to:", 100),
            ("Jean DUPONT", 90),
            ("Delivery", 150),
            ("5 Rue X", 80),
        ])
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT", "5 Rue X"]

    def test_other_pages_are_excluded(self):
        """Coordinates of another page never fall into the section."""
        fragments = make_fragments([("Client :", 100), ("Jean DUPONT", 90)]) + \
            make_fragments([("Paul MARTIN", 95)], page=1)
        section = collect_section(fragments, CLIENT_SECTION)
        assert [f.text for f in section] == ["Jean DUPONT"]

    def test_missing_start_header_returns_empty(self):
        """No start header means no section."""
        fragments = make_fragments([("Jean DUPONT", 90), ("Payment method", 50)])
        assert collect_section(fragments, CLIENT_SECTION) == []


class TestSectionSpec:
    """Tests for SectionSpec lookups."""

    def test_find_start_returns_first_in_reading_order(self):
        """The first matching fragment is the start header."""
        spec = SectionSpec("demo", re.compile("^Start"), re.compile("^End"))
        fragments = make_fragments([("Start A", 50), ("Start B", 100)])
        assert spec.find_start(fragments) == 0

    def test_find_end_skips_fragments_before_start(self):
        """End headers emitted before the start header are not candidates."""
        spec = SectionSpec("demo", re.compile("^Start"), re.compile("^End"))
        fragments = make_fragments([("End 1", 10), ("Start", 100), ("End 2", 40)])
        assert spec.find_end(fragments, 1).text == "End 2"
