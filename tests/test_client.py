"""Tests for the generic client extractor."""

from invoice_engine.config import ConfigurationManager
from invoice_engine.extraction.client import (
    clean_phone,
    collect_address,
    extract_client,
    find_email,
    find_labelled_phone,
    find_name,
    whole_text_client,
)
from tests.conftest import make_fragments, text_of


class TestExtractClient:
    """Tests for extract_client on positioned fragments."""

    def test_section_bounding_ignores_later_duplicate(self, sold_to_fragments):
        """Name and address come from the sold-to block only."""
        result = extract_client(sold_to_fragments, text_of(sold_to_fragments))
        assert result['first_name'] == "Jean"
        assert result['last_name'] == "DUPONT"
        assert "75001 Paris" in result['address']

    def test_full_client_block(self, ici_store_fragments):
        """Every customer field of a complete block is extracted."""
        result = extract_client(ici_store_fragments, text_of(ici_store_fragments))
        assert result['first_name'] == "Philippe"
        assert result['last_name'] == "NARD"
        assert result['address'] == "12 Rue de Kerveguen, 29870 Lannilis"
        assert result['phone'] == "0612345678"
        assert result['email'] == "philippe.nard@example.fr"
        assert result['order_number'] == "104532"

    def test_absent_fields_are_omitted(self):
        """Fields that were not found are not present, not empty."""
        fragments = make_fragments([("Client :", 100), ("Jean DUPONT", 90)])
        result = extract_client(fragments, text_of(fragments))
        assert 'email' not in result
        assert 'phone' not in result
        assert 'order_number' not in result

    def test_whole_text_pass_without_header(self):
        """Layouts without a customer header fall back to the whole text."""
        fragments = make_fragments([
            ("Facture", 100),
            ("M. Pierre MARTIN", 90),
            ("12 Rue des Lilas 29870 Lannilis", 80),
            ("Tel : 0698765432", 70),
            ("pierre.martin@example.fr", 60),
        ])
        result = extract_client(fragments, text_of(fragments))
        assert result['first_name'] == "Pierre"
        assert result['last_name'] == "MARTIN"
        assert result['address'] == "12 Rue des Lilas, 29870 Lannilis, France"
        assert result['phone'] == "0698765432"
        assert result['email'] == "pierre.martin@example.fr"

    def test_whole_text_pass_keeps_section_fields(self):
        """The second-chance pass only fills fields still missing."""
        fragments = make_fragments([
            ("Tél : 0299999999", 150),
            ("Vendu à :", 100),
            ("Tél:0611111111", 90),
            ("Mode de paiement", 50),
            ("Pierre MARTIN", 40),
        ])
        result = extract_client(fragments, text_of(fragments))
        assert result['first_name'] == "Pierre"
        assert result['last_name'] == "MARTIN"
        assert result['phone'] == "0611111111"


class TestFindName:
    """Tests for the name cascade."""

    def test_given_name_then_surname(self):
        """'Given SURNAME' is recognized."""
        assert find_name(["Jean DUPONT"]) == ("Jean", "DUPONT")

    def test_surname_then_given_name(self):
        """'SURNAME Given' is recognized."""
        assert find_name(["DUPONT Jean"]) == ("Jean", "DUPONT")

    def test_compound_names(self):
        """Hyphenated given names and multi-word surnames are kept whole."""
        assert find_name(["Jean-Pierre LE GOFF"]) == ("Jean-Pierre", "LE GOFF")

    def test_civil_title_is_skipped(self):
        """A leading civil title is not taken as the given name."""
        assert find_name(["Mme Marie DURAND"]) == ("Marie", "DURAND")

    def test_first_matching_line_wins(self):
        """Lines are tried top to bottom."""
        assert find_name(["Jean DUPONT", "Paul MARTIN"]) == ("Jean", "DUPONT")

    def test_two_word_fallback(self):
        """Without a case pattern, word 1 is the given name."""
        assert find_name(["jean de la fontaine"]) == ("jean", "de la fontaine")

    def test_single_words_give_nothing(self):
        """Single-word lines cannot hold a full name."""
        assert find_name(["DUPONT", "Paris"]) is None


class TestCollectAddress:
    """Tests for address accumulation."""

    def test_joins_consecutive_address_lines(self):
        """Address lines are joined with a comma."""
        lines = ["5 Rue X", "75001 Paris"]
        assert collect_address(lines) == "5 Rue X, 75001 Paris"

    def test_skips_name_email_and_phone_lines(self):
        """Contact lines are not part of the address."""
        lines = ["Jean DUPONT", "5 Rue X", "jean@example.fr", "Tél : 0612345678", "75001 Paris"]
        assert collect_address(lines, "Jean") == "5 Rue X, 75001 Paris"

    def test_stops_at_first_gap(self):
        """A non-address line ends the address."""
        lines = ["5 Rue X", "Bâtiment B", "75001 Paris"]
        assert collect_address(lines) == "5 Rue X"

    def test_keeps_going_without_gap_rule(self):
        """Without the gap rule, every address line is collected."""
        lines = ["5 Rue X", "Bâtiment B", "75001 Paris"]
        assert collect_address(lines, stop_at_gap=False) == "5 Rue X, 75001 Paris"

    def test_no_address(self):
        """No address-like line gives None."""
        assert collect_address(["Bonjour"]) is None


class TestPhoneAndEmail:
    """Tests for phone and email lookups."""

    def test_labelled_phone_removes_separators(self):
        """Spaces, dots and dashes are removed."""
        assert find_labelled_phone(["Téléphone : 06.12.34.56.78"]) == "0612345678"
        assert find_labelled_phone(["Mobile: 06-12-34-56-78"]) == "0612345678"

    def test_short_label(self):
        """'T :' is a phone label."""
        assert find_labelled_phone(["T : 0612345678"]) == "0612345678"

    def test_unlabelled_number_is_ignored(self):
        """Section phone lookup needs a label."""
        assert find_labelled_phone(["0612345678"]) is None

    def test_clean_phone(self):
        """Separators are stripped."""
        assert clean_phone("06 12 34 56 78") == "0612345678"

    def test_retailer_domain_is_excluded(self):
        """Shop addresses are not customer data."""
        lines = ["contact@ici-store.com", "jean@example.fr"]
        assert find_email(lines, ["ici-store.com"]) == "jean@example.fr"

    def test_excluded_domains_come_from_configuration(self, ici_store_fragments, tmp_path):
        """The excluded domain list is read from settings."""
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "extraction:\n  client:\n    excluded_email_domains: [example.fr]\n",
            encoding="utf-8",
        )
        ConfigurationManager(str(settings))

        result = extract_client(ici_store_fragments, text_of(ici_store_fragments))
        assert result['email'] == "contact@ici-store.com"


class TestWholeTextClient:
    """Tests for the whole-document pass."""

    def test_address_with_region(self):
        """Street, city, region and postal code are reformatted."""
        text = "Livraison 3 Rue du Port, Lannilis, Finistère, 29870 Merci"
        result = whole_text_client(text)
        assert result['address'] == "3 Rue du Port, Lannilis, Finistère, 29870, France"

    def test_bare_ten_digit_phone(self):
        """Unlabelled French numbers are accepted in the whole text."""
        result = whole_text_client("Contact 06 98 76 54 32")
        assert result['phone'] == "0698765432"

    def test_nothing_found(self):
        """No pattern means an empty result."""
        assert whole_text_client("rien ici") == {}

    def test_invoice_labels_are_not_names(self):
        """'Total TTC' and brand names are skipped; a later real name is kept."""
        result = whole_text_client("Facture LEROY MERLIN Total TTC : 100,00 € Jean DUPONT")
        assert result['first_name'] == "Jean"
        assert result['last_name'] == "DUPONT"

    def test_only_labels(self):
        """A text holding only invoice labels yields no name."""
        result = whole_text_client("Facture Total TTC : 100,00 € Montant HT : 83,33 €")
        assert 'first_name' not in result
        assert 'last_name' not in result
