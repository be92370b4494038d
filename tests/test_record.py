"""Tests for ExtractedInvoiceRecord and the fallback record."""

import json
from datetime import date

from invoice_engine.config import ConfigurationManager
from invoice_engine.extraction.record import FIELD_NAMES, ExtractedInvoiceRecord, fallback_record
from tests.conftest import FIXED_NOW


class TestExtractedInvoiceRecord:
    """Tests for the record data class."""

    def test_everything_optional(self):
        """A bare record has every field missing."""
        record = ExtractedInvoiceRecord()
        assert record.missing_fields == list(FIELD_NAMES)
        assert record.extracted_fields == {}
        assert not record.has_customer_identity()

    def test_identity_from_either_name(self):
        """A given name alone is an identity."""
        assert ExtractedInvoiceRecord(first_name="Jean").has_customer_identity()
        assert not ExtractedInvoiceRecord(first_name="", last_name="").has_customer_identity()

    def test_from_partial_filters_keys(self):
        """Unknown keys and None values are dropped."""
        record = ExtractedInvoiceRecord.from_partial(
            {'last_name': "DUPONT", 'email': None, 'unknown': 1}, template_name="generic"
        )
        assert record.last_name == "DUPONT"
        assert record.email is None
        assert record.template_name == "generic"

    def test_to_dict_is_json_ready(self):
        """Dates are ISO strings and metadata is included."""
        record = ExtractedInvoiceRecord(last_name="Lefèvre", purchase_date=date(2024, 6, 15))
        data = record.to_dict()
        assert data['purchase_date'] == "2024-06-15"
        assert data['is_fallback'] is False
        assert 'template_name' in data
        assert json.loads(record.to_json())['last_name'] == "Lefèvre"
        assert "Lefèvre" in record.to_json()

    def test_from_dict(self):
        """to_dict output rebuilds an equal record."""
        record = ExtractedInvoiceRecord(
            last_name="DUPONT", wind_sensor=False, grand_total=1499.0,
            purchase_date=date(2024, 5, 12), template_name="Leroy Merlin",
        )
        assert ExtractedInvoiceRecord.from_dict(record.to_dict()) == record


class TestFallbackRecord:
    """Tests for fallback_record."""

    def test_placeholders(self):
        """The fallback record carries the documented placeholders."""
        record = fallback_record(FIXED_NOW)
        assert record.is_fallback is True
        assert record.template_name is None
        assert (record.first_name, record.last_name) == ("Nouveau", "Client")
        assert record.address == "Adresse non détectée"
        assert record.email == ""
        assert record.phone == ""
        assert record.product_model == "Store banne"
        assert record.motor == "Non détecté"
        assert record.wind_sensor is False
        assert record.purchase_date == FIXED_NOW.date()
        assert record.product_reference == f"REF-{int(FIXED_NOW.timestamp() * 1000)}"
        assert record.unit_price is None
        assert record.grand_total is None

    def test_placeholders_from_configuration(self, tmp_path):
        """Placeholder strings can be overridden in settings."""
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "extraction:\n  fallback:\n    last_name: Customer\n    reference_prefix: TMP-\n",
            encoding="utf-8",
        )
        ConfigurationManager(str(settings))

        record = fallback_record(FIXED_NOW)
        assert record.last_name == "Customer"
        assert record.first_name == "Nouveau"
        assert record.product_reference.startswith("TMP-")
