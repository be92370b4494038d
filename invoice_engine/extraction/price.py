"""
Price Extractor Module.

Four independent amount searches over the full text: unit price, VAT,
shipping cost and grand total.

Author: ML Engineering Team
"""

from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from invoice_engine.document_loader.fragment import TextFragment
from . import patterns
from .normalizers import AmountNormalizer
from .patterns import PatternEntry, first_match

_amounts = AmountNormalizer()

PRICE_TABLES: Tuple[Tuple[str, Tuple[PatternEntry, ...]], ...] = (
    ('unit_price', patterns.UNIT_PRICE_PATTERNS),
    ('vat_amount', patterns.VAT_PATTERNS),
    ('shipping_cost', patterns.SHIPPING_PATTERNS),
    ('grand_total', patterns.GRAND_TOTAL_PATTERNS),
)


def extract_price(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """Extract the four amounts; fields not found are omitted."""
    return extract_amounts(PRICE_TABLES, full_text)


def extract_amounts(tables: Iterable[Tuple[str, Iterable[PatternEntry]]], full_text: str) -> Dict[str, Any]:
    """
    Run one amount cascade per field.

    Args:
        tables: (field name, ordered pattern entries) pairs.
        full_text: Text to search.

    Returns:
        Field name to float for each cascade that matched.
    """
    result: Dict[str, Any] = {}
    for field_name, table in tables:
        value = find_amount(table, full_text)
        if value is not None:
            result[field_name] = value
    return result


def find_amount(table: Iterable[PatternEntry], text: str) -> Optional[float]:
    return _amounts.normalize(first_match(table, text))
