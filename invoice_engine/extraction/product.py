"""
Product Extractor Module.

Generic extraction of product identity (reference, model, brand) and the
warranty-relevant attributes: frame colour, fabric colour, motor and
wind sensor.

Author: ML Engineering Team
"""

from typing import Any, Dict, Sequence

from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.helpers import collapse_whitespace
from invoice_engine.utils.logger import get_logger
from . import patterns
from .patterns import first_match_in_lines

logger = get_logger(__name__)

ATTRIBUTE_TABLES = (
    ('frame_color', patterns.FRAME_COLOR_PATTERNS),
    ('fabric_color', patterns.FABRIC_COLOR_PATTERNS),
    ('motor', patterns.MOTOR_PATTERNS),
)


def extract_product(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """
    Extract product identity and attributes.

    The first product pattern whose reference regex matches sets the
    reference and brand, then its model regex is tried. Attributes are
    looked up independently of the product pattern, line by line first
    and then in the full text. ``wind_sensor`` is always present.

    Args:
        fragments: All document fragments in emission order.
        full_text: Space-joined fragment texts.

    Returns:
        Partial record of product fields.
    """
    result = match_product(full_text)

    lines = [fragment.text for fragment in fragments if not fragment.is_blank()]
    for field_name, table in ATTRIBUTE_TABLES:
        value = first_match_in_lines(table, lines, full_text)
        if value:
            result[field_name] = value

    result['wind_sensor'] = has_wind_sensor(full_text)
    return result


def match_product(full_text: str) -> Dict[str, Any]:
    """Apply PRODUCT_PATTERNS in order; first reference match wins."""
    for product in patterns.PRODUCT_PATTERNS:
        ref_match = product.reference.search(full_text)
        if ref_match is None:
            continue

        result: Dict[str, Any] = {
            'product_reference': collapse_whitespace(ref_match.group(product.reference_group)),
            'product_brand': product.brand,
        }

        if product.model is not None:
            model_match = product.model.search(full_text)
            if model_match:
                result['product_model'] = collapse_whitespace(model_match.group(product.model_group))

        logger.debug(f"Product pattern '{product.brand}' matched: {result['product_reference']}")
        return result

    return {}


def has_wind_sensor(full_text: str) -> bool:
    """Whether a wind sensor is mentioned anywhere in the document."""
    return patterns.WIND_SENSOR.search(full_text) is not None
