"""
Template Registry Module.

A template is a named bundle of brand detection and the four field
extractors. The registry is an immutable, ordered tuple: detection walks
it in order and the first template whose markers appear wins, so an
earlier template takes precedence when several match.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.logger import get_logger
from .client import extract_client
from .dates import extract_date
from .leroy_merlin import (
    extract_client_leroy_merlin,
    extract_date_leroy_merlin,
    extract_price_leroy_merlin,
    extract_product_leroy_merlin,
)
from .price import extract_price
from .product import extract_product

logger = get_logger(__name__)

FieldExtractor = Callable[[Sequence[TextFragment], str], Dict[str, Any]]
DateExtractor = Callable[..., Dict[str, Any]]


@dataclass(frozen=True)
class InvoiceTemplate:
    """
    Brand-specific detection and extraction rules.

    Attributes:
        name: Template name, reported on the extracted record
        detect: Predicate over the document's full text
        extract_client: Customer extractor
        extract_product: Product extractor
        extract_price: Amount extractor
        extract_date: Date extractor, accepts ``now=``
    """
    name: str
    detect: Callable[[str], bool]
    extract_client: FieldExtractor
    extract_product: FieldExtractor
    extract_price: FieldExtractor
    extract_date: DateExtractor

    def __repr__(self) -> str:
        return f"InvoiceTemplate('{self.name}')"


def markers(*tokens: str) -> Callable[[str], bool]:
    """Case-sensitive detector: true when any token occurs in the text."""
    def detect(full_text: str) -> bool:
        return any(token in full_text for token in tokens)
    return detect


def generic_template(name: str, detect: Callable[[str], bool]) -> InvoiceTemplate:
    """Template using the generic extractors."""
    return InvoiceTemplate(
        name=name,
        detect=detect,
        extract_client=extract_client,
        extract_product=extract_product,
        extract_price=extract_price,
        extract_date=extract_date,
    )


ICI_STORE = generic_template(
    "ICI-Store",
    markers("STORBOX", "Rentoilage de store", "Rentollage de store"),
)

LEROY_MERLIN = InvoiceTemplate(
    name="Leroy Merlin",
    detect=markers("LEROY MERLIN", "LM FRANCE"),
    extract_client=extract_client_leroy_merlin,
    extract_product=extract_product_leroy_merlin,
    extract_price=extract_price_leroy_merlin,
    extract_date=extract_date_leroy_merlin,
)

CASTORAMA = generic_template(
    "Castorama",
    markers("CASTORAMA", "CASTO"),
)

GENERIC_TEMPLATE = generic_template("generic", lambda full_text: True)

TEMPLATES = (ICI_STORE, LEROY_MERLIN, CASTORAMA)


def detect_template(full_text: str, templates: Iterable[InvoiceTemplate] = TEMPLATES) -> Optional[InvoiceTemplate]:
    """
    Return the first template whose markers appear in the text.

    Args:
        full_text: Space-joined fragment texts.
        templates: Ordered templates to try.

    Returns:
        The matching template, or None when no brand is recognized.
    """
    for template in templates:
        if template.detect(full_text):
            return template

    logger.debug("No template matched")
    return None
