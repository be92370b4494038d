"""
Awning Invoice Field-Extraction Engine.

Recovers customer, product, attribute, amount and date fields from
purchase-invoice PDFs of awning and blind retailers. Extraction never
fails outward: the worst outcome is a documented fallback record.

Example:
    >>> from invoice_engine import extract_invoice
    >>> record = extract_invoice("facture.pdf")
    >>> print(record.to_json())
"""

from .document_loader import TextFragment, LoadedDocument, PDFLoader
from .extraction import (
    ExtractedInvoiceRecord,
    InvoiceExtractor,
    InvoiceTemplate,
    TEMPLATES,
    detect_template,
    extract_invoice,
)

__version__ = "1.0.0"

__all__ = [
    'TextFragment',
    'LoadedDocument',
    'PDFLoader',
    'ExtractedInvoiceRecord',
    'InvoiceExtractor',
    'InvoiceTemplate',
    'TEMPLATES',
    'detect_template',
    'extract_invoice',
]
