"""
Extraction Module for the extraction engine.

This module turns positioned invoice text into an ExtractedInvoiceRecord:
    - Template detection (ICI-Store, Leroy Merlin, Castorama)
    - Client, product, price and date extractors
    - Merging and the fallback guarantee

Author: ML Engineering Team
"""

from .record import ExtractedInvoiceRecord, fallback_record
from .templates import InvoiceTemplate, TEMPLATES, GENERIC_TEMPLATE, detect_template
from .orchestrator import InvoiceExtractor, merge_partials, extract_invoice

__all__ = [
    'ExtractedInvoiceRecord',
    'fallback_record',
    'InvoiceTemplate',
    'TEMPLATES',
    'GENERIC_TEMPLATE',
    'detect_template',
    'InvoiceExtractor',
    'merge_partials',
    'extract_invoice',
]
