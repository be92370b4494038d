"""
Invoice Extractor Module.

This module provides the InvoiceExtractor class, the engine's entry
point. It loads a document, picks a template, runs the four field
extractors, merges their partial results and guarantees a usable record.

Pipeline:
    document -> PDFLoader -> fragments + full text -> detect_template
    -> client / product / price / date extractors -> merge
    -> ExtractedInvoiceRecord (or the fallback record)

Author: ML Engineering Team
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from invoice_engine.config import get_config
from invoice_engine.document_loader import PDFLoader, LoadedDocument, TextFragment, build_full_text
from invoice_engine.document_loader.pdf_loader import DocumentSource
from invoice_engine.utils.exceptions import DocumentLoadError, ExtractionError
from invoice_engine.utils.logger import get_logger
from .record import ExtractedInvoiceRecord, fallback_record
from .templates import GENERIC_TEMPLATE, TEMPLATES, InvoiceTemplate, detect_template

# Initialize module logger
logger = get_logger(__name__)

Clock = Callable[[], datetime]


class InvoiceExtractor:
    """
    Heuristic field extractor for awning and blind purchase invoices.

    ``extract`` never raises: loader failures, unexpected extractor
    errors and documents without a recognizable customer all produce the
    fallback record, which a human reviews and corrects downstream.

    Attributes:
        loader: Document loader turning payloads into fragments
        templates: Ordered brand templates tried by the detector
        clock: Source of the extraction time (fallback date, reference)
        max_text_length: Full text beyond this length is ignored

    Example:
        >>> extractor = InvoiceExtractor()
        >>> record = extractor.extract(Path("facture.pdf"))
        >>> print(record.last_name, record.grand_total)
        >>> print(record.is_fallback)
    """

    def __init__(
        self,
        loader: Optional[PDFLoader] = None,
        templates: Optional[Iterable[InvoiceTemplate]] = None,
        clock: Optional[Clock] = None
    ) -> None:
        """
        Initialize the extractor.

        Args:
            loader: Document loader. Defaults to a configured PDFLoader.
            templates: Templates to detect. Defaults to TEMPLATES.
            clock: Zero-argument callable returning "now".
        """
        self.loader = loader or PDFLoader()
        self.templates = tuple(templates) if templates is not None else TEMPLATES
        self.clock = clock or datetime.now
        self.max_text_length = get_config("extraction.max_text_length", 200000)

        logger.debug(f"InvoiceExtractor initialized with {len(self.templates)} template(s)")

    def extract(self, document: DocumentSource) -> ExtractedInvoiceRecord:
        """
        Extract fields from a document payload.

        Args:
            document: PDF bytes, path, or binary file object.

        Returns:
            The extracted record, or the fallback record.
        """
        try:
            loaded = self.loader.load(document)
            return self.extract_from_document(loaded)

        except DocumentLoadError as e:
            logger.error(f"Document could not be loaded: {e}")
            return self._fallback()

        except ExtractionError as e:
            logger.exception(f"Extractor failed: {e}")
            return self._fallback()

        except Exception as e:
            logger.exception(f"Unexpected extraction failure: {e}")
            return self._fallback()

    def extract_from_document(self, loaded: LoadedDocument) -> ExtractedInvoiceRecord:
        """Extract fields from an already loaded document."""
        return self.extract_from_fragments(loaded.fragments, loaded.full_text)

    def extract_from_fragments(
        self,
        fragments: Sequence[TextFragment],
        full_text: Optional[str] = None
    ) -> ExtractedInvoiceRecord:
        """
        Extract fields from positioned fragments.

        Args:
            fragments: Fragments of all pages in emission order.
            full_text: Space-joined texts. Built from fragments if omitted.

        Returns:
            The extracted record, or the fallback record when neither a
            surname nor a given name was found.

        Raises:
            ExtractionError: If an extractor fails unexpectedly.
        """
        fragments = list(fragments)
        if full_text is None:
            full_text = build_full_text(fragments)

        if len(full_text) > self.max_text_length:
            logger.warning(
                f"Text layer has {len(full_text)} characters, "
                f"limiting to {self.max_text_length}"
            )
            full_text = full_text[:self.max_text_length]

        template = detect_template(full_text, self.templates)
        if template is None:
            template = GENERIC_TEMPLATE
        logger.info(f"Using template: {template.name}")

        now = self.clock()
        partials = [
            self._run('client', template.extract_client, fragments, full_text),
            self._run('product', template.extract_product, fragments, full_text),
            self._run('price', template.extract_price, fragments, full_text),
            self._run('date', template.extract_date, fragments, full_text, now=now),
        ]

        merged = merge_partials(partials)
        if not merged.get('last_name') and not merged.get('first_name'):
            logger.warning("No customer identity found, returning fallback record")
            return fallback_record(now)

        record = ExtractedInvoiceRecord.from_partial(merged, template_name=template.name)
        logger.info(
            f"Extracted {len(record.extracted_fields)} field(s) "
            f"({len(record.missing_fields)} missing)"
        )
        return record

    async def extract_async(self, document: DocumentSource, timeout: Optional[float] = None) -> ExtractedInvoiceRecord:
        """
        Run ``extract`` in a worker thread.

        Args:
            document: PDF bytes, path, or binary file object.
            timeout: Seconds to wait before giving up. None waits forever.

        Returns:
            The extracted record; the fallback record on timeout.
        """
        try:
            return await asyncio.wait_for(asyncio.to_thread(self.extract, document), timeout)
        except asyncio.TimeoutError:
            logger.error(f"Extraction timed out after {timeout}s")
            return self._fallback()

    def _run(self, family: str, extractor: Callable[..., Dict[str, Any]], *args, **kwargs) -> Dict[str, Any]:
        try:
            return extractor(*args, **kwargs)
        except Exception as e:
            raise ExtractionError(family, str(e)) from e

    def _fallback(self) -> ExtractedInvoiceRecord:
        return fallback_record(self.clock())


def merge_partials(partials: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge partial records; the first non-None value of each key wins.

    Example:
        >>> merge_partials([{'a': 1}, {'a': 2, 'b': None}, {'b': 3}])
        {'a': 1, 'b': 3}
    """
    merged: Dict[str, Any] = {}
    for partial in partials:
        for key, value in partial.items():
            if value is not None and merged.get(key) is None:
                merged[key] = value
    return merged


def extract_invoice(document: DocumentSource) -> ExtractedInvoiceRecord:
    """Extract an invoice with a default InvoiceExtractor."""
    return InvoiceExtractor().extract(document)


__all__ = ['InvoiceExtractor', 'merge_partials', 'extract_invoice']
