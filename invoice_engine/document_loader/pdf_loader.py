"""
PDF Loader Module.

This module turns a PDF payload into pages of positioned text fragments
using pdfplumber's text layer. No rendering and no OCR happen here: a
scanned, image-only PDF simply yields empty pages.

Each fragment is one text line as grouped by pdfplumber. Coordinates are
converted from pdfplumber's top-down space to PDF user space (y grows
upward) so that "below" means a smaller ``y``:

    y = page.height - line["bottom"]

Author: ML Engineering Team
"""

import io
from pathlib import Path
from typing import Union, List, Dict, Any, BinaryIO

import pdfplumber

from invoice_engine.config import get_config
from invoice_engine.utils.logger import get_logger
from invoice_engine.utils.exceptions import (
    CorruptedDocumentError,
    DocumentTooLargeError,
    UnsupportedDocumentError,
)
from .fragment import TextFragment, LoadedDocument

logger = get_logger(__name__)

DocumentSource = Union[bytes, bytearray, str, Path, BinaryIO]

PDF_MAGIC = b"%PDF"


class PDFLoader:
    """
    Document loader for PDF invoices.

    Accepts raw bytes, a filesystem path, or a binary file object and
    produces a LoadedDocument.

    Attributes:
        max_bytes: Largest accepted payload
        max_pages: Pages beyond this limit are ignored

    Example:
        >>> loader = PDFLoader()
        >>> document = loader.load(Path("facture.pdf").read_bytes())
        >>> print(document.full_text[:60])
    """

    def __init__(self, max_bytes: int = None, max_pages: int = None) -> None:
        self.max_bytes = max_bytes or get_config("input.max_bytes", 20 * 1024 * 1024)
        self.max_pages = max_pages or get_config("input.pdf.max_pages", 20)

        logger.debug(f"PDFLoader initialized (max_bytes={self.max_bytes}, max_pages={self.max_pages})")

    def load(self, source: DocumentSource) -> LoadedDocument:
        """
        Load a PDF and extract its positioned text layer.

        Args:
            source: PDF bytes, path to a PDF file, or binary file object.

        Returns:
            LoadedDocument with one fragment list per page.

        Raises:
            UnsupportedDocumentError: If the payload is not a PDF.
            DocumentTooLargeError: If the payload exceeds ``max_bytes``.
            CorruptedDocumentError: If pdfplumber cannot parse the PDF.
        """
        payload, label = self._read_payload(source)

        if len(payload) > self.max_bytes:
            raise DocumentTooLargeError(len(payload), self.max_bytes)

        if not payload.lstrip()[:4] == PDF_MAGIC:
            raise UnsupportedDocumentError(label, "missing %PDF header")

        try:
            with pdfplumber.open(io.BytesIO(payload)) as pdf:
                total_pages = len(pdf.pages)
                pages = [
                    self._page_fragments(page, index)
                    for index, page in enumerate(pdf.pages[:self.max_pages])
                ]
        except Exception as e:
            logger.error(f"pdfplumber failed on {label}: {e}")
            raise CorruptedDocumentError(label, str(e)) from e

        if total_pages > self.max_pages:
            logger.warning(f"PDF has {total_pages} pages, limiting to {self.max_pages}")

        metadata: Dict[str, Any] = {
            'source': label,
            'size_bytes': len(payload),
            'total_pages': total_pages,
        }
        document = LoadedDocument(pages=pages, metadata=metadata)
        logger.info(f"Loaded {label}: {document.page_count} page(s), {len(document.fragments)} fragment(s)")
        return document

    def _read_payload(self, source: DocumentSource):
        """Return the payload bytes and a label usable in logs and errors."""
        if isinstance(source, (bytes, bytearray)):
            return bytes(source), "<bytes>"

        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.is_file():
                raise UnsupportedDocumentError(str(path), "file not found")
            return path.read_bytes(), path.name

        if hasattr(source, "read"):
            data = source.read()
            if not isinstance(data, (bytes, bytearray)):
                raise UnsupportedDocumentError(type(source).__name__, "file object is not binary")
            return bytes(data), getattr(source, "name", "<stream>")

        raise UnsupportedDocumentError(type(source).__name__)

    def _page_fragments(self, page, page_index: int) -> List[TextFragment]:
        """
        Convert pdfplumber text lines of one page into fragments.

        Args:
            page: pdfplumber Page object.
            page_index: 0-based page number.

        Returns:
            Fragments in pdfplumber's emission order.
        """
        height = float(page.height)
        fragments = []

        for line in page.extract_text_lines(return_chars=False):
            fragments.append(TextFragment(
                text=line["text"],
                x=float(line["x0"]),
                y=height - float(line["bottom"]),
                height=float(line["bottom"]) - float(line["top"]),
                width=float(line["x1"]) - float(line["x0"]),
                page=page_index,
            ))

        return fragments
