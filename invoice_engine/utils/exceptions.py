"""
Custom Exceptions Module.

This module defines the exceptions raised inside the extraction engine.
None of them escape InvoiceExtractor.extract(): the orchestrator converts
them into the fallback record. They exist so that the document loader and
callers using it directly get precise, informative errors.

Exception Hierarchy:
    InvoiceEngineError (base)
    ├── DocumentLoadError
    │   ├── UnsupportedDocumentError
    │   ├── DocumentTooLargeError
    │   └── CorruptedDocumentError
    └── ExtractionError
"""


class InvoiceEngineError(Exception):
    """
    Base exception for all extraction engine errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# DOCUMENT LOADING ERRORS
# =============================================================================

class DocumentLoadError(InvoiceEngineError):
    """Base exception for document loader failures."""
    pass


class UnsupportedDocumentError(DocumentLoadError):
    """
    Raised when the payload is not something the loader can read.

    Example:
        >>> raise UnsupportedDocumentError("int")
    """

    def __init__(self, kind: str, reason: str = None):
        message = f"Unsupported document: {kind}"
        details = {"kind": kind, "reason": reason}
        super().__init__(message, details)


class DocumentTooLargeError(DocumentLoadError):
    """Raised when a payload exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        message = f"Document too large: {size} bytes"
        details = {"size": size, "limit": limit}
        super().__init__(message, details)


class CorruptedDocumentError(DocumentLoadError):
    """Raised when the PDF cannot be parsed."""

    def __init__(self, source: str, reason: str = None):
        message = f"Corrupted or unreadable document: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(InvoiceEngineError):
    """Raised when a field extractor fails unexpectedly."""

    def __init__(self, family: str, reason: str = None):
        message = f"Field extraction failed: {family}"
        details = {"family": family, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'InvoiceEngineError',
    'DocumentLoadError',
    'UnsupportedDocumentError',
    'DocumentTooLargeError',
    'CorruptedDocumentError',
    'ExtractionError',
]
