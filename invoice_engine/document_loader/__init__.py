"""
Document Loader Module for the extraction engine.

This module provides the collaborator that turns a binary invoice into
positioned text:
    - Reading PDF payloads from bytes, paths or file objects
    - Extracting the text layer line by line with pdfplumber
    - Converting coordinates to PDF user space (y grows upward)

Author: ML Engineering Team
"""

from .fragment import TextFragment, LoadedDocument, build_full_text
from .pdf_loader import PDFLoader

__all__ = ['TextFragment', 'LoadedDocument', 'build_full_text', 'PDFLoader']
