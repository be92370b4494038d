"""
Positioned Text Data Classes.

This module defines the data structures handed from the document loader
to the extraction engine.

Classes:
    TextFragment: One text run with its page position
    LoadedDocument: All pages of one document, flattened on demand

Coordinate convention:
    ``y`` grows upward, as in PDF user space (origin bottom-left). A
    fragment printed lower on the page therefore has a smaller ``y``, and
    "top to bottom" means descending ``y``.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any
import json


@dataclass(frozen=True)
class TextFragment:
    """
    Represents a single text run emitted by a PDF text layer.

    Attributes:
        text: The text content (may be blank)
        x: Left coordinate
        y: Baseline coordinate, growing upward
        height: Height of the run
        width: Width of the run
        page: 0-based index of the page the run belongs to

    Example:
        >>> frag = TextFragment("Vendu à :", x=40.0, y=700.0, height=10.0, width=52.0)
        >>> frag.is_blank()
        False
    """
    text: str
    x: float
    y: float
    height: float = 0.0
    width: float = 0.0
    page: int = 0

    def is_blank(self) -> bool:
        """Whether the run holds only whitespace."""
        return not self.text.strip()

    def is_below(self, other: 'TextFragment') -> bool:
        """Whether this run sits lower on the same page than ``other``."""
        return self.page == other.page and self.y < other.y

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'text': self.text,
            'x': self.x,
            'y': self.y,
            'height': self.height,
            'width': self.width,
            'page': self.page,
        }

    def __repr__(self) -> str:
        return f"TextFragment('{self.text}', y={self.y:.1f}, page={self.page})"


@dataclass
class LoadedDocument:
    """
    Complete text layer of one document.

    Pages keep the emission order of the text layer; ``fragments`` and
    ``full_text`` are derived views used by the extractors.

    Attributes:
        pages: One list of fragments per page
        metadata: Loader information (source, page counts, ...)

    Example:
        >>> doc = loader.load(pdf_bytes)
        >>> print(f"{doc.page_count} pages, {len(doc.fragments)} runs")
        >>> print(doc.full_text[:80])
    """
    pages: List[List[TextFragment]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def fragments(self) -> List[TextFragment]:
        """All fragments of all pages, in emission order."""
        return [frag for page in self.pages for frag in page]

    @property
    def full_text(self) -> str:
        """All fragment texts joined with single spaces."""
        return build_full_text(self.fragments)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def is_empty(self) -> bool:
        """Check whether the document has no text at all."""
        return all(frag.is_blank() for frag in self.fragments)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            'page_count': self.page_count,
            'full_text': self.full_text,
            'pages': [[frag.to_dict() for frag in page] for page in self.pages],
            'metadata': self.metadata,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"LoadedDocument(pages={self.page_count}, fragments={len(self.fragments)})"


def build_full_text(fragments: List[TextFragment]) -> str:
    """Join fragment texts with single spaces, in emission order."""
    return ' '.join(frag.text for frag in fragments)
