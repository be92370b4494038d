"""
Section Bounding Module.

A section is the vertical span of fragments between a start header and
the next recognized header below it. Fragments use PDF user space
(y grows upward), so "below the header" means a smaller ``y``.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.logger import get_logger
from . import patterns

logger = get_logger(__name__)


@dataclass(frozen=True)
class SectionSpec:
    """
    Header pair delimiting a section.

    Attributes:
        name: Label used in logs
        start: Regex recognizing the section's own header
        end: Regex recognizing the header that closes the section
    """
    name: str
    start: Pattern
    end: Pattern

    def find_start(self, fragments: Sequence[TextFragment]) -> Optional[int]:
        """Index of the first start-header fragment in reading order."""
        for index, fragment in enumerate(fragments):
            if self.start.search(fragment.text):
                return index
        return None

    def find_end(self, fragments: Sequence[TextFragment], start_index: int) -> Optional[TextFragment]:
        """First end header after the start header, on its page and below it."""
        header = fragments[start_index]
        for fragment in fragments[start_index + 1:]:
            if fragment.is_below(header) and self.end.search(fragment.text):
                return fragment
        return None


CLIENT_SECTION = SectionSpec(
    name="client",
    start=patterns.CLIENT_SECTION_START,
    end=patterns.CLIENT_SECTION_END,
)


def collect_section(fragments: Sequence[TextFragment], spec: SectionSpec) -> List[TextFragment]:
    """
    Collect the fragments of one section, top to bottom.

    Keeps fragments on the start header's page lying strictly between the
    start header and the end header (or the page bottom when no end
    header exists). Blank fragments and repeated start headers are
    dropped. Sorting is stable, so fragments sharing a baseline keep
    their emission order.

    Args:
        fragments: All document fragments in emission order.
        spec: Header pair delimiting the section.

    Returns:
        Section fragments sorted by descending ``y``; empty if the start
        header is absent.
    """
    start_index = spec.find_start(fragments)
    if start_index is None:
        logger.debug(f"No '{spec.name}' section header found")
        return []

    header = fragments[start_index]
    end = spec.find_end(fragments, start_index)
    end_y = end.y if end is not None else None

    logger.debug(
        f"Section '{spec.name}' on page {header.page}: "
        f"y in ({end_y if end_y is not None else '-inf'}, {header.y})"
    )

    section = [
        fragment for fragment in fragments
        if fragment.is_below(header)
        and (end_y is None or fragment.y > end_y)
        and not fragment.is_blank()
        and not spec.start.search(fragment.text)
    ]
    section.sort(key=lambda fragment: -fragment.y)
    return section
