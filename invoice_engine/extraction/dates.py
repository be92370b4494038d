"""
Date Extractor Module.

Finds the purchase date with a tiered strategy, first success wins:
    (a) labelled date with a month name ("Date de commande : 15 juin 2024")
    (b) numeric date in or near a fragment holding a date keyword
    (c) first numeric date anywhere in the document
    (d) the extraction date itself

Author: ML Engineering Team
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from invoice_engine.config import get_config
from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.logger import get_logger
from . import patterns
from .normalizers import DateNormalizer

logger = get_logger(__name__)

_dates = DateNormalizer()


def extract_date(fragments: Sequence[TextFragment], full_text: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Extract the purchase date. Never leaves it absent.

    Args:
        fragments: All document fragments in emission order.
        full_text: Space-joined fragment texts.
        now: Extraction time used when no date is found. Defaults to
            ``datetime.now()``.

    Returns:
        ``{'purchase_date': date}``
    """
    found = named_month_date(full_text)
    if found:
        logger.debug(f"Date found with month name: {found}")
        return {'purchase_date': found}

    found = keyword_anchored_date(fragments)
    if found:
        return {'purchase_date': found}

    found = first_numeric_date(full_text)
    if found:
        logger.debug(f"Date found (first occurrence): {found}")
        return {'purchase_date': found}

    logger.debug("No date found, using the extraction date")
    return {'purchase_date': (now or datetime.now()).date()}


def named_month_date(full_text: str) -> Optional[date]:
    """Tier (a): labelled "D MONTH YYYY" date."""
    for pattern in patterns.NAMED_DATE_PATTERNS:
        for match in pattern.finditer(full_text):
            found = _dates.from_parts(*match.groups())
            if found:
                return found
    return None


def keyword_anchored_date(fragments: Sequence[TextFragment], window: Optional[float] = None) -> Optional[date]:
    """
    Tier (b): numeric date tied to a date keyword.

    For each keyword in order, each fragment containing it is checked for
    a date of its own, then its same-page neighbours within ``window``
    vertical units are checked.
    """
    if window is None:
        window = get_config("extraction.date.proximity_window", 20)

    for keyword in patterns.DATE_KEYWORDS:
        anchors = [fragment for fragment in fragments if keyword in fragment.text.lower()]

        for anchor in anchors:
            found = first_numeric_date(anchor.text)
            if found:
                logger.debug(f"Date found with keyword '{keyword}': {found}")
                return found

            nearby = (
                fragment for fragment in fragments
                if fragment is not anchor
                and fragment.page == anchor.page
                and abs(fragment.y - anchor.y) < window
            )
            found = _first_in(fragment.text for fragment in nearby)
            if found:
                logger.debug(f"Date found near keyword '{keyword}': {found}")
                return found

    return None


def first_numeric_date(text: str) -> Optional[date]:
    """Tiers (b) and (c): first valid D/M/YYYY date; impossible dates are skipped."""
    for match in patterns.NUMERIC_DATE.finditer(text):
        found = _dates.parse_numeric(match.group(0))
        if found:
            return found
    return None


def _first_in(texts: Iterable[str]) -> Optional[date]:
    for text in texts:
        found = first_numeric_date(text)
        if found:
            return found
    return None
