"""
Data Normalizers Module.

This module provides normalization functions for:
    - French-locale currency amounts ("1 234,56" -> 1234.56)
    - Day-first dates, numeric or with French/English month names

Author: ML Engineering Team
"""

import re
from datetime import date, datetime
from typing import Optional, Dict

from dateutil import parser as date_parser

from invoice_engine.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


# Month name to month number. Full, abbreviated and unaccented forms, since
# text layers often drop accents or keep the trailing abbreviation dot.
MONTHS: Dict[str, int] = {
    # French
    'janvier': 1, 'janv': 1, 'jan': 1,
    'février': 2, 'fevrier': 2, 'févr': 2, 'fevr': 2, 'fév': 2, 'fev': 2,
    'mars': 3,
    'avril': 4, 'avr': 4,
    'mai': 5,
    'juin': 6,
    'juillet': 7, 'juil': 7,
    'août': 8, 'aout': 8,
    'septembre': 9, 'sept': 9,
    'octobre': 10, 'oct': 10,
    'novembre': 11, 'nov': 11,
    'décembre': 12, 'decembre': 12, 'déc': 12, 'dec': 12,
    # English
    'january': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9,
    'october': 10,
    'november': 11,
    'december': 12,
}

# Regex alternation over MONTHS, longest names first so "juillet" wins over "juil".
MONTH_ALTERNATION = '|'.join(
    re.escape(name) for name in sorted(MONTHS, key=len, reverse=True)
)


class FrenchParserInfo(date_parser.parserinfo):
    """dateutil parserinfo that understands French month names, day first."""

    MONTHS = [
        ('janv', 'janvier', 'Jan', 'January'),
        ('févr', 'février', 'fevr', 'fevrier', 'Feb', 'February'),
        ('mars', 'Mar', 'March'),
        ('avr', 'avril', 'Apr', 'April'),
        ('mai', 'May'),
        ('juin', 'Jun', 'June'),
        ('juil', 'juillet', 'Jul', 'July'),
        ('août', 'aout', 'Aug', 'August'),
        ('sept', 'septembre', 'Sep', 'September'),
        ('oct', 'octobre', 'Oct', 'October'),
        ('nov', 'novembre', 'Nov', 'November'),
        ('déc', 'décembre', 'dec', 'decembre', 'December'),
    ]

    def __init__(self) -> None:
        super().__init__(dayfirst=True, yearfirst=False)


class DateNormalizer:
    """
    Turns day-first date fragments into ``datetime.date`` values.

    Impossible dates (31/02/2024, month 13) yield ``None`` instead of
    raising, so callers can move on to the next candidate.

    Attributes:
        input_formats: strptime formats tried before dateutil

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.from_parts("15", "juin", "2024")
        datetime.date(2024, 6, 15)
        >>> normalizer.parse_numeric("05/03/2024")
        datetime.date(2024, 3, 5)
        >>> normalizer.parse_numeric("31/02/2024") is None
        True
    """

    INPUT_FORMATS = (
        "%d/%m/%Y",
        "%d.%m.%Y",
        "%d-%m-%Y",
    )

    def __init__(self) -> None:
        self.input_formats = self.INPUT_FORMATS
        self._parserinfo = FrenchParserInfo()

    def from_parts(self, day: str, month_name: str, year: str) -> Optional[date]:
        """
        Build a date from a day number, a month name and a year.

        Args:
            day: Day of month as text.
            month_name: Month name in any form listed in MONTHS.
            year: Four-digit year as text.

        Returns:
            The date, or None for an unknown month or impossible day.
        """
        month = MONTHS.get(month_name.lower().rstrip('.'))
        if month is None:
            logger.debug(f"Unknown month name: {month_name}")
            return None

        try:
            return date(int(year), month, int(day))
        except ValueError:
            logger.debug(f"Impossible date: {day} {month_name} {year}")
            return None

    def parse_numeric(self, date_str: str) -> Optional[date]:
        """
        Parse a numeric D/M/YYYY date (``/``, ``.`` or ``-`` separators).

        Args:
            date_str: Date string such as "5/3/2024".

        Returns:
            The date, or None if it is not a valid day-first date.
        """
        if not date_str:
            return None

        date_str = date_str.strip()

        parsed = self._try_explicit_formats(date_str)
        if parsed is None:
            parsed = self._try_dateutil_parser(date_str)

        if parsed is None:
            logger.debug(f"Could not parse date: {date_str}")
            return None
        return parsed.date()

    def _try_explicit_formats(self, date_str: str) -> Optional[datetime]:
        for fmt in self.input_formats:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue
        return None

    def _try_dateutil_parser(self, date_str: str) -> Optional[datetime]:
        """Day-first dateutil parse with French month names."""
        try:
            return date_parser.parse(date_str, parserinfo=self._parserinfo)
        except (ValueError, OverflowError):
            return None


class AmountNormalizer:
    """
    Normalizes French-locale currency strings to ``float``.

    Spaces (including non-breaking and narrow non-breaking spaces) are
    thousands separators; a comma is the decimal separator. When a comma
    is present, dots are thousands separators too. A dot followed by
    exactly three digits and no comma ("1.234") is read as a thousands
    separator as well.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.normalize("1 234,56")
        1234.56
        >>> normalizer.normalize("1.234,56 €")
        1234.56
        >>> normalizer.normalize("99.90")
        99.9
    """

    CURRENCY_SYMBOLS = ['€', '$', '£']
    CURRENCY_CODES = ['EUR', 'USD', 'GBP']

    _THOUSANDS_DOTS = re.compile(r'^\d{1,3}(?:\.\d{3})+$')

    def normalize(self, amount_str: str) -> Optional[float]:
        """
        Normalize an amount string to a float.

        Args:
            amount_str: Input amount string (e.g., "1 234,56 €").

        Returns:
            The numeric value, or None if the string holds no number.
        """
        if not amount_str:
            return None

        cleaned = self._clean_amount_string(amount_str)
        if not cleaned:
            return None

        if ',' in cleaned:
            cleaned = cleaned.replace('.', '').replace(',', '.')
        elif self._THOUSANDS_DOTS.match(cleaned):
            cleaned = cleaned.replace('.', '')

        try:
            return float(cleaned)
        except ValueError:
            logger.debug(f"Could not parse amount: {amount_str}")
            return None

    def _clean_amount_string(self, amount_str: str) -> str:
        """Remove currency markers and every kind of space."""
        for symbol in self.CURRENCY_SYMBOLS:
            amount_str = amount_str.replace(symbol, '')

        for code in self.CURRENCY_CODES:
            amount_str = re.sub(rf'\b{code}\b', '', amount_str, flags=re.IGNORECASE)

        # \s covers NBSP and narrow NBSP in str patterns
        amount_str = re.sub(r'\s+', '', amount_str)

        # Keep only digits, comma, dot, and minus
        return re.sub(r'[^\d,.\-]', '', amount_str)
