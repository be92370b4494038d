"""
Pattern Tables Module.

Ordered regex tables used by the field extractors. Every cascade is data:
a tuple of PatternEntry evaluated in order by ``first_match``, first
match wins. Keeping the tables here lets each one be tested on its own.

Author: ML Engineering Team
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern

from invoice_engine.utils.helpers import first_group, collapse_whitespace
from .normalizers import MONTH_ALTERNATION

CI = re.IGNORECASE


@dataclass(frozen=True)
class PatternEntry:
    """
    One step of a pattern cascade.

    Attributes:
        pattern: Compiled regex
        group: Capture group to return. ``None`` returns the first group
            that participated, or the whole match for group-less patterns.
    """
    pattern: Pattern
    group: Optional[int] = None

    def extract(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if match is None:
            return None
        if self.group is not None:
            value = match.group(self.group)
        else:
            value = first_group(match) or match.group(0)
        return collapse_whitespace(value) if value else None


def entry(regex: str, group: Optional[int] = None, flags: int = CI) -> PatternEntry:
    return PatternEntry(re.compile(regex, flags), group)


def first_match(entries: Iterable[PatternEntry], text: str) -> Optional[str]:
    """
    Evaluate a cascade against one text.

    Args:
        entries: Ordered pattern entries.
        text: Text to search.

    Returns:
        Value captured by the first matching entry, or None.
    """
    for candidate in entries:
        value = candidate.extract(text)
        if value:
            return value
    return None


def first_match_in_lines(entries: Iterable[PatternEntry], lines: Iterable[str], full_text: str = "") -> Optional[str]:
    """
    Evaluate a cascade pattern by pattern, each over the lines first.

    Pattern order decides: a later pattern is only tried once an earlier
    one failed on every line and on the full text. Line-level search keeps
    captured values inside one text line; the full-text pass catches
    labels and values emitted as separate runs.
    """
    lines = tuple(lines)
    for candidate in entries:
        for line in lines:
            value = candidate.extract(line)
            if value:
                return value
        if full_text:
            value = candidate.extract(full_text)
            if value:
                return value
    return None


# =============================================================================
# BUILDING BLOCKS
# =============================================================================

# Letters used in French names and places
UPPER = "A-ZÀ-ÖØ-Þ"
LOWER = "a-zß-öø-ÿ"
LETTER = f"{UPPER}{LOWER}"

GIVEN_NAME = rf"[{UPPER}][{LOWER}'-]+(?:-[{UPPER}][{LOWER}'-]+)?"
SURNAME = rf"[{UPPER}][{UPPER}'-]+(?:\s+[{UPPER}][{UPPER}'-]+){{0,3}}"

# Amount with optional thousands groups: 1 234,56 / 1.234,56 / 1234.56 / 450
AMOUNT = (
    r"(?<![\d.,])"
    r"(\d{1,3}(?:[ \u00a0\u202f.]\d{3})+(?:,\d{1,2})?|\d+(?:[.,]\d{1,2})?)"
    r"(?!\d)"
)
# Unlabelled amount: space grouping is left out, since a quantity written
# before a price ("Qté 2 450,00 €") would be glued onto it.
BARE_AMOUNT = (
    r"(?<![\d.,])"
    r"(\d{1,3}(?:\.\d{3})+,\d{1,2}|\d+(?:[.,]\d{1,2})?)"
    r"(?!\d)"
)
EURO = r"\s*(?:€|EUR)"

# Free-text attribute value: bounded, stops at a separator or the next label
VALUE = (
    r"([^,;|\n]{1,80}?)"
    r"(?=\s*(?:[,;|\n]|$|(?:Couleur|Armature|Toile|Moteur|Motorisation|Option|"
    r"Quantit[ée]|Qt[ée]|Prix|Total|R[ée]f[ée]rence|R[ée]f\b|D[ée]signation|Capteur|Dimensions?)))"
)


# =============================================================================
# CLIENT SECTION
# =============================================================================

CLIENT_SECTION_START = re.compile(
    r"^\s*(?:Vendu\s+à|Client|Factur[ée]\s+à|Adresse\s+de\s+facturation|"
    r"Sold\s+to|Bill(?:ed)?\s+to|Customer)\b\s*:?",
    CI,
)
CLIENT_SECTION_END = re.compile(
    r"^\s*(?:Mode\s+de\s+paiement|Exp[ée]di[ée]\s+à|M[ée]thode\s+de\s+livraison|"
    r"Livraison|Paiement|Payment\s+method|Shipped\s+to|Ship\s+to|Shipping\s+method|Delivery)\b",
    CI,
)

# "Jean DUPONT" then "DUPONT Jean"; no IGNORECASE, case carries the meaning
NAME_GIVEN_FIRST = re.compile(rf"(?<![{LETTER}])({GIVEN_NAME})\s+({SURNAME})(?![{LETTER}])")
NAME_SURNAME_FIRST = re.compile(rf"(?<![{LETTER}])({SURNAME})\s+({GIVEN_NAME})(?![{LETTER}])")
NAME_WITH_TITLE = re.compile(
    rf"\b(?:M\.|Mr\.?|Mme\.?|Mlle\.?|Monsieur|Madame|Mademoiselle)\s+({GIVEN_NAME})\s+({SURNAME})(?![{LETTER}])"
)

# Upper-case invoice, currency, company-form and brand tokens that the
# name patterns would otherwise read as a surname ("Total TTC").
NON_NAME_TOKENS = frozenset({
    'TTC', 'HT', 'TVA', 'HTVA', 'EUR', 'EURO', 'EUROS', 'FR', 'TOTAL',
    'SAS', 'SASU', 'SARL', 'SA', 'EURL', 'SIRET', 'SIREN', 'RCS', 'IBAN', 'BIC',
    'RAL', 'RTS', 'CSI', 'LED', 'STORBOX',
    'LEROY', 'MERLIN', 'LM', 'FRANCE', 'CASTORAMA', 'CASTO',
})

ADDRESS_LINE = re.compile(rf"\b\d+\s+[{LETTER}]+|[{LETTER}]+,|\b\d{{5}}\b")

PHONE_LABEL = re.compile(r"\bT\s*:|\bT[ée]l|\bMobile\b|\bPortable\b|\bPhone\b", CI)

LABELLED_PHONE = re.compile(
    r"(?:\bT\s*:|\b(?:T[ée]l[ée]phone|T[ée]l|Mobile|Portable|Phone)\b\.?\s*:?)"
    r"\s*(\+?\d[\d .-]{7,16}\d)",
    CI,
)

EMAIL = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

# Whole-document second-chance patterns
STREET = rf"[{LETTER}'-]+(?:\s+[{LETTER}'-]+){{0,6}}"
CITY = (
    rf"[{UPPER}][{LETTER}'-]+"
    rf"(?:[ -](?!(?:T[ée]l|Mobile|Portable|Phone|Email|E-mail|Courriel)\b)[{UPPER}][{LETTER}'-]+){{0,3}}"
)
STREET_TYPES = r"(?:Rue|Avenue|Av\.|Boulevard|Bd|Chemin|Impasse|All[ée]e|Place|Route|Lotissement|Quai|Cours)"

# (pattern, expansion template) pairs, expanded with Match.expand
FULL_ADDRESS_PATTERNS = (
    (
        re.compile(
            rf"(?<!\d)(\d{{1,4}}\s+{STREET_TYPES}\s+{STREET})[,\s]+({CITY})[,\s]+({CITY})[,\s]+(\d{{5}})\b",
            CI,
        ),
        r"\1, \2, \3, \4, France",
    ),
    (
        re.compile(rf"(?<!\d)(\d{{1,4}}\s+{STREET})[,\s]+(\d{{5}})\s+({CITY})"),
        r"\1, \2 \3, France",
    ),
)

BARE_PHONE = re.compile(r"(?<!\d)(0\d(?:[\s.-]?\d{2}){4})(?!\d)")

PHONE_SEPARATORS = re.compile(r"[\s.-]")

ORDER_NUMBER_PATTERNS = (
    entry(r"\bCommande\s*(?:n°|no\.?)?\s*#?\s*(\d+)"),
    entry(r"\bN°\s*(?:de\s+)?commande\s*:?\s*(\d+)"),
    entry(r"\bR[ée]f[ée]rence\s*:\s*(\d+)"),
    entry(r"\bOrder\s*#\s*(\d+)"),
    entry(r"\bOrder\s+(?:number|no\.?)\s*:?\s*#?(\d+)"),
    entry(r"\bReference\s*:\s*(\d+)"),
)


# =============================================================================
# PRODUCT
# =============================================================================

@dataclass(frozen=True)
class ProductPattern:
    """
    Product identification rule.

    Attributes:
        reference: Regex locating the product reference
        reference_group: Group holding the reference (0 = whole match)
        model: Regex for the model label, or None
        model_group: Group holding the model (0 = whole match)
        brand: Brand label assigned when ``reference`` matches
    """
    reference: Pattern
    reference_group: int
    model: Optional[Pattern]
    model_group: int
    brand: str


PRODUCT_PATTERNS = (
    ProductPattern(
        reference=re.compile(r"STORBOX\s+\d+", CI),
        reference_group=0,
        model=re.compile(r"Store\s+banne\s+Coffre\s+Int[ée]gral\s+sur\s+mesure", CI),
        model_group=0,
        brand="STORBOX",
    ),
    ProductPattern(
        reference=re.compile(r"Rent(?:oi|o)l{1,2}age\s+de\s+store\s+sur\s+mesure", CI),
        reference_group=0,
        model=re.compile(r"Rent(?:oi|o)l{1,2}age\s+de\s+store\s+sur\s+mesure", CI),
        model_group=0,
        brand="Store sur mesure",
    ),
    ProductPattern(
        reference=re.compile(r"Store\s+banne\s+([A-Za-z0-9]+)", CI),
        reference_group=0,
        model=re.compile(r"Store\s+banne\s+[A-Za-z0-9]+\s+" + VALUE, CI),
        model_group=1,
        brand="Store banne",
    ),
    ProductPattern(
        reference=re.compile(r"R[ée]f[ée]rence\s*:\s*([A-Za-z0-9][A-Za-z0-9-]*)", CI),
        reference_group=1,
        model=re.compile(r"D[ée]signation\s*:\s*" + VALUE, CI),
        model_group=1,
        brand="Générique",
    ),
)

FRAME_COLOR_PATTERNS = (
    entry(r"Couleur\s+d['’]\s*armature\s*:\s*" + VALUE),
    entry(r"Couleur\s+armature\s*:\s*" + VALUE),
    entry(r"\bArmature\s*:\s*" + VALUE),
    entry(r"Blanc\s+RAL\s+9016", group=0),
)

FABRIC_COLOR_PATTERNS = (
    entry(r"Couleur\s+de\s+la\s+toile\s*:\s*" + VALUE),
    entry(r"\bToile\s*:\s*" + VALUE),
    entry(r"\bToile\s+(Dickson\s+[^,;|\n]{1,60}?)(?=\s*(?:[,;|\n]|$|Couleur|Armature|Moteur|Motorisation|Option|Prix|Total|Capteur))"),
)

MOTOR_PATTERNS = (
    entry(r"\bMoteur\s*:\s*" + VALUE),
    entry(r"\bMotorisation\s*:\s*" + VALUE),
    entry(r"(Moteur\s+Somfy\b[^,;|\n]{0,80}?)(?=\s*(?:[,;|\n]|$|Couleur|Armature|Toile|Option|Prix|Total|Capteur))"),
)

WIND_SENSOR = re.compile(r"capteur\s+(?:de\s+)?vent|an[ée]mom[èe]tre|anemometer|wind\s+sensor", CI)


# =============================================================================
# PRICE
# =============================================================================

UNIT_PRICE_PATTERNS = (
    entry(r"Prix\s+unitaire\s*(?:HT|TTC)?\s*:\s*" + AMOUNT + EURO),
    entry(BARE_AMOUNT + EURO + r"\s*HT\b"),
    entry(BARE_AMOUNT + EURO),
)

VAT_PATTERNS = (
    entry(r"\bTVA(?:\s+FR)?\s*\(\s*\d+(?:[.,]\d+)?\s*%\s*\)\s*:\s*" + AMOUNT + EURO),
    entry(r"\bTVA\s*:\s*" + AMOUNT + EURO),
    entry(r"Montant\s+(?:de\s+la\s+)?TVA\s*:\s*" + AMOUNT + EURO),
)

SHIPPING_PATTERNS = (
    entry(r"Frais\s+de\s+port\s*:\s*" + AMOUNT + EURO),
    entry(r"\bLivraison\s*:\s*" + AMOUNT + EURO),
    entry(r"\bTransport\s*:\s*" + AMOUNT + EURO),
)

GRAND_TOTAL_PATTERNS = (
    entry(r"Montant\s+global\s*:\s*" + AMOUNT + EURO),
    entry(r"Total\s+TTC\s*:\s*" + AMOUNT + EURO),
    entry(r"\bTotal\s*:\s*" + AMOUNT + EURO),
    entry(r"Net\s+à\s+payer\s*:\s*" + AMOUNT + EURO),
)


# =============================================================================
# DATE
# =============================================================================

_DAY_MONTH_YEAR = rf"(\d{{1,2}})(?:er)?\s*({MONTH_ALTERNATION})\.?\s*(\d{{4}})\b"

NAMED_DATE_PATTERNS = tuple(
    re.compile(label + r"\s*:?\s*" + _DAY_MONTH_YEAR, CI)
    for label in (
        r"Date\s+de\s+commande",
        r"Date\s+de\s+factur(?:e|ation)",
        r"Order\s+date",
        r"Invoice\s+date",
        r"\bDate",
    )
)

NUMERIC_DATE = re.compile(r"(?<!\d)(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})(?!\d)")

DATE_KEYWORDS = ('date', 'commande', 'facture', 'achat', 'livraison', 'order', 'invoice')
