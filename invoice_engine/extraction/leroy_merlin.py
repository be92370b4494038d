"""
Leroy Merlin Extractors.

Brand-specific versions of the four extractors. Each one overlays its
own findings on the generic result, so generic extraction fills the
fields the Leroy Merlin layout rules miss.

Author: ML Engineering Team
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.logger import get_logger
from . import patterns
from .client import collect_address, extract_client, find_email, find_labelled_phone
from .dates import extract_date
from .normalizers import DateNormalizer
from .patterns import CI, AMOUNT, BARE_AMOUNT, EURO, VALUE, entry
from .price import extract_amounts, extract_price
from .product import extract_product, has_wind_sensor
from .sections import SectionSpec, collect_section

logger = get_logger(__name__)

CLIENT_SECTION = SectionSpec(
    name="leroy_merlin.client",
    start=re.compile(r"^\s*(?:Client|Factur[ée]\s+à)\s*:", CI),
    end=re.compile(r"^\s*(?:Livraison|Paiement|Articles|Produits)\b", CI),
)

ARTICLES_SECTION = SectionSpec(
    name="leroy_merlin.articles",
    start=re.compile(r"^\s*(?:Articles|Produits|D[ée]signation)\b", CI),
    end=re.compile(r"^\s*(?:Total|Paiement|Livraison)\b", CI),
)

PRODUCT_REFERENCE = re.compile(r"\bR[ée]f\s*:\s*([A-Za-z0-9]+)", CI)
PRODUCT_MODEL = re.compile(r"Store\s+banne|Brise[\s-]+soleil|Pergola|Parasol|Voile\s+d['’]ombrage", CI)
COLOR = re.compile(r"\bCouleur\s*(?:d['’]\s*armature|armature|de\s+la\s+toile|toile)?\s*:\s*" + VALUE, CI)
MOTOR = re.compile(r"\bMotorisation\s*:\s*" + VALUE, CI)

PRICE_TABLES = (
    ('unit_price', (
        entry(r"Prix\s+unitaire\s*:\s*" + AMOUNT + EURO),
        entry(BARE_AMOUNT + EURO + r"\s*HT\b"),
    )),
    ('vat_amount', (
        entry(r"\bTVA\s*:\s*" + AMOUNT + EURO),
        entry(r"Montant\s+TVA\s*:\s*" + AMOUNT + EURO),
    )),
    ('shipping_cost', (
        entry(r"\bLivraison\s*:\s*" + AMOUNT + EURO),
        entry(r"Frais\s+de\s+livraison\s*:\s*" + AMOUNT + EURO),
    )),
    ('grand_total', (
        entry(r"Total\s+TTC\s*:\s*" + AMOUNT + EURO),
        entry(r"\bTotal\s*:\s*" + AMOUNT + EURO),
    )),
)

ORDER_DATE = re.compile(r"Date\s+de\s+commande\s*:\s*(\d{1,2}/\d{1,2}/\d{4})(?!\d)", CI)

_dates = DateNormalizer()


def _overlay(generic: Dict[str, Any], specific: Dict[str, Any]) -> Dict[str, Any]:
    """Generic values with brand-specific values on top."""
    merged = dict(generic)
    merged.update({k: v for k, v in specific.items() if v is not None})
    return merged


def extract_client_leroy_merlin(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """
    Customer block of a Leroy Merlin invoice.

    Names are written with a civil title ("M. Jean DUPONT"). Every
    address-like line of the section is kept, not only the first run.
    """
    result: Dict[str, Any] = {}

    lines = [fragment.text for fragment in collect_section(fragments, CLIENT_SECTION)]
    for line in lines:
        match = patterns.NAME_WITH_TITLE.search(line)
        if match:
            result['first_name'], result['last_name'] = match.group(1), match.group(2).strip()
            break

    address = collect_address(lines, result.get('first_name'), stop_at_gap=False)
    if address:
        result['address'] = address

    phone = find_labelled_phone(lines)
    if phone:
        result['phone'] = phone

    email = find_email(lines)
    if email:
        result['email'] = email

    return _overlay(extract_client(fragments, full_text), result)


def extract_product_leroy_merlin(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """
    Article block of a Leroy Merlin invoice.

    ``Couleur :`` lines mentioning "toile" hold the fabric colour; any
    other colour line is taken as the frame colour.
    """
    result: Dict[str, Any] = {}

    for fragment in collect_section(fragments, ARTICLES_SECTION):
        text = fragment.text

        match = PRODUCT_REFERENCE.search(text)
        if match:
            result['product_reference'] = match.group(1)

        match = PRODUCT_MODEL.search(text)
        if match:
            result['product_model'] = match.group(0)
            result['product_brand'] = "Leroy Merlin"

        match = COLOR.search(text)
        if match:
            lowered = text.lower()
            if 'toile' in lowered and 'armature' not in lowered:
                result['fabric_color'] = match.group(1).strip()
            else:
                result['frame_color'] = match.group(1).strip()

        match = MOTOR.search(text)
        if match:
            result['motor'] = match.group(1).strip()

    merged = _overlay(extract_product(fragments, full_text), result)
    merged['wind_sensor'] = has_wind_sensor(full_text)
    return merged


def extract_price_leroy_merlin(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """Amounts with Leroy Merlin labels; generic labels fill the gaps."""
    return _overlay(extract_price(fragments, full_text), extract_amounts(PRICE_TABLES, full_text))


def extract_date_leroy_merlin(fragments: Sequence[TextFragment], full_text: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """``Date de commande : DD/MM/YYYY``, else the generic date tiers."""
    match = ORDER_DATE.search(full_text)
    if match:
        found = _dates.parse_numeric(match.group(1))
        if found:
            return {'purchase_date': found}
    return extract_date(fragments, full_text, now=now)
