"""
Client Extractor Module.

Generic, brand-agnostic extraction of the customer block:
    - Name, address, phone and email from the "sold to" section
    - Whole-document second chance when no section name was found
    - Order number from the whole document

Author: ML Engineering Team
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from invoice_engine.config import get_config
from invoice_engine.document_loader.fragment import TextFragment
from invoice_engine.utils.logger import get_logger
from . import patterns
from .patterns import first_match
from .sections import CLIENT_SECTION, collect_section

logger = get_logger(__name__)


def extract_client(fragments: Sequence[TextFragment], full_text: str) -> Dict[str, Any]:
    """
    Extract customer identity and the order number.

    Args:
        fragments: All document fragments in emission order.
        full_text: Space-joined fragment texts.

    Returns:
        Partial record with any of ``last_name``, ``first_name``,
        ``address``, ``phone``, ``email`` and ``order_number``.
    """
    result: Dict[str, Any] = {}
    excluded_domains = _excluded_email_domains()

    section = collect_section(fragments, CLIENT_SECTION)
    if section:
        lines = [fragment.text for fragment in section]

        name = find_name(lines)
        if name:
            result['first_name'], result['last_name'] = name

        address = collect_address(lines, result.get('first_name'))
        if address:
            result['address'] = address

        phone = find_labelled_phone(lines)
        if phone:
            result['phone'] = phone

        email = find_email(lines, excluded_domains)
        if email:
            result['email'] = email

    if not result.get('last_name') or not result.get('first_name'):
        logger.debug("No name in client section, scanning the whole document")
        for key, value in whole_text_client(full_text, excluded_domains).items():
            if not result.get(key):
                result[key] = value

    order_number = first_match(patterns.ORDER_NUMBER_PATTERNS, full_text)
    if order_number:
        result['order_number'] = order_number

    return result


def find_name(lines: Sequence[str]) -> Optional[Tuple[str, str]]:
    """
    Find (given name, surname) among section lines.

    The first line matching "Given SURNAME" or "SURNAME Given" wins; if
    none does, the first line with at least two words is split into the
    first word and the rest.
    """
    for line in lines:
        match = patterns.NAME_GIVEN_FIRST.search(line)
        if match:
            return match.group(1), match.group(2).strip()

        match = patterns.NAME_SURNAME_FIRST.search(line)
        if match:
            return match.group(2), match.group(1).strip()

    for line in lines:
        words = line.split()
        if len(words) >= 2:
            return words[0], ' '.join(words[1:])

    return None


def collect_address(lines: Sequence[str], first_name: Optional[str] = None, stop_at_gap: bool = True) -> Optional[str]:
    """
    Accumulate address-like lines and join them with ", ".

    Lines holding an email, a phone label or the given name are skipped.
    With ``stop_at_gap`` the scan ends at the first non-address line once
    an address line has been seen.
    """
    address_lines: List[str] = []

    for line in lines:
        if '@' in line or patterns.PHONE_LABEL.search(line):
            continue
        if first_name and first_name in line:
            continue

        if patterns.ADDRESS_LINE.search(line):
            address_lines.append(line.strip())
        elif address_lines and stop_at_gap:
            break

    return ', '.join(address_lines) if address_lines else None


def find_labelled_phone(lines: Sequence[str]) -> Optional[str]:
    """First labelled phone number, with separators removed."""
    for line in lines:
        match = patterns.LABELLED_PHONE.search(line)
        if match:
            return clean_phone(match.group(1))
    return None


def find_email(lines: Sequence[str], excluded_domains: Sequence[str] = ()) -> Optional[str]:
    """First email address not on an excluded (retailer) domain."""
    for line in lines:
        for email in patterns.EMAIL.findall(line):
            if not _is_excluded(email, excluded_domains):
                return email
    return None


def whole_text_client(full_text: str, excluded_domains: Sequence[str] = ()) -> Dict[str, Any]:
    """
    Second-chance customer search over the whole document text.

    Used for layouts without a recognizable "sold to" header.
    """
    result: Dict[str, Any] = {}

    name = (
        _first_plausible_name(patterns.NAME_WITH_TITLE, full_text, given_group=1, surname_group=2)
        or _first_plausible_name(patterns.NAME_GIVEN_FIRST, full_text, given_group=1, surname_group=2)
        or _first_plausible_name(patterns.NAME_SURNAME_FIRST, full_text, given_group=2, surname_group=1)
    )
    if name:
        result['first_name'], result['last_name'] = name

    for pattern, template in patterns.FULL_ADDRESS_PATTERNS:
        match = pattern.search(full_text)
        if match:
            result['address'] = match.expand(template)
            break

    match = patterns.LABELLED_PHONE.search(full_text) or patterns.BARE_PHONE.search(full_text)
    if match:
        result['phone'] = clean_phone(match.group(1))

    email = find_email([full_text], excluded_domains)
    if email:
        result['email'] = email

    return result


def is_invoice_label(surname: str) -> bool:
    """Whether every word of an upper-case "surname" is an invoice token."""
    words = surname.replace('-', ' ').split()
    return bool(words) and all(word.upper() in patterns.NON_NAME_TOKENS for word in words)


def _first_plausible_name(pattern, text: str, given_group: int, surname_group: int) -> Optional[Tuple[str, str]]:
    for match in pattern.finditer(text):
        surname = match.group(surname_group).strip()
        if is_invoice_label(surname):
            logger.debug(f"Ignoring label read as a name: {match.group(0)}")
            continue
        return match.group(given_group), surname
    return None


def clean_phone(raw: str) -> str:
    return patterns.PHONE_SEPARATORS.sub('', raw)


def _excluded_email_domains() -> List[str]:
    return [d.lower() for d in get_config("extraction.client.excluded_email_domains", ["ici-store.com"])]


def _is_excluded(email: str, excluded_domains: Sequence[str]) -> bool:
    domain = email.rsplit('@', 1)[-1].lower()
    return any(domain == d or domain.endswith('.' + d) for d in excluded_domains)
