"""
Extracted Invoice Record Data Class.

This module defines the engine's only output type: an entirely optional
bag of fields recovered from one invoice, plus the fixed fallback record
returned when no customer identity could be found.

Author: ML Engineering Team
"""

from dataclasses import dataclass, fields as dataclass_fields
from datetime import date, datetime
from typing import Dict, Any, Optional, List
import json

from invoice_engine.config import get_config
from invoice_engine.utils.helpers import synthetic_reference

# Names of the extracted fields, in display order. Metadata is excluded.
FIELD_NAMES = (
    'last_name',
    'first_name',
    'address',
    'email',
    'phone',
    'order_number',
    'product_reference',
    'product_model',
    'product_brand',
    'frame_color',
    'fabric_color',
    'motor',
    'wind_sensor',
    'unit_price',
    'vat_amount',
    'shipping_cost',
    'grand_total',
    'purchase_date',
)


@dataclass
class ExtractedInvoiceRecord:
    """
    Fields recovered from one purchase invoice.

    Every field is optional; ``None`` means "not found". The record is a
    merge of up to four partial extractions (client, product, price,
    date). Checking that required fields are present is left to the
    consumer.

    Attributes:
        last_name: Customer surname
        first_name: Customer given name
        address: Free-text postal address
        email: Customer email
        phone: Customer phone, digits only
        order_number: Order or reference number of the purchase
        product_reference: Product reference code
        product_model: Product model label
        product_brand: Brand or product-line label
        frame_color: Frame (armature) colour
        fabric_color: Fabric (toile) colour
        motor: Motor description
        wind_sensor: Whether the invoice mentions a wind sensor
        unit_price: Unit price
        vat_amount: VAT amount
        shipping_cost: Shipping cost
        grand_total: Grand total
        purchase_date: Purchase or order date
        template_name: Matched template, "generic", or None for fallback
        is_fallback: True for the placeholder record

    Example:
        >>> record = ExtractedInvoiceRecord(last_name="DUPONT", first_name="Jean")
        >>> record.has_customer_identity()
        True
        >>> "email" in record.missing_fields
        True
    """
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    order_number: Optional[str] = None

    product_reference: Optional[str] = None
    product_model: Optional[str] = None
    product_brand: Optional[str] = None

    frame_color: Optional[str] = None
    fabric_color: Optional[str] = None
    motor: Optional[str] = None
    wind_sensor: Optional[bool] = None

    unit_price: Optional[float] = None
    vat_amount: Optional[float] = None
    shipping_cost: Optional[float] = None
    grand_total: Optional[float] = None
    purchase_date: Optional[date] = None

    # Metadata
    template_name: Optional[str] = None
    is_fallback: bool = False

    @property
    def fields(self) -> Dict[str, Any]:
        """All extracted fields as a dictionary (metadata excluded)."""
        return {name: getattr(self, name) for name in FIELD_NAMES}

    @property
    def extracted_fields(self) -> Dict[str, Any]:
        """Only the fields that hold a value."""
        return {k: v for k, v in self.fields.items() if v is not None}

    @property
    def missing_fields(self) -> List[str]:
        """Names of the fields that were not found."""
        return [k for k, v in self.fields.items() if v is None]

    def has_customer_identity(self) -> bool:
        """Whether a surname or a given name was recovered."""
        return bool(self.last_name) or bool(self.first_name)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Dates are rendered as ISO strings so the result is JSON-ready.
        """
        data = dict(self.fields)
        if isinstance(self.purchase_date, date):
            data['purchase_date'] = self.purchase_date.isoformat()
        data['template_name'] = self.template_name
        data['is_fallback'] = self.is_fallback
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_partial(cls, partial: Dict[str, Any], template_name: Optional[str] = None) -> 'ExtractedInvoiceRecord':
        """
        Build a record from a merged partial-extraction dictionary.

        Unknown keys and ``None`` values are ignored.

        Args:
            partial: Field name to value mapping.
            template_name: Name of the template that produced it.

        Returns:
            ExtractedInvoiceRecord instance.
        """
        known = {f.name for f in dataclass_fields(cls)}
        values = {k: v for k, v in partial.items() if k in known and v is not None}
        values.setdefault('template_name', template_name)
        return cls(**values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExtractedInvoiceRecord':
        """
        Rebuild a record from ``to_dict()`` output.

        Args:
            data: Dictionary with record data.

        Returns:
            ExtractedInvoiceRecord instance.
        """
        values = dict(data)
        raw_date = values.get('purchase_date')
        if isinstance(raw_date, str):
            values['purchase_date'] = date.fromisoformat(raw_date)
        record = cls.from_partial(values)
        record.is_fallback = bool(data.get('is_fallback', False))
        return record

    def __repr__(self) -> str:
        return (
            f"ExtractedInvoiceRecord("
            f"customer={self.first_name} {self.last_name}, "
            f"product={self.product_reference}, "
            f"total={self.grand_total}, "
            f"template={self.template_name}, "
            f"fallback={self.is_fallback})"
        )


def fallback_record(now: datetime) -> ExtractedInvoiceRecord:
    """
    Build the placeholder record returned when extraction found no customer.

    Placeholder strings come from ``extraction.fallback`` in the settings
    so they can be localised. The product reference is derived from
    ``now`` so that repeated imports do not collide.

    Args:
        now: Extraction time, used for the reference and purchase date.

    Returns:
        Fallback ExtractedInvoiceRecord (``is_fallback`` set).
    """
    return ExtractedInvoiceRecord(
        last_name=get_config("extraction.fallback.last_name", "Client"),
        first_name=get_config("extraction.fallback.first_name", "Nouveau"),
        address=get_config("extraction.fallback.address", "Adresse non détectée"),
        email="",
        phone="",
        product_reference=synthetic_reference(
            get_config("extraction.fallback.reference_prefix", "REF-"), now
        ),
        product_model=get_config("extraction.fallback.product_model", "Store banne"),
        product_brand=get_config("extraction.fallback.brand", "Non détectée"),
        frame_color=get_config("extraction.fallback.frame_color", "Non détectée"),
        fabric_color=get_config("extraction.fallback.fabric_color", "Non détectée"),
        motor=get_config("extraction.fallback.motor", "Non détecté"),
        wind_sensor=False,
        purchase_date=now.date(),
        template_name=None,
        is_fallback=True,
    )
