"""
Line item and document totals.

All functions accept line items either as entity objects or as raw stored
mappings (camelCase or snake_case keys). Unparseable numbers never raise:
a missing or non-numeric quantity counts as 1, a missing or non-numeric
price counts as 0. A missing VAT rate is the default rate, a non-numeric
one counts as 0. Amounts are not rounded here; only
``format_amount`` rounds, for display.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_VAT_RATE = 21.0

_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "unit_price": ("unitPrice", "unit_price", "price"),
    "quantity": ("quantity", "qty"),
    "vat_percentage": ("vatPercentage", "vat_percentage", "vat"),
    "description": ("description",),
}


def to_number(value: Any, default: float) -> float:
    """Coerce *value* to float, returning *default* when it cannot be parsed."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _read(item: Any, name: str) -> Any:
    """Read a line item field from an entity or a stored mapping."""
    if isinstance(item, Mapping):
        for key in _FIELD_KEYS[name]:
            if key in item:
                return item[key]
        return None
    return getattr(item, name, None)


def line_total(item: Any) -> float:
    """Unit price times quantity."""
    price = to_number(_read(item, "unit_price"), 0.0)
    quantity = to_number(_read(item, "quantity"), 1.0)
    return price * quantity


def parse_vat_rate(value: Any) -> float:
    """VAT rate: DEFAULT_VAT_RATE when absent or blank, 0 when unparseable."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_VAT_RATE
    return to_number(value, 0.0)


def line_vat_rate(item: Any) -> float:
    return parse_vat_rate(_read(item, "vat_percentage"))


def line_vat(item: Any) -> float:
    """VAT amount of a single line."""
    return line_total(item) * line_vat_rate(item) / 100


def subtotal(items: Iterable[Any]) -> float:
    """Sum of line totals."""
    return sum((line_total(item) for item in items), 0.0)


def vat_by_rate(items: Iterable[Any]) -> dict[float, float]:
    """VAT amounts summed per rate, in order of first occurrence."""
    totals: dict[float, float] = {}
    for item in items:
        rate = line_vat_rate(item)
        totals[rate] = totals.get(rate, 0.0) + line_vat(item)
    return totals


def grand_total(items: Iterable[Any]) -> float:
    """Subtotal plus all VAT."""
    items = list(items)
    return subtotal(items) + sum(vat_by_rate(items).values())


def calculate_vat(price: Any, vat_percentage: Any) -> float:
    """VAT for a legacy single-price document."""
    return to_number(price, 0.0) * to_number(vat_percentage, 0.0) / 100


def calculate_total(price: Any, vat_percentage: Any) -> float:
    """Total including VAT for a legacy single-price document."""
    return to_number(price, 0.0) + calculate_vat(price, vat_percentage)


@dataclass
class DocumentTotals:
    """Totals derived from a document's line items."""

    subtotal: float = 0.0
    vat_by_rate: dict[float, float] = field(default_factory=dict)

    @property
    def vat_total(self) -> float:
        return sum(self.vat_by_rate.values())

    @property
    def total(self) -> float:
        return self.subtotal + self.vat_total


def compute_totals(items: Iterable[Any]) -> DocumentTotals:
    """Compute subtotal and per-rate VAT in a single pass."""
    items = list(items)
    return DocumentTotals(subtotal=subtotal(items), vat_by_rate=vat_by_rate(items))


def document_line_items(document: Any) -> list[Any]:
    """
    Line items of a quotation or invoice.

    Records that predate line items carry a single description/price/VAT
    triple; those are presented as one line with quantity 1.
    """
    if isinstance(document, Mapping):
        items = document.get("lineItems") or document.get("line_items") or []
        legacy = {
            "description": document.get("description") or "",
            "unitPrice": document.get("price"),
            "quantity": 1,
            "vatPercentage": document.get("vatPercentage", document.get("vat_percentage")),
        }
    else:
        items = list(getattr(document, "line_items", None) or [])
        legacy = {
            "description": getattr(document, "description", "") or "",
            "unitPrice": getattr(document, "price", None),
            "quantity": 1,
            "vatPercentage": getattr(document, "vat_percentage", None),
        }
    if items:
        return list(items)
    return [legacy]


def format_amount(value: float) -> str:
    """Format an amount the Dutch way with two decimals: ``1.234,50``."""
    formatted = f"{value:,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def format_rate(rate: float) -> str:
    """Render a VAT rate without a trailing ``.0``: ``21``, ``5.5``."""
    return f"{rate:g}"
