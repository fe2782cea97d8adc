"""
Order totals calculation
"""
from collections.abc import Mapping
from typing import Any, Iterable, Optional


def _num(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _field(obj: Any, name: str) -> float:
    return _num(obj.get(name) if isinstance(obj, Mapping) else getattr(obj, name, None))


def line_total(price: Any, qty: Any) -> float:
    return round(_num(price) * _num(qty), 2)


def compute_totals(items: Iterable[Any], extras: Optional[Any] = None) -> dict:
    """
    Compute order totals from line items and extras.

    Items need `price` and `qty`, extras may carry `shipping`, `tax` and
    `discount`; both can be mappings or objects. Missing or non-numeric
    values count as 0.

        grand_total = sub_total + shipping + tax - discount
    """
    sub_total = sum(_field(it, "price") * _field(it, "qty") for it in items)
    extras = extras if extras is not None else {}
    shipping = _field(extras, "shipping")
    tax = _field(extras, "tax")
    discount = _field(extras, "discount")

    return {
        "sub_total": round(sub_total, 2),
        "shipping": round(shipping, 2),
        "tax": round(tax, 2),
        "discount": round(discount, 2),
        "grand_total": round(sub_total + shipping + tax - discount, 2),
    }
