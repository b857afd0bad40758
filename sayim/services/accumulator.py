"""
Count accumulation.

Pending counts are kept as a list of ``GroupedCountItem`` keyed by
(stock code, depot name). Adding a line for a key already in the list sums the
quantities in place; a new key is appended. The functions here never mutate
the list they are given.
"""

import math
import re
from datetime import date
from typing import Iterable, List, Optional

from ..core.errors import InvalidQuantity, NoDepotSelected, NoProductSelected
from ..schemas.catalog import Product
from ..schemas.counts import GroupedCountItem

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def parse_quantity(text: Optional[str]) -> float:
    """Parse a user-typed count, accepting a decimal comma ("2,5" -> 2.5)."""
    v = (text or "").strip().replace(",", ".")
    if not _NUMBER.match(v):
        raise InvalidQuantity()
    quantity = float(v)
    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidQuantity()
    return quantity


def build_candidate(
    product: Optional[Product],
    depot_name: Optional[str],
    quantity_text: Optional[str],
    *,
    note: Optional[str] = None,
    count_type: str = "",
    today: Optional[date] = None,
) -> GroupedCountItem:
    if product is None:
        raise NoProductSelected()
    depot_name = (depot_name or "").strip()
    if not depot_name:
        raise NoDepotSelected()
    quantity = parse_quantity(quantity_text)

    today = today or date.today()
    return GroupedCountItem(
        stock_code=product.stock_code,
        stock_name=product.description,
        quantity=quantity,
        depot_name=depot_name,
        note=(note or "").strip(),
        count_type=count_type,
        year=today.year,
        month=today.month,
    )


def add_or_merge(items: List[GroupedCountItem], candidate: GroupedCountItem) -> List[GroupedCountItem]:
    out = list(items)
    for i, existing in enumerate(out):
        if existing.key == candidate.key:
            # first line keeps its position, stamp and note
            out[i] = existing.model_copy(
                update={"quantity": existing.quantity + candidate.quantity}
            )
            return out
    out.append(candidate)
    return out


def remove_items(items: List[GroupedCountItem], indices: Iterable[int]) -> List[GroupedCountItem]:
    drop = set(indices)
    return [item for i, item in enumerate(items) if i not in drop]
