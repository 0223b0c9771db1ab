from decimal import Decimal
from typing import Iterable

from .schemas import ConsolidatedGroup, EntryRecord


def consolidate(entries: Iterable[EntryRecord]) -> list[ConsolidatedGroup]:
    """
    Sum entry quantities per product code.

    Groups come out in the order each code first appears; entry dates are
    ignored. Callers that need a sorted output must sort it themselves.
    """
    groups: dict[str, ConsolidatedGroup] = {}
    for entry in entries:
        group = groups.get(entry.product_code)
        if group is None:
            group = groups[entry.product_code] = ConsolidatedGroup(
                product_code=entry.product_code,
                quantity=Decimal("0"),
                product_name=entry.product_name,
            )
        group.quantity += Decimal(str(entry.quantity))
        group.entry_ids.append(entry.id)
    return list(groups.values())
