"""Table capacity allocation"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from resto.booking.errors import NoSuitableTable, NoTablesConfigured


@dataclass(frozen=True)
class TableType:
    """Interchangeable physical tables of one size"""
    capacity: int
    quantity: int


@dataclass(frozen=True)
class Allocation:
    """Table sizes that may serve a party"""
    party_size: int
    optimal_capacity: int
    threshold: int
    total_quantity: int
    matching_entries: List[TableType] = field(default_factory=list)

    @property
    def max_capacity(self) -> int:
        return self.optimal_capacity + self.threshold

    def fits(self, capacity: int) -> bool:
        return self.party_size <= capacity <= self.max_capacity


def parse_inventory(raw: Iterable[Dict[str, Any]]) -> List[TableType]:
    """Build a sorted inventory from stored JSON rows.

    Rows look like {"table_capacity": 4, "quantity": 2}. Rows without tables
    are dropped and rows of the same capacity are merged.
    """
    merged: Dict[int, int] = {}
    for row in raw or []:
        capacity = int(row.get("table_capacity", row.get("capacity", 0)))
        quantity = int(row.get("quantity", 0))
        if capacity <= 0 or quantity <= 0:
            continue
        merged[capacity] = merged.get(capacity, 0) + quantity
    return [TableType(capacity, quantity) for capacity, quantity in sorted(merged.items())]


def allocate(party_size: int, inventory: List[TableType], threshold: int = 1) -> Allocation:
    """Decide which table sizes may seat a party.

    The optimal capacity is the smallest table that fits the party; any
    table up to `threshold` seats larger than that is treated as
    interchangeable with it.
    """
    if party_size < 1:
        raise ValueError("party_size must be at least 1")
    if threshold < 0:
        raise ValueError("threshold must not be negative")

    if not inventory:
        raise NoTablesConfigured()

    ordered = sorted(inventory, key=lambda table: table.capacity)

    optimal = next((table.capacity for table in ordered if table.capacity >= party_size), None)
    if optimal is None:
        raise NoSuitableTable(party_size, ordered[-1].capacity)

    matching = [
        table for table in ordered
        if party_size <= table.capacity <= optimal + threshold
    ]

    return Allocation(
        party_size=party_size,
        optimal_capacity=optimal,
        threshold=threshold,
        total_quantity=sum(table.quantity for table in matching),
        matching_entries=matching,
    )
