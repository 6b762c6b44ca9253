"""
Ledger entries: a part plus the quantity in which it is used.

``PartUsage`` is the free-standing pair (used for a part's sub-part list);
``BOMRow`` binds a usage to the BOM that owns it and knows how to expand the
part's sub-parts back into that BOM.
"""

from typing import TYPE_CHECKING, Any

from bom_ledger.types import BOMColumn, PartComparable
from bom_ledger.utils import compare_parts

if TYPE_CHECKING:
    from bom_ledger.bom import BOM
    from bom_ledger.part import Part


class PartUsage:
    """
    A part reference with a (possibly fractional) quantity.

    Equality and hashing use the part identity only. ``compare_to`` breaks ties
    between two usages of the same part by quantity; against a bare part it
    reports identity distance alone.
    """

    def __init__(self, part: "Part", quantity: float = 1.0):
        self.part = part
        self.quantity = quantity

    @property
    def quantity(self) -> float:
        return self._quantity

    @quantity.setter
    def quantity(self, value: float) -> None:
        self._quantity = float(value)

    @property
    def id(self) -> str:
        return self.part.id

    @property
    def title(self) -> str:
        return self.part.title

    @property
    def cost(self) -> float:
        """Unit cost of the wrapped part (not scaled by quantity)."""
        return self.part.cost

    def is_resolved(self) -> bool:
        return self.part.is_resolved()

    def is_fresh(self) -> bool:
        return self.part.is_fresh()

    def refresh(self) -> None:
        self.part.refresh()

    def compare_to(self, other: PartComparable) -> int:
        result = compare_parts(self, other)
        if result == 0 and isinstance(other, PartUsage):
            # Tie-break: same part, compare quantities
            if self.quantity < other.quantity:
                return -1
            if self.quantity > other.quantity:
                return 1
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PartComparable):
            return NotImplemented
        return self.id == other.id

    def __lt__(self, other: "PartUsage") -> bool:
        return self.id < other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, quantity={self.quantity:g})"


class BOMRow(PartUsage):
    """
    One row of a BOM: a usage owned by a ledger.

    Rows are created by ``BOM.add_part`` only. A row expands its part's
    sub-parts into the owning BOM once, the first time the part resolves, and
    keeps the sub-part list it expanded with in ``expansion``.
    """

    def __init__(self, bom: "BOM", part: "Part", quantity: float = 1.0):
        super().__init__(part, quantity)
        self.bom = bom
        # (part, quantity per unit) pairs; None until expanded
        self.expansion: list[tuple["Part", float]] | None = None

    @property
    def expanded(self) -> bool:
        return self.expansion is not None

    def is_resolved(self) -> bool:
        # A part may already be resolved through another BOM sharing the factory
        return self.expanded and self.part.is_resolved()

    def resolve(self) -> bool:
        """
        Resolves the wrapped part and registers its sub-parts with the BOM.

        Returns:
            Whether the row is resolved.

        Raises:
            ApplicationLimitsError: If the sub-parts do not fit in the BOM.
        """
        if self.part.resolve() and not self.expanded:
            self.bom._expand_row(self)
        return self.is_resolved()

    def get_item(self, column: BOMColumn | int) -> Any:
        """
        Returns this row's value for a report column.

        Args:
            column: A BOMColumn, or its positional index.

        Returns:
            The value, typed as described by ``ColumnDescription.item_type``.
        """
        if not isinstance(column, BOMColumn):
            column = BOMColumn(column)

        if column is BOMColumn.ID:
            return self.id
        elif column is BOMColumn.QUANTITY:
            return self.quantity
        elif column is BOMColumn.VENDOR:
            return self.part.vendor
        elif column is BOMColumn.TITLE:
            return self.title
        elif column is BOMColumn.UNIT_COST:
            return self.cost
        elif column is BOMColumn.COST:
            return self.quantity * self.cost
        return self.part.url

    def __getitem__(self, column: BOMColumn | int) -> Any:
        return self.get_item(column)
