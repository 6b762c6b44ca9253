"""
Type definitions and shared data structures for the BOM Ledger.

This module contains the ordering protocol shared by parts, usages and ledger
rows, the column metadata handed to renderers, and the TypedDicts describing
the JSON documents a part source decodes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, TypedDict, runtime_checkable

from bom_ledger import constants as C

if TYPE_CHECKING:
    from bom_ledger.part import Part


@runtime_checkable
class PartComparable(Protocol):
    """
    Anything orderable by a part identity that can report and renew its freshness.

    Implemented by ``Part`` (whose ``part`` is itself), ``PartUsage`` and ``BOMRow``.
    All three compare through ``utils.compare_parts`` so they can be mixed freely
    in lookups.
    """

    @property
    def id(self) -> str: ...

    @property
    def part(self) -> "Part": ...

    def compare_to(self, other: "PartComparable") -> int: ...

    def is_fresh(self) -> bool: ...

    def refresh(self) -> None: ...


class BOMColumn(Enum):
    """Columns exposed to report renderers, in display order."""

    ID = 0
    QUANTITY = 1
    VENDOR = 2
    TITLE = 3
    UNIT_COST = 4
    COST = 5
    URL = 6


@dataclass(frozen=True)
class ColumnDescription:
    """
    Rendering metadata for one BOM column.

    Attributes:
        column: The column being described.
        title: Header text for tabular output.
        item_type: Python type of the values a row yields for this column.
    """

    column: BOMColumn
    title: str
    item_type: type

    @classmethod
    def create(cls, column: BOMColumn) -> "ColumnDescription":
        spec = C.COLUMN_SPECS[column.name]
        return cls(column=column, title=spec["title"], item_type=spec["item_type"])


class UsageDocument(TypedDict):
    """
    One sub-part reference inside a part document.

    Attributes:
        url: Absolute or part-relative reference of the sub-part.
        quantity: Units of the sub-part needed per unit of the parent.
    """

    url: str
    quantity: float


class PartDocument(TypedDict, total=False):
    """
    Decoded payload describing one part.

    Attributes:
        title: Human readable name.
        cost: Unit cost in the catalog currency.
        vendor: Supplier name, if known.
        parts: Sub-parts this part is assembled from.
    """

    title: str
    cost: float
    vendor: str
    parts: list[UsageDocument]
