"""
The BOM resolution and aggregation engine.

This module acts as the "Controller" for the ledger. It handles:
- Ordered, deduplicated storage of rows keyed by part identity.
- Growth of the ledger as parts resolve and reveal their sub-parts.
- Row limits and cyclic-assembly guards.
- Aggregate queries (cost, part count, validity) over a consistent snapshot.

Every operation touching the row set or the title runs under one re-entrant
lock per BOM. ``resolve`` holds it for the whole sweep, including the
``add_part`` calls rows make while expanding.
"""

import bisect
import logging
import threading
import time
from typing import Callable, Iterator

from bom_ledger import constants as C
from bom_ledger.errors import ApplicationLimitsError
from bom_ledger.factory import PartFactory
from bom_ledger.part import Part
from bom_ledger.timer import RefreshableTimer
from bom_ledger.types import BOMColumn, ColumnDescription, PartComparable
from bom_ledger.usage import BOMRow
from bom_ledger.utils import normalize_part_url

logger = logging.getLogger(__name__)


class BOM:
    """
    A flattened bill of materials rooted at one part reference.

    Args:
        url: Reference of the root part. It becomes row #1 with quantity 1.
        factory: Strategy turning references into parts. A private
                 ``PartFactory`` is created when omitted.
        maximum_parts: Row limit; 0 means unlimited.
        clock: Monotonic time source for the BOM staleness timer.
    """

    def __init__(
        self,
        url: str,
        factory: PartFactory | None = None,
        maximum_parts: int = C.DEFAULT_MAXIMUM_PARTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._url = normalize_part_url(url)
        self._title = C.UNRESOLVED
        self._rows: list[BOMRow] = []
        # Parallel to _rows; sorted identities for bisect
        self._keys: list[str] = []
        self._lock = threading.RLock()
        self._timer = RefreshableTimer(clock)
        self.maximum_parts = maximum_parts
        self.factory = factory if factory is not None else PartFactory()

        self._columns = tuple(ColumnDescription.create(c) for c in BOMColumn)
        self._column_map = {d.column: d for d in self._columns}

        self.root = self.add_part(self.factory.create_part(self._url), 1)

    # --- Properties ---

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        with self._lock:
            return self._title

    @title.setter
    def title(self, title: str) -> None:
        with self._lock:
            self._title = title

    @property
    def maximum_parts(self) -> int:
        return self._maximum_parts

    @maximum_parts.setter
    def maximum_parts(self, maximum_parts: int) -> None:
        if maximum_parts < 0:
            raise ValueError(f"maximum_parts must be >= 0, got {maximum_parts}")
        self._maximum_parts = int(maximum_parts)

    @property
    def row_count(self) -> int:
        with self._lock:
            return len(self._rows)

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        return f"BOM({self._url!r}, title={self.title!r}, rows={self.row_count})"

    # --- Column Description ---

    def describe_columns(self) -> tuple[ColumnDescription, ...]:
        """Column metadata for renderers, in BOMColumn order."""
        return self._columns

    def get_column(self, column: BOMColumn) -> ColumnDescription:
        return self._column_map[column]

    # --- Row Access ---

    def rows(self) -> list[BOMRow]:
        """
        Returns a snapshot of the rows in identity order.

        The snapshot is safe to iterate while other threads keep growing the
        ledger.
        """
        with self._lock:
            return list(self._rows)

    def __iter__(self) -> Iterator[BOMRow]:
        return iter(self.rows())

    def _floor_index(self, key: str) -> int:
        """Index of the greatest identity <= key, or -1."""
        return bisect.bisect_right(self._keys, key) - 1

    def lookup(self, part: PartComparable | str) -> BOMRow | None:
        """
        Finds the row for a part identity.

        Args:
            part: A part, usage, row or identity string. Strings are
                  normalized the same way part references are.

        Returns:
            The row whose identity equals the query, or None.
        """
        key = normalize_part_url(part) if isinstance(part, str) else part.id
        with self._lock:
            index = self._floor_index(key)
            if index >= 0 and self._keys[index] == key:
                return self._rows[index]
        return None

    # --- Mutation ---

    def add_part(self, part: PartComparable, quantity: float = 1.0) -> BOMRow:
        """
        Records `quantity` units of a part, merging with an existing row.

        This is the single growth point of the ledger. A part already present
        only has its quantity increased (and, if its sub-parts were already
        expanded, the increase is pushed down to them).

        Args:
            part: The part (or any usage/row wrapping it) to add.
            quantity: Units to add; must be positive.

        Returns:
            The row holding the part.

        Raises:
            ApplicationLimitsError: If a new row would exceed `maximum_parts`,
                or pushing the increase down meets a cyclic or too deeply
                nested assembly. The ledger is left unchanged.
            ValueError: If quantity is not positive.
        """
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        if not isinstance(part, Part):
            part = part.part
        quantity = float(quantity)

        with self._lock:
            changes = {part.id: [part, quantity]}
            row = self.lookup(part.id)
            if row is not None and row.expansion is not None:
                self._plan(row.expansion, quantity, [part.id], changes)
            self._commit(changes)
            return self.lookup(part.id)

    def _plan(
        self,
        expansion: list[tuple[Part, float]],
        multiplier: float,
        path: list[str],
        changes: dict[str, list],
    ) -> dict[str, list]:
        """
        Collects the quantity changes of adding `multiplier` units of an assembly.

        Sub-parts whose rows are already expanded pass the change further down
        their own recorded expansion. Nothing in the ledger is modified here.

        Args:
            expansion: (part, quantity per assembly) pairs to scale.
            multiplier: Units of the assembly being added.
            path: Identities of the assemblies being walked, outermost first.
            changes: Accumulator of identity -> [part, added quantity].

        Returns:
            The accumulator.

        Raises:
            ApplicationLimitsError: If an assembly contains itself, or nesting
                exceeds MAXIMUM_ASSEMBLY_DEPTH.
        """
        if len(path) > C.MAXIMUM_ASSEMBLY_DEPTH:
            raise ApplicationLimitsError(
                f"Maximum assembly depth exceeded: {C.MAXIMUM_ASSEMBLY_DEPTH}"
            )
        for part, quantity in expansion:
            if part.id in path:
                raise ApplicationLimitsError(
                    f"Cyclic assembly: {' -> '.join(path + [part.id])}"
                )
            added = quantity * multiplier
            changes.setdefault(part.id, [part, 0.0])[1] += added

            row = self.lookup(part.id)
            if row is not None and row.expansion is not None:
                self._plan(row.expansion, added, path + [part.id], changes)
        return changes

    def _commit(self, changes: dict[str, list]) -> None:
        """Applies planned changes, or none of them if new rows do not fit."""
        new_ids = [key for key in changes if self.lookup(key) is None]
        if (
            self._maximum_parts > 0
            and new_ids
            and len(self._rows) + len(new_ids) > self._maximum_parts
        ):
            raise ApplicationLimitsError(
                f"Maximum part limit exceeded: {self._maximum_parts}"
            )

        for part, quantity in changes.values():
            index = self._floor_index(part.id)
            if index >= 0 and self._keys[index] == part.id:
                self._rows[index].quantity += quantity
                continue
            self._rows.insert(index + 1, BOMRow(self, part, quantity))
            self._keys.insert(index + 1, part.id)
            logger.info(f"addPart({part.id})")

    def _expand_row(self, row: BOMRow) -> None:
        """
        Registers a resolved row's sub-parts, scaled by the row's quantity.

        The sub-part list is recorded on the row, and later quantity changes
        propagate through that record. A row either expands completely or not
        at all.
        """
        with self._lock:
            expansion = [(u.part, u.quantity) for u in row.part.required_parts]
            changes = self._plan(expansion, row.quantity, [row.id], {})
            self._commit(changes)
            row.expansion = expansion

    # --- Resolution & Freshness ---

    def is_resolved(self) -> bool:
        with self._lock:
            return all(row.is_resolved() for row in self._rows)

    def resolve(self) -> bool:
        """
        Resolves every row, expanding sub-parts until nothing new appears.

        Each pass walks a snapshot of the rows; rows discovered during a pass
        are handled by the next one. After the sweep the BOM title is taken
        from the first row in identity order, if that row resolved.

        Returns:
            Whether every row is now resolved.

        Raises:
            ApplicationLimitsError: If expansion exceeds a configured limit.
        """
        with self._lock:
            if not self.is_resolved():
                logger.debug(f"Resolving {self._url} ({len(self._rows)} rows)")
                passes = 0
                while True:
                    passes += 1
                    snapshot = list(self._rows)
                    for row in snapshot:
                        if not row.is_resolved():
                            row.resolve()
                    if len(self._rows) == len(snapshot):
                        break

                first = self._rows[0]
                if first.is_resolved():
                    self._title = first.title
                logger.debug(
                    f"Resolved {self._url}: {len(self._rows)} rows in {passes} passes"
                )
            return self.is_resolved()

    def refresh(self) -> None:
        """Refreshes every part that has gone stale."""
        with self._lock:
            for row in list(self._rows):
                if not row.is_fresh():
                    row.refresh()

    def is_fresh(self) -> bool:
        with self._lock:
            return all(row.is_fresh() for row in self._rows)

    def is_valid(self) -> bool:
        """True when every part's data is within its freshness window."""
        return self.is_fresh()

    def sample(self) -> None:
        """Stamps the whole-BOM staleness timer."""
        self._timer.sample()

    @property
    def age(self) -> float:
        """Seconds since the last ``sample()`` (or since construction)."""
        return self._timer.age

    # --- Aggregates ---

    def total_cost(self) -> float:
        """Sum of quantity x unit cost over all rows."""
        with self._lock:
            return sum(row.quantity * row.cost for row in self._rows)

    def part_count(self) -> int:
        """
        Total number of parts, accumulated as an integer.

        Fractional quantities are truncated as they are accumulated, so three
        rows of 0.5 count as 0 while a single row of 1.5 counts as 1.
        """
        count = 0
        with self._lock:
            for row in self._rows:
                count = int(count + row.quantity)
        return count
