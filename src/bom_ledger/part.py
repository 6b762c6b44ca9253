"""
The part collaborator contract.

A ``Part`` is an externally sourced entity with a stable identity, a title, a
unit cost, a freshness window and a list of sub-parts it is assembled from.
Concrete sources subclass it and implement ``_load``; the ledger only relies on
the capabilities defined here.
"""

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urljoin

from bom_ledger import constants as C
from bom_ledger.errors import PartResolutionError
from bom_ledger.timer import RefreshableTimer
from bom_ledger.types import PartComparable, PartDocument
from bom_ledger.usage import PartUsage
from bom_ledger.utils import compare_parts, normalize_part_url

if TYPE_CHECKING:
    from bom_ledger.factory import PartFactory

logger = logging.getLogger(__name__)


class Part:
    """
    A single catalog entry, resolved lazily from its reference.

    Args:
        url: Reference of the part; normalized into its identity.
        factory: Factory used to create sub-parts so they are shared across
                 usages. When omitted, sub-parts are built with this class.
        refresh_interval: Seconds a successful refresh stays fresh.
        clock: Monotonic time source for the freshness timer.
    """

    def __init__(
        self,
        url: str,
        factory: "PartFactory | None" = None,
        refresh_interval: float = C.PART_REFRESH_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = normalize_part_url(url)
        self.factory = factory
        self.refresh_interval = refresh_interval
        self.title = self.url
        self.vendor = ""
        self.cost = 0.0
        self.required_parts: list[PartUsage] = []
        self.error: str | None = None
        self._clock = clock
        self._resolved = False
        self._timer = RefreshableTimer(clock)
        # Parts are shared between BOMs through the factory cache
        self._lock = threading.Lock()

    # --- Identity ---

    @property
    def id(self) -> str:
        return self.url

    @property
    def part(self) -> "Part":
        return self

    def compare_to(self, other: PartComparable) -> int:
        return compare_parts(self, other)

    def __eq__(self, other: object) -> bool:
        # Parts, usages and rows of one identity compare equal
        if not isinstance(other, PartComparable):
            return NotImplemented
        return self.id == other.id

    def __lt__(self, other: "Part") -> bool:
        return self.id < other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        state = "resolved" if self._resolved else "unresolved"
        return f"{type(self).__name__}({self.id!r}, {state})"

    # --- Resolution & Freshness ---

    @property
    def age(self) -> float:
        """Seconds since the last successful refresh."""
        return self._timer.age

    def is_resolved(self) -> bool:
        return self._resolved

    def is_fresh(self) -> bool:
        return self._resolved and self._timer.age < self.refresh_interval

    def resolve(self) -> bool:
        """
        Completes the part's data if it has never been loaded.

        Returns:
            Whether the part is now resolved.
        """
        if not self._resolved:
            self.refresh()
        return self._resolved

    def refresh(self) -> None:
        """
        Re-fetches the part and replaces its data in place.

        Fetch or decode failures are recorded in ``error`` and logged; the part
        keeps its previous data and stays unresolved (or stale) so callers can
        simply try again later.
        """
        with self._lock:
            try:
                self._apply(self._load())
            except PartResolutionError as e:
                self.error = str(e)
                logger.warning(f"Could not refresh {self.id}: {e}")
                return

            self.error = None
            self._resolved = True
            self._timer.sample()
            logger.debug(f"Refreshed {self.id} ({len(self.required_parts)} sub-parts)")

    def _load(self) -> PartDocument:
        """
        Fetches and decodes the part document. Implemented by part sources.

        Raises:
            PartResolutionError: If the document cannot be obtained.
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement _load()")

    def _apply(self, document: PartDocument) -> None:
        """Validates a decoded document, then commits it to the part."""
        try:
            title = str(document.get("title") or self.url)
            vendor = str(document.get("vendor") or "")
            cost = float(document.get("cost") or 0.0)
            usages = [
                (urljoin(self.url, str(entry["url"])), float(entry.get("quantity", 1)))
                for entry in document.get("parts") or []
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PartResolutionError(f"Malformed part document: {e}", url=self.url) from e

        if cost < 0 or any(qty <= 0 for _, qty in usages):
            raise PartResolutionError(
                "Part document has a negative cost or non-positive quantity",
                url=self.url,
            )

        self.required_parts = [
            PartUsage(self._create_part(sub_url), qty) for sub_url, qty in usages
        ]
        self.title = title
        self.vendor = vendor
        self.cost = cost

    def _create_part(self, url: str) -> "Part":
        if self.factory is not None:
            return self.factory.create_part(url)
        return type(self)(url, **self._options())

    def _options(self) -> dict[str, Any]:
        """Keyword arguments for building sibling parts without a factory."""
        return {"refresh_interval": self.refresh_interval, "clock": self._clock}
