"""
Whole-BOM staleness management.

``BOMCache`` keeps one BOM per root reference and decides, from the BOM's own
staleness timer and its parts' freshness, whether a cached BOM can be served
as-is or needs another refresh pass first.
"""

import logging
import threading

from bom_ledger import constants as C
from bom_ledger.bom import BOM
from bom_ledger.factory import PartFactory
from bom_ledger.utils import normalize_part_url

logger = logging.getLogger(__name__)


class BOMCache:
    """
    Caches BOMs by root reference and keeps them fresh on access.

    Args:
        factory: Part factory shared by every cached BOM.
        maximum_parts: Row limit for newly built BOMs.
        refresh_interval: Seconds after which a cached BOM is re-checked even
                          if all of its parts still report fresh.
    """

    def __init__(
        self,
        factory: PartFactory | None = None,
        maximum_parts: int = C.DEFAULT_MAXIMUM_PARTS,
        refresh_interval: float = C.BOM_REFRESH_INTERVAL_S,
    ):
        self.factory = factory if factory is not None else PartFactory()
        self.maximum_parts = maximum_parts
        self.refresh_interval = refresh_interval
        self._boms: dict[str, BOM] = {}
        self._lock = threading.Lock()

    def get_bom(self, url: str) -> BOM:
        """
        Returns the BOM for `url`, resolving or refreshing it as needed.

        Args:
            url: Root part reference.

        Returns:
            The cached (or newly built) BOM. It may still be partially resolved
            if some parts could not be fetched.

        Raises:
            ApplicationLimitsError: If resolution exceeds the row limit.
        """
        key = normalize_part_url(url)
        with self._lock:
            bom = self._boms.get(key)
            if bom is None:
                bom = BOM(key, factory=self.factory, maximum_parts=self.maximum_parts)
                self._boms[key] = bom

        if not bom.is_resolved():
            bom.resolve()
            bom.sample()
        elif bom.age >= self.refresh_interval or not bom.is_fresh():
            logger.info(f"Refreshing stale BOM {key} (age {bom.age:.0f}s)")
            bom.refresh()
            bom.sample()
        return bom

    def evict(self, url: str) -> BOM | None:
        """Drops the cached BOM for `url`, returning it if present."""
        with self._lock:
            return self._boms.pop(normalize_part_url(url), None)

    def __contains__(self, url: str) -> bool:
        return normalize_part_url(url) in self._boms

    def __len__(self) -> int:
        return len(self._boms)
