"""
Pluggable creation of parts from references.

A ``PartFactory`` is handed to each BOM instead of living as a process-wide
singleton, which keeps the engine testable with fake part classes. The factory
caches one part per normalized reference so the same catalog entry is fetched
once and shared by every usage and every BOM built from that factory.
"""

import logging
import threading
from typing import Any
from urllib.parse import urlsplit

from bom_ledger.loader import HttpPart
from bom_ledger.part import Part
from bom_ledger.utils import normalize_part_url

logger = logging.getLogger(__name__)


class PartFactory:
    """
    Turns references into (cached) parts.

    Args:
        default_class: Part class for hosts without a registered class.
        **part_options: Extra keyword arguments for every part constructor
                        (e.g. ``session``, ``refresh_interval``, ``clock``).
    """

    def __init__(self, default_class: type[Part] = HttpPart, **part_options: Any):
        self.default_class = default_class
        self.part_options = part_options
        self._classes: dict[str, type[Part]] = {}
        self._parts: dict[str, Part] = {}
        self._lock = threading.Lock()

    def register(self, host: str, part_class: type[Part]) -> "PartFactory":
        """
        Routes references on `host` to `part_class`.

        Args:
            host: Hostname to match (e.g., "shpws.me").
            part_class: The Part subclass that understands that host.

        Returns:
            The factory, for chaining.
        """
        self._classes[host.lower()] = part_class
        return self

    def part_class_for(self, url: str) -> type[Part]:
        host = urlsplit(url).hostname or ""
        return self._classes.get(host, self.default_class)

    def create_part(self, url: str) -> Part:
        """
        Returns the part for a reference, creating it on first request.

        The part is not fetched here; it resolves lazily when a BOM sweep
        asks for it.
        """
        key = normalize_part_url(url)
        with self._lock:
            part = self._parts.get(key)
            if part is None:
                part_class = self.part_class_for(key)
                part = part_class(key, factory=self, **self.part_options)
                self._parts[key] = part
                logger.debug(f"Created {part_class.__name__} for {key}")
            return part

    def __contains__(self, url: str) -> bool:
        return normalize_part_url(url) in self._parts

    def __len__(self) -> int:
        return len(self._parts)

    def clear(self) -> None:
        """Forgets every cached part."""
        with self._lock:
            self._parts.clear()
