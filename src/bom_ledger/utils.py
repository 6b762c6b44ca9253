"""
Utility functions for identity comparison and display formatting.

This module handles the low-level helpers shared by parts, usages and the
ledger, including:
- Identity comparison (the single ordering used by every entity shape).
- Reference normalization (so equivalent URLs map to one identity).
- Quantity and cost formatting for reports.
"""

from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

if TYPE_CHECKING:
    from bom_ledger.types import PartComparable


def compare_ids(left: str, right: str) -> int:
    """
    Compares two identities lexicographically, reporting the distance.

    The result is the code point difference at the first position where the
    strings differ, or the length difference when one is a prefix of the other.
    Its sign agrees with Python's native ``str`` ordering, which lets the ledger
    keep plain strings as sort keys.

    Args:
        left: The first identity (e.g., "http://shpws.me/nekC").
        right: The second identity (e.g., "http://shpws.me/nuwV").

    Returns:
        A negative, zero or positive int (-16 for the example above).
    """
    for lch, rch in zip(left, right):
        if lch != rch:
            return ord(lch) - ord(rch)
    return len(left) - len(right)


def compare_parts(left: "PartComparable", right: "PartComparable") -> int:
    """Compares the identities of two part-like objects."""
    return compare_ids(left.id, right.id)


def normalize_part_url(url: str) -> str:
    """
    Canonicalizes a part reference so equivalent spellings share one identity.

    Scheme and host are lowercased and the fragment is dropped. The path and
    query keep their case since catalogs commonly use case-sensitive short links.

    Args:
        url: The raw reference (e.g., " HTTP://Shpws.me/nekC#specs ").

    Returns:
        The canonical reference (e.g., "http://shpws.me/nekC").

    Raises:
        ValueError: If the reference is empty.
    """
    url = (url or "").strip()
    if not url:
        raise ValueError("Part reference must not be empty")

    parts = urlsplit(url)
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, "")
    )


def format_quantity(quantity: float) -> str:
    """
    Renders a quantity without a trailing '.0' for whole numbers.

    Args:
        quantity: The accumulated quantity (e.g., 2.0 or 0.25).

    Returns:
        A compact string (e.g., "2" or "0.25").
    """
    quantity = round(float(quantity), 6)  # Floating point sanity
    if quantity.is_integer():
        return str(int(quantity))
    return str(quantity)


def format_cost(cost: float) -> str:
    """Renders a cost with two decimals (e.g., 12.5 -> "12.50")."""
    return f"{cost:.2f}"
