"""
Static configuration for the BOM Ledger engine.

This module serves as the central repository for:
1.  **Ledger Limits:** Row caps and assembly depth guards applied while a BOM grows.
2.  **Staleness Windows:** How long a resolved part (or a whole BOM) stays fresh
    before it is re-fetched.
3.  **Transport Settings:** Timeouts and headers used by the HTTP part source.
4.  **Column Metadata:** Titles and item types handed to report renderers.

Settings that depend on the deployment are read from the environment once, at
import time.
"""

import os
from typing import Any

# --- Ledger State ---

# Title a BOM reports until its first row resolves.
UNRESOLVED = "(Processing...)"

# Default row limit for a BOM. 0 means unlimited.
DEFAULT_MAXIMUM_PARTS = int(os.getenv("BOM_MAXIMUM_PARTS", 0))

# Guard against cyclic assemblies when quantity is pushed down to sub-parts.
MAXIMUM_ASSEMBLY_DEPTH = 32

# --- Staleness Windows (seconds) ---

PART_REFRESH_INTERVAL_S = float(os.getenv("PART_REFRESH_INTERVAL_S", 60 * 60))
BOM_REFRESH_INTERVAL_S = float(os.getenv("BOM_REFRESH_INTERVAL_S", 60 * 10))

# --- Transport ---

REQUEST_TIMEOUT_S = float(os.getenv("REQUEST_TIMEOUT_S", 10))
USER_AGENT = os.getenv("USER_AGENT", "bom-ledger/0.1 (+https://pypi.org/project/bom-ledger)")

# --- Column Metadata ---

# Keyed by BOMColumn member name.
# Schema: { Column_Name: {"title": Header_Text, "item_type": Python_Type} }
COLUMN_SPECS: dict[str, dict[str, Any]] = {
    "ID": {"title": "Id", "item_type": str},
    "QUANTITY": {"title": "Quantity", "item_type": float},
    "VENDOR": {"title": "Vendor", "item_type": str},
    "TITLE": {"title": "Title", "item_type": str},
    "UNIT_COST": {"title": "Unit Cost", "item_type": float},
    "COST": {"title": "Cost", "item_type": float},
    "URL": {"title": "Url", "item_type": str},
}
