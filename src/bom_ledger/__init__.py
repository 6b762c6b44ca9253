"""
BOM Ledger (Package Entry Point).

Exposes the resolution engine, its entities and the pluggable part sources
used to build flattened, deduplicated bills of materials.
"""

from .bom import BOM
from .cache import BOMCache
from .constants import UNRESOLVED
from .errors import ApplicationLimitsError, BOMError, PartResolutionError
from .exporters import generate_bom_csv, generate_bom_markdown
from .factory import PartFactory
from .loader import HttpPart, fetch_part_document
from .part import Part
from .timer import RefreshableTimer
from .types import (
    BOMColumn,
    ColumnDescription,
    PartComparable,
    PartDocument,
    UsageDocument,
)
from .usage import BOMRow, PartUsage
from .utils import compare_ids, compare_parts, format_quantity, normalize_part_url

__all__ = [
    # engine
    "BOM",
    "BOMCache",
    "UNRESOLVED",
    # entities
    "Part",
    "PartUsage",
    "BOMRow",
    "RefreshableTimer",
    # types
    "PartComparable",
    "BOMColumn",
    "ColumnDescription",
    "PartDocument",
    "UsageDocument",
    # sources
    "PartFactory",
    "HttpPart",
    "fetch_part_document",
    # errors
    "BOMError",
    "ApplicationLimitsError",
    "PartResolutionError",
    # exporters
    "generate_bom_csv",
    "generate_bom_markdown",
    # utils
    "compare_ids",
    "compare_parts",
    "format_quantity",
    "normalize_part_url",
]
