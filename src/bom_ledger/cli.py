"""
Command line entry point.

Resolves a BOM from a root part URL and prints its totals, optionally writing
CSV and markdown reports:

    bom-ledger https://example.com/parts/printer.json --csv output/bom.csv
"""

import argparse
import logging
import os
import sys

from bom_ledger import constants as C
from bom_ledger.bom import BOM
from bom_ledger.errors import ApplicationLimitsError
from bom_ledger.exporters import generate_bom_csv, generate_bom_markdown
from bom_ledger.utils import format_cost

logger = logging.getLogger(__name__)

EXIT_RESOLVED = 0
EXIT_PARTIAL = 1
EXIT_LIMIT = 2
EXIT_INVALID = 3


def _write(path: str, content: bytes) -> bool:
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
    except OSError as e:
        print(f"❌ Error: could not write {path} ({e})")
        return False
    print(f"✅ Wrote {path}")
    return True


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Resolve a part URL into a flattened BOM")
    ap.add_argument("url", help="Root part URL")
    ap.add_argument(
        "--max-parts",
        type=int,
        default=C.DEFAULT_MAXIMUM_PARTS,
        help="Fail when the BOM would exceed this many distinct parts (0 = unlimited)",
    )
    ap.add_argument("--csv", default="", help="Write the BOM as CSV to this path")
    ap.add_argument("--markdown", default="", help="Write a markdown checklist to this path")
    ap.add_argument("--debug", action="store_true", help="Verbose logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        bom = BOM(args.url, maximum_parts=args.max_parts)
    except ValueError as e:
        print(f"❌ Error: {e}")
        return EXIT_INVALID

    try:
        resolved = bom.resolve()
    except ApplicationLimitsError as e:
        logger.error(f"Resolution of {args.url} stopped: {e}")
        print(f"❌ {e}")
        return EXIT_LIMIT

    print(f"📦 {bom.title}")
    print(f"Rows: {bom.row_count} | Parts: {bom.part_count()} | Cost: {format_cost(bom.total_cost())}")

    if not resolved:
        failed = [row for row in bom if not row.is_resolved()]
        print(f"\n⚠️  {len(failed)} part(s) could not be resolved:")
        for row in failed:
            print(f"   ? {row.id} ({row.part.error or 'not resolved'})")
    else:
        print("✅ Fully resolved.")

    if args.csv:
        _write(args.csv, generate_bom_csv(bom))
    if args.markdown:
        _write(args.markdown, generate_bom_markdown(bom).encode("utf-8"))

    return EXIT_RESOLVED if resolved else EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
