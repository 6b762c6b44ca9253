"""
Report renderers for a resolved BOM.

Renderers only consume ``BOM.describe_columns()`` and the row iterator; the
ledger itself holds no formatting logic.
"""

import csv
import io

from bom_ledger.bom import BOM
from bom_ledger.types import BOMColumn
from bom_ledger.utils import format_cost, format_quantity


def generate_bom_csv(bom: BOM, use_excel_formulas: bool = False) -> bytes:
    """
    Generates a CSV file listing every BOM row.

    Args:
        bom: The ledger to render.
        use_excel_formulas: If True, formats URLs as Excel `=HYPERLINK()` formulas.
                            If False, writes raw URL strings.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()

    columns = bom.describe_columns()
    fields = [description.title for description in columns]

    writer = csv.DictWriter(csv_buf, fieldnames=fields)
    writer.writeheader()

    for row in bom:
        record = {}
        for description in columns:
            value = row.get_item(description.column)
            if description.column is BOMColumn.URL and use_excel_formulas:
                value = f'=HYPERLINK("{value}", "Open")'
            record[description.title] = value
        writer.writerow(record)

    # encode "utf-8-sig" to ensure Excel opens it correctly with special characters
    return csv_buf.getvalue().encode("utf-8-sig")


def generate_bom_markdown(bom: BOM) -> str:
    """
    Renders the BOM as a markdown checklist with totals.

    Args:
        bom: The ledger to render.

    Returns:
        A markdown document (title, table, totals).
    """
    lines = [f"# {bom.title}", ""]
    lines.append("| Qty | Part | Vendor | Unit | Cost |")
    lines.append("| :---: | --- | --- | ---: | ---: |")

    for row in bom:
        title = row.get_item(BOMColumn.TITLE)
        url = row.get_item(BOMColumn.URL)
        vendor = row.get_item(BOMColumn.VENDOR)
        # Only wrap in italics if text exists
        vendor_str = f"*{vendor}*" if vendor else ""
        lines.append(
            f"| {format_quantity(row.quantity)} | [{title}]({url}) | {vendor_str} "
            f"| {format_cost(row.cost)} | **{format_cost(row.get_item(BOMColumn.COST))}** |"
        )

    lines.append("")
    lines.append(f"**Parts:** {bom.part_count()}  ")
    lines.append(f"**Total cost:** {format_cost(bom.total_cost())}")
    if not bom.is_resolved():
        lines.append("")
        lines.append("_Some parts could not be resolved; totals are partial._")
    return "\n".join(lines) + "\n"
