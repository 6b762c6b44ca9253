import csv
import io

from bom_ledger import BOM, generate_bom_csv, generate_bom_markdown

from conftest import ROOT


def _read_csv(data: bytes) -> list[dict[str, str]]:
    text = data.decode("utf-8-sig")
    return list(csv.DictReader(io.StringIO(text)))


def test_csv_has_header_and_one_line_per_row(factory):
    bom = BOM(ROOT, factory=factory)
    bom.resolve()

    data = generate_bom_csv(bom)
    assert data.startswith(b"\xef\xbb\xbf")  # utf-8-sig signature

    records = _read_csv(data)
    assert list(records[0].keys()) == [c.title for c in bom.describe_columns()]
    assert [r["Id"] for r in records] == [row.id for row in bom]

    bolt = next(r for r in records if r["Title"] == "Bolt")
    assert float(bolt["Quantity"]) == 18
    assert float(bolt["Cost"]) == 18 * 0.1


def test_csv_excel_formulas(factory):
    bom = BOM(ROOT, factory=factory)
    bom.resolve()

    records = _read_csv(generate_bom_csv(bom, use_excel_formulas=True))
    assert records[0]["Url"] == f'=HYPERLINK("{ROOT}", "Open")'


def test_markdown_checklist(factory):
    bom = BOM(ROOT, factory=factory)
    bom.resolve()

    md = generate_bom_markdown(bom)
    assert md.startswith("# Printer\n")
    assert "| 18 | [Bolt](http://catalog.test/bolt) |  | 0.10 | **1.80** |" in md
    assert "| 1 | [Printer](http://catalog.test/assembly/printer) | *Acme* |" in md
    assert "**Total cost:** 191.80" in md
    assert "partial" not in md


def test_markdown_flags_partial_boms(catalog, factory):
    del catalog["http://catalog.test/motor"]
    bom = BOM(ROOT, factory=factory)
    bom.resolve()

    assert "totals are partial" in generate_bom_markdown(bom)
