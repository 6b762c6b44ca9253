import logging
from unittest.mock import patch

import pytest

from bom_ledger import UNRESOLVED, ApplicationLimitsError, BOM, PartResolutionError

from conftest import ROOT, CatalogPart


def test_upstream_failure_is_absorbed(factory, caplog):
    """
    Verifies that a failing part source does not crash the sweep: the failure
    is logged and recorded on the part, and the BOM simply stays unresolved.
    """
    # We simulate an outage where every fetch raises
    with patch.object(CatalogPart, "_load", side_effect=PartResolutionError("Simulated outage")):
        with caplog.at_level(logging.WARNING, logger="bom_ledger.part"):
            bom = BOM(ROOT, factory=factory)
            resolved = bom.resolve()

    # ASSERTION 1: The sweep finished and reports the truth
    assert resolved is False
    assert not bom.is_resolved()
    assert bom.title == UNRESOLVED

    # ASSERTION 2: The failure was recorded and logged
    assert bom.root.part.error == "Simulated outage"
    assert "Simulated outage" in caplog.text

    # ASSERTION 3: The BOM is still queryable
    assert bom.row_count == 1
    assert bom.total_cost() == 0
    assert bom.part_count() == 1

    # ASSERTION 4: Calling again once the source recovers converges
    assert bom.resolve() is True
    assert bom.title == "Printer"


def test_limit_errors_surface_to_caller(factory):
    bom = BOM(ROOT, factory=factory, maximum_parts=1)

    with pytest.raises(ApplicationLimitsError):
        bom.resolve()
    assert bom.row_count == 1


def test_programming_errors_propagate(factory):
    """Only PartResolutionError is absorbed; bugs in a source still raise."""
    with patch.object(CatalogPart, "_load", side_effect=KeyError("bug")):
        bom = BOM(ROOT, factory=factory)
        with pytest.raises(KeyError):
            bom.resolve()


def test_add_part_logs_new_rows(factory, caplog):
    with caplog.at_level(logging.INFO, logger="bom_ledger.bom"):
        BOM(ROOT, factory=factory)

    assert f"addPart({ROOT})" in caplog.text
