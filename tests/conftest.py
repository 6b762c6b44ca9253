import pytest

from bom_ledger import Part, PartFactory, PartResolutionError

ROOT = "http://catalog.test/assembly/printer"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CatalogPart(Part):
    """Part served from an in-memory catalog instead of the network.

    Catalog values are part documents, or exceptions to raise from _load.
    """

    def __init__(self, url, factory=None, catalog=None, **kwargs):
        super().__init__(url, factory=factory, **kwargs)
        self.catalog = catalog if catalog is not None else {}
        self.loads = 0

    def _load(self):
        self.loads += 1
        entry = self.catalog.get(self.url)
        if entry is None:
            raise PartResolutionError(f"No catalog entry for {self.url}", url=self.url)
        if isinstance(entry, Exception):
            raise entry
        return entry

    def _options(self):
        options = super()._options()
        options["catalog"] = self.catalog
        return options


def printer_catalog():
    """A small two-level assembly.

    printer -> frame x1, motor x4, bolt x10
    frame   -> bolt x8, rail x2
    """
    return {
        ROOT: {
            "title": "Printer",
            "cost": 100.0,
            "vendor": "Acme",
            "parts": [
                {"url": "/frame", "quantity": 1},
                {"url": "/motor", "quantity": 4},
                {"url": "/bolt", "quantity": 10},
            ],
        },
        "http://catalog.test/frame": {
            "title": "Frame",
            "cost": 20.0,
            "parts": [
                {"url": "/bolt", "quantity": 8},
                {"url": "/rail", "quantity": 2},
            ],
        },
        "http://catalog.test/motor": {"title": "Motor", "cost": 15.0},
        "http://catalog.test/bolt": {"title": "Bolt", "cost": 0.1},
        "http://catalog.test/rail": {"title": "Rail", "cost": 5.0},
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return printer_catalog()


@pytest.fixture
def factory(catalog, clock):
    """Factory producing catalog-backed parts with a 60s freshness window."""
    return PartFactory(CatalogPart, catalog=catalog, clock=clock, refresh_interval=60)
