from unittest.mock import patch

import pytest

from bom_ledger import BOMCache, Part, PartFactory, PartResolutionError

from conftest import ROOT, CatalogPart


def test_part_identity_is_normalized_url():
    part = Part("  HTTP://Shpws.ME/nekC#specs ")

    assert part.id == "http://shpws.me/nekC"
    assert part.title == part.id
    assert part.part is part
    assert part == Part("http://shpws.me/nekC")


def test_empty_reference_rejected():
    with pytest.raises(ValueError):
        Part("   ")


def test_base_part_requires_a_source():
    with pytest.raises(NotImplementedError):
        Part("http://shpws.me/nekC").resolve()


def test_resolve_loads_document_and_sub_parts(factory):
    part = factory.create_part(ROOT)

    assert part.resolve()
    assert part.title == "Printer"
    assert part.vendor == "Acme"
    assert part.cost == 100.0
    assert [(u.id, u.quantity) for u in part.required_parts] == [
        ("http://catalog.test/frame", 1.0),
        ("http://catalog.test/motor", 4.0),
        ("http://catalog.test/bolt", 10.0),
    ]
    # Sub-parts come from the factory cache and are not fetched yet
    assert part.required_parts[0].part is factory.create_part("http://catalog.test/frame")
    assert not part.required_parts[0].part.is_resolved()


def test_resolve_only_loads_once(factory):
    part = factory.create_part("http://catalog.test/bolt")
    part.resolve()
    part.resolve()

    assert part.loads == 1


def test_freshness_window(factory, clock):
    part = factory.create_part("http://catalog.test/bolt")
    assert not part.is_fresh()

    part.resolve()
    assert part.is_fresh()
    clock.advance(59)
    assert part.is_fresh()
    clock.advance(1)
    assert not part.is_fresh()
    assert part.age == 60

    part.refresh()
    assert part.is_fresh()
    assert part.age == 0


@pytest.mark.parametrize(
    "document",
    [
        {"title": "Bad", "cost": "lots"},
        {"title": "Bad", "parts": [{"quantity": 2}]},
        {"title": "Bad", "parts": [{"url": "/x", "quantity": 0}]},
        {"title": "Bad", "cost": -1},
        ["not", "a", "mapping"],
    ],
)
def test_malformed_documents_leave_part_unresolved(catalog, factory, document):
    catalog["http://catalog.test/bad"] = document
    part = factory.create_part("http://catalog.test/bad")

    assert part.resolve() is False
    assert part.error
    assert part.title == "http://catalog.test/bad"
    assert part.required_parts == []


def test_failed_refresh_keeps_previous_data(catalog, factory, clock):
    part = factory.create_part("http://catalog.test/motor")
    part.resolve()
    catalog["http://catalog.test/motor"] = PartResolutionError("Upstream 503")
    clock.advance(120)

    part.refresh()
    assert part.is_resolved()
    assert not part.is_fresh()
    assert part.title == "Motor"
    assert part.error == "Upstream 503"


def test_sub_parts_without_factory_use_same_class(catalog):
    part = CatalogPart(ROOT, catalog=catalog)
    part.resolve()

    sub = part.required_parts[0].part
    assert type(sub) is CatalogPart
    assert sub.resolve()
    assert sub.title == "Frame"


# Factory


def test_factory_caches_by_normalized_url(factory):
    part = factory.create_part("http://catalog.test/bolt")

    assert factory.create_part("HTTP://catalog.test/bolt#x") is part
    assert "http://catalog.test/bolt" in factory
    assert len(factory) == 1

    factory.clear()
    assert factory.create_part("http://catalog.test/bolt") is not part


def test_factory_routes_hosts_to_registered_classes(catalog):
    class VendorPart(CatalogPart):
        pass

    factory = PartFactory(CatalogPart, catalog=catalog).register("Vendor.TEST", VendorPart)

    assert type(factory.create_part("https://vendor.test/widget")) is VendorPart
    assert type(factory.create_part("http://catalog.test/bolt")) is CatalogPart


# Cache


def test_bom_cache_reuses_and_refreshes(factory, clock):
    cache = BOMCache(factory=factory)
    bom = cache.get_bom(ROOT)

    assert bom.is_resolved()
    assert ROOT in cache
    bolt = bom.lookup("http://catalog.test/bolt").part
    assert bolt.loads == 1

    # Still fresh: same object, nothing re-fetched
    assert cache.get_bom(ROOT + "#top") is bom
    assert bolt.loads == 1

    clock.advance(61)
    assert cache.get_bom(ROOT) is bom
    assert bolt.loads == 2
    assert bom.is_fresh()


def test_bom_cache_refreshes_after_interval(factory):
    cache = BOMCache(factory=factory, refresh_interval=0)
    bom = cache.get_bom(ROOT)

    # Parts are all fresh, but the BOM itself is past its window
    with patch.object(bom, "refresh") as refresh:
        cache.get_bom(ROOT)
    refresh.assert_called_once()

    assert cache.evict(ROOT) is bom
    assert len(cache) == 0
