"""
Shared fixtures: catalog records, a scriptable fake catalog client and
in-memory stores.
"""
from datetime import date

import pytest

from sayim.core.errors import CatalogUnavailable, ProductNotFound
from sayim.schemas.catalog import Depot, Product
from sayim.schemas.counts import GroupedCountItem, SubmissionAck
from sayim.services.local_store import LocalStore, MemoryKeyValueStore
from sayim.services.session import CountSession

TODAY = date(2026, 3, 14)


def make_product(stock_code="A1", barcode="8690000000011", description="Widget", **kw) -> Product:
    return Product(barcode=barcode, stock_code=stock_code, description=description, **kw)


def make_item(stock_code="A1", depot_name="Main", quantity=1.0, **kw) -> GroupedCountItem:
    data = dict(
        stock_code=stock_code,
        stock_name=f"{stock_code} name",
        quantity=quantity,
        depot_name=depot_name,
        note="",
        count_type="",
        year=TODAY.year,
        month=TODAY.month,
    )
    data.update(kw)
    return GroupedCountItem(**data)


class FakeCatalog:
    def __init__(self):
        self.depots = [
            Depot(id=1, name="Main", code="D01"),
            Depot(id=2, name="Annex", code="D02"),
        ]
        self.products = {
            "111": make_product("A1", barcode="111", description="Widget"),
            "222": make_product("B2", barcode="222", description="Gadget"),
        }
        self.depot_error = None
        self.submit_error = None
        self.submit_message = None
        self.lookups = []
        self.depot_calls = 0
        self.batches = []

    def fetch_depots(self):
        self.depot_calls += 1
        if self.depot_error:
            raise self.depot_error
        return list(self.depots)

    def fetch_product(self, barcode):
        self.lookups.append(barcode)
        if barcode not in self.products:
            raise ProductNotFound()
        return self.products[barcode]

    def submit_batch(self, items):
        self.batches.append(list(items))
        if self.submit_error:
            raise self.submit_error
        return SubmissionAck(success=True, message=self.submit_message)


class BrokenKeyValueStore:
    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")


class ReadOnlyKeyValueStore(MemoryKeyValueStore):
    def set(self, key, value):
        raise OSError("read-only filesystem")


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return LocalStore(kv, key="groupedCountItems")


@pytest.fixture
def session(catalog, store):
    return CountSession(catalog, store, count_type="GENEL", today=lambda: TODAY)


@pytest.fixture
def unavailable():
    return CatalogUnavailable("Sunucuya ulaşılamadı: connection refused")
