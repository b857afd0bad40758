import asyncio

from sayim.core.errors import CatalogUnavailable, DepotNotSelected, InvalidQuantity, NoProductSelected
from sayim.services.local_store import LocalStore
from sayim.services.session import CountSession

from tests.conftest import TODAY, BrokenKeyValueStore, make_item


def _ready(session, barcode="111"):
    asyncio.run(session.load_depots())
    asyncio.run(session.fetch_product(barcode))
    return session


def test_load_depots_auto_selects_first(session):
    asyncio.run(session.load_depots())
    assert [d.code for d in session.depots] == ["D01", "D02"]
    assert session.selected_depot_code == "D01"
    assert session.error_message is None
    assert not session.is_loading_depots


def test_load_depots_keeps_existing_selection(session):
    session.selected_depot_code = "D02"
    asyncio.run(session.load_depots())
    assert session.selected_depot_code == "D02"


def test_load_depots_failure_sets_message(session, catalog, unavailable):
    catalog.depot_error = unavailable
    asyncio.run(session.load_depots())
    assert session.depots == []
    assert session.error_message == unavailable.message
    assert not session.is_loading_depots


def test_select_unknown_depot_is_rejected(session):
    asyncio.run(session.load_depots())
    session.select_depot("D99")
    assert session.selected_depot_code == "D01"
    assert session.error_message


def test_fetch_product_requires_depot(session, catalog):
    asyncio.run(session.fetch_product("111"))
    assert session.current_product is None
    assert session.error_message == DepotNotSelected.default_message
    assert catalog.lookups == []


def test_blank_barcode_is_ignored(session, catalog):
    asyncio.run(session.load_depots())
    assert asyncio.run(session.fetch_product("   ")) is None
    assert catalog.lookups == []
    assert session.error_message is None


def test_fetch_product_sets_current_product(session):
    session.count_input = "9"
    _ready(session)
    assert session.current_product.stock_code == "A1"
    assert session.count_input == ""


def test_unknown_product_sets_message(session):
    _ready(session, barcode="999")
    assert session.current_product is None
    assert session.error_message == "Ürün bulunamadı."


def test_add_uses_depot_name_and_resets_inputs(session, store):
    _ready(session)
    assert session.add_current_product("2,5", note="raf 1")

    assert [(it.stock_code, it.depot_name, it.quantity) for it in session.items] == [("A1", "Main", 2.5)]
    assert session.items[0].count_type == "GENEL"
    assert (session.items[0].year, session.items[0].month) == (TODAY.year, TODAY.month)
    assert session.current_product is None
    assert session.barcode_input == ""
    assert session.count_input == ""
    assert store.load() == session.items


def test_repeated_scans_accumulate(session, store):
    asyncio.run(session.load_depots())
    for barcode, qty in [("111", "5"), ("111", "3"), ("222", "2")]:
        asyncio.run(session.fetch_product(barcode))
        assert session.add_current_product(qty)

    rows = [(it.stock_code, it.depot_name, it.quantity) for it in session.items]
    assert rows == [("A1", "Main", 8.0), ("B2", "Main", 2.0)]
    assert store.load() == session.items


def test_add_without_product_is_rejected(session, kv):
    asyncio.run(session.load_depots())
    assert not session.add_current_product("5")
    assert session.error_message == NoProductSelected.default_message
    assert session.items == []
    assert kv.values == {}


def test_add_with_invalid_quantity_keeps_state(session, kv):
    _ready(session)
    for text in ["0", "-2", "abc", ""]:
        assert not session.add_current_product(text)
        assert session.error_message == InvalidQuantity.default_message
    assert session.items == []
    assert session.current_product is not None
    assert kv.values == {}


def test_remove_items_persists(session, store):
    store.save([make_item("A1"), make_item("B2")])
    session = CountSession(session.client, store)
    session.remove_items([0])
    assert [it.stock_code for it in session.items] == ["B2"]
    assert store.load() == session.items


def test_session_restores_pending_list_from_store(catalog, store):
    store.save([make_item("A1", "Main", 4)])
    restored = CountSession(catalog, store)
    assert [it.quantity for it in restored.items] == [4.0]


def test_submit_all_success(session, store):
    _ready(session)
    session.add_current_product("4")

    assert asyncio.run(session.submit_all())
    assert session.items == []
    assert store.load() == []
    assert session.alert_message == "1 kalem sayım listesi aktarıldı."


def test_submit_all_failure_keeps_items(session, catalog, store, unavailable):
    _ready(session)
    session.add_current_product("4")
    catalog.submit_error = unavailable

    assert not asyncio.run(session.submit_all())
    assert len(session.items) == 1
    assert store.load() == session.items
    assert session.error_message == unavailable.message
    assert session.alert_message is None


def test_submit_all_empty_list_is_rejected(session, catalog):
    assert not asyncio.run(session.submit_all())
    assert session.error_message == "Aktarılacak sayım kaydı yok."
    assert catalog.batches == []


def test_scanner_one_shot_lookup(session, catalog):
    asyncio.run(session.load_depots())
    session.open_scanner()
    assert session.is_scanner_presented

    product = asyncio.run(session.report_scan(["", "222", "111"]))

    assert product.stock_code == "B2"
    assert session.barcode_input == "222"
    assert not session.is_scanner_presented
    assert asyncio.run(session.report_scan(["111"])) is None
    assert catalog.lookups == ["222"]


def test_subscribers_are_notified(session):
    seen = []
    unsubscribe = session.subscribe(lambda s: seen.append(s.selected_depot_code))
    asyncio.run(session.load_depots())
    assert seen[-1] == "D01"

    unsubscribe()
    count = len(seen)
    session.select_depot("D02")
    assert len(seen) == count


def test_broken_store_does_not_interrupt_counting(catalog):
    session = CountSession(catalog, LocalStore(BrokenKeyValueStore()))
    _ready(session)
    assert session.add_current_product("1")
    assert len(session.items) == 1


def test_unavailable_catalog_on_lookup(session, catalog, monkeypatch):
    asyncio.run(session.load_depots())

    def boom(barcode):
        raise CatalogUnavailable("Sunucuya ulaşılamadı: timeout")

    monkeypatch.setattr(catalog, "fetch_product", boom)
    asyncio.run(session.fetch_product("111"))
    assert session.error_message == "Sunucuya ulaşılamadı: timeout"


def test_overlapping_lookups_run_one_at_a_time(session, catalog):
    asyncio.run(session.load_depots())

    async def scenario():
        return await asyncio.gather(session.fetch_product("111"), session.fetch_product("222"))

    first, second = asyncio.run(scenario())

    assert first.stock_code == "A1"
    assert second is None
    assert catalog.lookups == ["111"]
    assert session.current_product.stock_code == "A1"
    assert not session.is_looking_up


def test_overlapping_depot_refreshes_fetch_once(session, catalog):
    async def scenario():
        await asyncio.gather(session.load_depots(), session.load_depots())

    asyncio.run(scenario())

    assert catalog.depot_calls == 1
    assert session.selected_depot_code == "D01"
    assert not session.is_loading_depots
