"""
Count session: the state behind one counting screen.

Holds the depot list and selection, the barcode / quantity inputs, the product
currently on screen and the pending grouped list. Every action updates the
state and notifies subscribers; errors end up in ``error_message`` instead of
propagating to the caller.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional

from ..core.errors import (
    CountError,
    DepotNotSelected,
    PersistenceDegraded,
    SubmissionInProgress,
    UnknownDepot,
)
from ..schemas.catalog import Depot, Product
from ..schemas.counts import GroupedCountItem
from ..schemas.session import SessionStateOut
from .accumulator import add_or_merge, build_candidate, remove_items
from .catalog_client import CatalogClient
from .local_store import LocalStore
from .scanner import BarcodeScanner
from .submission import SubmissionWorkflow

logger = logging.getLogger(__name__)


class CountSession:
    def __init__(
        self,
        client: CatalogClient,
        store: LocalStore,
        *,
        count_type: str = "",
        scanner: Optional[BarcodeScanner] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.count_type = count_type
        self.scanner = scanner or BarcodeScanner()
        self.workflow = SubmissionWorkflow(client, store)
        self._today = today or date.today
        self._subscribers: List[Callable[["CountSession"], None]] = []

        self.depots: List[Depot] = []
        self.selected_depot_code = ""
        self.barcode_input = ""
        self.count_input = ""
        self.note_input = ""
        self.current_product: Optional[Product] = None
        self.error_message: Optional[str] = None
        self.alert_message: Optional[str] = None
        self.is_loading_depots = False
        self.is_looking_up = False

        try:
            self.items: List[GroupedCountItem] = self.store.load()
        except PersistenceDegraded as e:
            self.items = []
            self.error_message = e.message

    # ----------------------------
    # Observers
    # ----------------------------

    def subscribe(self, callback: Callable[["CountSession"], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def _fail(self, e: CountError) -> None:
        self.error_message = e.message
        self._notify()

    def _persist(self, items: List[GroupedCountItem]) -> bool:
        # the in-memory list only changes once the store accepted it
        try:
            self.store.save(items)
        except PersistenceDegraded as e:
            self._fail(e)
            return False
        return True

    # ----------------------------
    # Depots
    # ----------------------------

    @property
    def selected_depot(self) -> Optional[Depot]:
        for d in self.depots:
            if d.code == self.selected_depot_code:
                return d
        return None

    @property
    def selected_depot_name(self) -> str:
        depot = self.selected_depot
        if depot is not None:
            return depot.name
        return self.selected_depot_code

    async def load_depots(self) -> None:
        if self.is_loading_depots:
            return
        self.is_loading_depots = True
        self._notify()
        try:
            depots = await asyncio.to_thread(self.client.fetch_depots)
        except CountError as e:
            self.error_message = e.message
            return
        finally:
            self.is_loading_depots = False
            self._notify()

        self.depots = depots
        if not self.selected_depot_code and depots:
            self.selected_depot_code = depots[0].code
        self.error_message = None
        self._notify()

    def select_depot(self, code: str) -> None:
        code = (code or "").strip()
        if code and not any(d.code == code for d in self.depots):
            self._fail(UnknownDepot())
            return
        self.selected_depot_code = code
        self.error_message = None
        self._notify()

    # ----------------------------
    # Product lookup / scanning
    # ----------------------------

    async def fetch_product(self, barcode: Optional[str] = None) -> Optional[Product]:
        if self.is_looking_up:
            return None
        if barcode is not None:
            self.barcode_input = barcode
        code = self.barcode_input.strip()
        if not code:
            return None
        if not self.selected_depot_code:
            self._fail(DepotNotSelected())
            return None

        self.is_looking_up = True
        try:
            product = await asyncio.to_thread(self.client.fetch_product, code)
        except CountError as e:
            self._fail(e)
            return None
        finally:
            self.is_looking_up = False

        self.current_product = product
        self.count_input = ""
        self.error_message = None
        self.scanner.cancel()
        self._notify()
        return product

    @property
    def is_scanner_presented(self) -> bool:
        return self.scanner.is_active

    def open_scanner(self) -> None:
        def on_code(code: str) -> None:
            self.barcode_input = code

        self.scanner.activate(on_code)
        self._notify()

    def close_scanner(self) -> None:
        self.scanner.cancel()
        self._notify()

    async def report_scan(self, codes: Iterable[str]) -> Optional[Product]:
        code = self.scanner.report(codes)
        if code is None:
            return None
        return await self.fetch_product()

    # ----------------------------
    # Pending list
    # ----------------------------

    def add_current_product(self, quantity_text: Optional[str] = None, note: Optional[str] = None) -> bool:
        if quantity_text is not None:
            self.count_input = quantity_text
        if note is not None:
            self.note_input = note

        try:
            if self.workflow.in_flight:
                raise SubmissionInProgress()
            candidate = build_candidate(
                self.current_product,
                self.selected_depot_name,
                self.count_input,
                note=self.note_input,
                count_type=self.count_type,
                today=self._today(),
            )
        except CountError as e:
            self._fail(e)
            return False

        items = add_or_merge(self.items, candidate)
        if not self._persist(items):
            return False
        self.items = items

        self.current_product = None
        self.barcode_input = ""
        self.count_input = ""
        self.note_input = ""
        self.error_message = None
        self._notify()
        return True

    def remove_items(self, indices: Iterable[int]) -> None:
        if self.workflow.in_flight:
            self._fail(SubmissionInProgress())
            return
        items = remove_items(self.items, indices)
        if not self._persist(items):
            return
        self.items = items
        self._notify()

    # ----------------------------
    # Submission
    # ----------------------------

    async def submit_all(self) -> bool:
        self.alert_message = None
        try:
            outcome = await self.workflow.submit(self.items)
        except CountError as e:
            self._fail(e)
            return False

        if outcome is None:
            return False
        if outcome.committed:
            self.alert_message = outcome.message
            self.error_message = outcome.warning
        else:
            self.error_message = outcome.message
        self._notify()
        return outcome.committed

    def dismiss_alert(self) -> None:
        self.alert_message = None
        self._notify()

    def to_schema(self) -> SessionStateOut:
        return SessionStateOut(
            depots=self.depots,
            selected_depot_code=self.selected_depot_code,
            barcode_input=self.barcode_input,
            count_input=self.count_input,
            note_input=self.note_input,
            current_product=self.current_product,
            items=self.items,
            total_items=len(self.items),
            error_message=self.error_message,
            alert_message=self.alert_message,
            is_loading_depots=self.is_loading_depots,
            is_looking_up=self.is_looking_up,
            is_scanner_presented=self.is_scanner_presented,
            is_submitting=self.workflow.in_flight,
        )
