"""
Batch submission of the pending count list.

IDLE -> SUBMITTING -> (COMMITTED | FAILED) -> IDLE

The whole list goes out in one request. The list is cleared (and the empty
list persisted) only after the service acknowledges success; on any failure
it is left exactly as it was.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core.errors import CatalogUnavailable, EmptySubmission, PersistenceDegraded, ServerRejected
from ..schemas.counts import GroupedCountItem
from .catalog_client import CatalogClient
from .local_store import LocalStore

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "{count} kalem sayım listesi aktarıldı."


class SubmissionState(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    COMMITTED = "COMMITTED"
    FAILED = "FAILED"


@dataclass
class SubmissionOutcome:
    state: SubmissionState
    message: str
    submitted_count: int = 0
    warning: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.state == SubmissionState.COMMITTED


class SubmissionWorkflow:
    def __init__(self, client: CatalogClient, store: LocalStore) -> None:
        self.client = client
        self.store = store
        self.state = SubmissionState.IDLE
        self.last_outcome: Optional[SubmissionOutcome] = None

    @property
    def in_flight(self) -> bool:
        return self.state == SubmissionState.SUBMITTING

    async def submit(self, items: List[GroupedCountItem]) -> Optional[SubmissionOutcome]:
        """Send ``items`` and clear it in place on success.

        Returns None when a submission is already in flight. Raises
        ``EmptySubmission`` before any request when there is nothing to send.
        """
        if self.in_flight:
            logger.info("Submission already in flight; ignoring trigger")
            return None
        if not items:
            raise EmptySubmission()

        self.state = SubmissionState.SUBMITTING
        batch = list(items)
        try:
            ack = await asyncio.to_thread(self.client.submit_batch, batch)
        except (CatalogUnavailable, ServerRejected) as e:
            logger.warning("Submission of %d items failed: %s", len(batch), e.message)
            outcome = SubmissionOutcome(SubmissionState.FAILED, e.message)
        else:
            # committed remotely; memory is cleared even if the local write fails
            items.clear()
            warning = None
            try:
                self.store.save(items)
            except PersistenceDegraded as e:
                warning = e.message
            message = ack.message or DEFAULT_SUCCESS_MESSAGE.format(count=len(batch))
            logger.info("Submitted %d count items", len(batch))
            outcome = SubmissionOutcome(SubmissionState.COMMITTED, message, len(batch), warning)
        finally:
            self.state = SubmissionState.IDLE

        self.last_outcome = outcome
        return outcome
