"""
Client for the remote counting catalog ("SayimAktarmaApi").

Endpoints:
- GET  {base}/Depo             -> depot list
- GET  {base}?barcode={code}   -> product lookup
- POST {base}/SendToVega       -> submit the grouped count list

Every response is an envelope with a ``success`` flag. Failures are raised as
``CatalogUnavailable`` (transport / undecodable body) or a ``ServerRejected``
subclass (the service answered ``success: false``). Nothing is retried here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from ..core.config import settings
from ..core.errors import (
    CatalogUnavailable,
    EmptyBarcode,
    EmptySubmission,
    ProductNotFound,
    SubmissionRejected,
)
from ..schemas.catalog import Depot, DepotResponse, Product, ProductResponse
from ..schemas.counts import GroupedCountItem, SubmissionAck, items_to_wire

logger = logging.getLogger(__name__)


@dataclass
class CatalogClient:
    base_url: str
    timeout: Optional[float] = 60

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _url(self, path: str) -> str:
        base = self.base_url.rstrip("/")
        path = path.strip("/")
        return f"{base}/{path}" if path else base

    def _request(self, method: str, path: str, *, json: Any = None, params: Dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        logger.debug("%s %s params=%s", method, url, params)
        try:
            resp = requests.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise CatalogUnavailable(f"Sunucuya ulaşılamadı: {e}") from e

        # The service reports logical failures in the body, sometimes with a
        # 4xx status, so the body is decoded before the status is considered.
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("%s %s returned undecodable body (%s)", method, url, resp.status_code)
            raise CatalogUnavailable(
                f"Sunucu yanıtı çözümlenemedi ({resp.status_code})."
            ) from e

    def fetch_depots(self) -> List[Depot]:
        data = self._request("GET", "/Depo")
        try:
            response = DepotResponse.model_validate(data)
        except ValidationError as e:
            raise CatalogUnavailable("Depolar yüklenirken hata oluştu.") from e
        if not response.success:
            raise CatalogUnavailable("Depo bilgileri alınamadı.")
        return list(response.data)

    def fetch_product(self, barcode: str) -> Product:
        barcode = (barcode or "").strip()
        if not barcode:
            raise EmptyBarcode()

        data = self._request("GET", "", params={"barcode": barcode})
        try:
            response = ProductResponse.model_validate(data)
        except ValidationError as e:
            raise CatalogUnavailable("Ürün sorgulanırken hata oluştu.") from e
        if not response.success:
            raise ProductNotFound()
        if response.data is None:
            raise CatalogUnavailable("Ürün sorgulanırken hata oluştu.")
        return response.data

    def submit_batch(self, items: List[GroupedCountItem]) -> SubmissionAck:
        if not items:
            raise EmptySubmission()

        data = self._request("POST", "/SendToVega", json=items_to_wire(items))
        try:
            ack = SubmissionAck.model_validate(data)
        except ValidationError as e:
            raise CatalogUnavailable("Aktarım yanıtı çözümlenemedi.") from e
        if not ack.success:
            raise SubmissionRejected(ack.message)
        return ack


def make_client_from_settings() -> CatalogClient:
    base_url = (settings.catalog_base_url or "").strip()
    if not base_url:
        raise RuntimeError("Missing CATALOG_BASE_URL")
    return CatalogClient(base_url=base_url, timeout=settings.catalog_timeout)
