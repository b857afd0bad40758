from typing import List, Optional

from pydantic import BaseModel, field_validator

from .catalog import Depot, Product
from .counts import GroupedCountItem


class DepotSelect(BaseModel):
    depot_code: str = ""

    @field_validator("depot_code", mode="before")
    @classmethod
    def _strip(cls, v) -> str:
        return (v or "").strip()


class BarcodeLookup(BaseModel):
    barcode: str


class ScanFrames(BaseModel):
    codes: List[str]


class CountAdd(BaseModel):
    quantity: Optional[str] = None
    note: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        # JSON clients may send 2.5 instead of "2,5"
        if v is None or isinstance(v, str):
            return v
        return str(v)


class SessionStateOut(BaseModel):
    depots: List[Depot]
    selected_depot_code: str
    barcode_input: str
    count_input: str
    note_input: str
    current_product: Optional[Product] = None
    items: List[GroupedCountItem]
    total_items: int
    error_message: Optional[str] = None
    alert_message: Optional[str] = None
    is_loading_depots: bool
    is_looking_up: bool = False
    is_scanner_presented: bool
    is_submitting: bool
