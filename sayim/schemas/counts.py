import math
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GroupedCountItem(BaseModel):
    """One pending count line, summed per (stock code, depot name).

    This is a snapshot of the product and depot at the time the line was first
    added. Aliases are the SendToVega body keys and are also what the local
    store writes.
    """

    model_config = ConfigDict(populate_by_name=True)

    stock_code: str = Field(alias="stokKodu")
    stock_name: str = Field("", alias="stokAdı")
    quantity: float = Field(alias="miktar")
    depot_name: str = Field(alias="depoAdi")
    note: str = Field("", alias="aciklama")
    count_type: str = Field("", alias="sayimTipi")
    year: int = Field(alias="yil")
    month: int = Field(alias="ay")

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @field_validator("note", "count_type", "stock_name", mode="before")
    @classmethod
    def _null_text(cls, v) -> str:
        return "" if v is None else v

    @field_validator("month")
    @classmethod
    def _month_range(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError("month must be 1..12")
        return v

    @property
    def key(self) -> Tuple[str, str]:
        return (self.stock_code, self.depot_name)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SubmissionAck(BaseModel):
    success: bool
    message: Optional[str] = None

    @field_validator("message")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


def items_to_wire(items: List[GroupedCountItem]) -> List[dict]:
    return [item.to_wire() for item in items]
