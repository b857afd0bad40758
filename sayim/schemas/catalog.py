"""
Catalog wire models.

Field names on the remote service are fixed (``Ind``, ``DepoAdi``,
``MalInCinsi`` ...). Python attributes are mapped onto them with aliases;
``populate_by_name`` lets tests and callers build models by attribute name.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Depot(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(alias="Ind")
    name: str = Field(alias="DepoAdi")
    code: str = Field(alias="DepoKodu")

    @field_validator("name", "code", mode="before")
    @classmethod
    def _strip(cls, v) -> str:
        return str(v or "").strip()


class DepotResponse(BaseModel):
    success: bool
    data: List[Depot] = []

    @field_validator("data", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return v or []


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    barcode: str = Field(alias="Barcode")
    id: int = Field(0, alias="Ind")
    description: str = Field("", alias="MalInCinsi")
    stock_code: str = Field(alias="StokKodu")
    unit: str = Field("", alias="AnaBirim")
    depot: str = Field("", alias="Depo")
    code1: str = Field("", alias="Kod1")
    code2: str = Field("", alias="Kod2")
    code3: str = Field("", alias="Kod3")
    price: float = Field(0.0, alias="DalisFiyati")

    @field_validator("description", "unit", "depot", "code1", "code2", "code3", mode="before")
    @classmethod
    def _null_text(cls, v) -> str:
        # the catalog sends null for unused codes
        if v is None:
            return ""
        return str(v)

    @field_validator("price", mode="before")
    @classmethod
    def _null_price(cls, v):
        return 0.0 if v is None else v


class ProductResponse(BaseModel):
    success: bool
    data: Optional[Product] = None
