from pydantic import BaseModel, ConfigDict
from typing import Optional, Union


class StockItemCreate(BaseModel):
    """
    Body of POST /api/stok.

    Every field is optional at the schema level so that a missing field is
    reported by the presence check in the CRUD layer rather than by schema
    validation.
    """

    nama: Optional[str] = None  # Item name, natural dedup key
    harga: Optional[Union[int, float]] = None  # Price, overwritten on upsert
    stok: Optional[int] = None  # Quantity, accumulated on upsert

    model_config = ConfigDict(extra="ignore")


class StockItem(BaseModel):
    """
    Inventory item as stored, plus its document id.
    """

    id: str
    nama: str
    harga: Union[int, float]
    stok: int

    model_config = ConfigDict(extra="allow")
