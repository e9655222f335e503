from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    price: float
    image: str | None = None
