from __future__ import annotations

from pydantic import BaseModel


class AddressSuggestion(BaseModel):
    id: str
    label: str


class ResolvedAddress(BaseModel):
    id: str
    label: str
    line1: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str
    country_code: str | None = None


class AddressCheck(BaseModel):
    address: ResolvedAddress
    allowed: bool
    error: str | None = None
