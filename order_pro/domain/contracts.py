from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Actor:
    id: str
    name: str
    phone: str
    role: str
    address: str = ""


@dataclass(frozen=True)
class InvoiceItem:
    name: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity}


@dataclass(frozen=True)
class Invoice:
    id: str
    owner_id: str
    owner_name: str
    phone: str
    address: str
    items: Tuple[InvoiceItem, ...]
    status: str = "pending"
    lowest_price: float | None = None
    selected_merchant_id: str | None = None
    created_at: str = field(default_factory=utc_now_iso)
    approved_at: str | None = None


@dataclass(frozen=True)
class Bid:
    id: str
    invoice_id: str
    merchant_id: str
    merchant_name: str
    total_price: float
    item_prices: Tuple[Any, ...] = ()
    created_at: str = field(default_factory=utc_now_iso)


@dataclass(frozen=True)
class RegisterInput:
    name: str
    phone: str
    role: str
    address: str | None = None


@dataclass(frozen=True)
class LoginInput:
    phone: str


@dataclass(frozen=True)
class ProfileUpdateInput:
    name: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class InvoiceCreateInput:
    items: List[Any]
    address: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class BidPlaceInput:
    invoice_id: str | None
    total_price: Any
    item_prices: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class InvoiceApproveInput:
    invoice_id: str
    merchant_id: str | None
