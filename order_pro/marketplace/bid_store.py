from __future__ import annotations

import math
from threading import RLock
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from order_pro.domain.contracts import Actor, Bid
from order_pro.errors import ConflictError, ForbiddenError, ValidationError
from order_pro.marketplace import flow_policy
from order_pro.marketplace.invoice_store import InvoiceStore
from order_pro.marketplace.sequence import IdSequence
from order_pro.policies import ROLE_ADMIN, ROLE_GROCERY, ROLE_MERCHANT


def parse_total_price(value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(code="bid_incomplete", message_key="bid_incomplete")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(code="bid_incomplete", message_key="bid_incomplete")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValidationError(code="total_price_invalid", message_key="total_price_invalid") from None
    if not math.isfinite(parsed) or parsed < 0:
        raise ValidationError(code="total_price_invalid", message_key="total_price_invalid")
    return parsed


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(entry) for key, entry in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(entry) for entry in value)
    return value


def freeze_item_prices(item_prices: Any) -> Tuple[Any, ...]:
    """Deep read-only copy: mappings become MappingProxyType, sequences become tuples."""
    if not isinstance(item_prices, (list, tuple)):
        return ()
    return _freeze(list(item_prices))


def thaw(value: Any) -> Any:
    """Plain dict/list form of a frozen value, for JSON serialization."""
    if isinstance(value, Mapping):
        return {key: thaw(entry) for key, entry in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(entry) for entry in value]
    return value


class BidStore:
    def __init__(
        self,
        invoice_store: InvoiceStore,
        *,
        lock: RLock | None = None,
        sequence: IdSequence | None = None,
        redact_competing_bids: bool = False,
    ) -> None:
        self.invoice_store = invoice_store
        self.redact_competing_bids = bool(redact_competing_bids)
        self._lock = lock or RLock()
        self._sequence = sequence or IdSequence()
        self._bids: List[Bid] = []
        self._by_invoice_merchant: Dict[Tuple[str, str], Bid] = {}

    def place_bid(
        self,
        invoice_id: object,
        merchant: Actor,
        total_price: Any,
        item_prices: Any = None,
    ) -> Bid:
        normalized_invoice_id = str(invoice_id or "").strip()
        if not normalized_invoice_id:
            raise ValidationError(code="bid_incomplete", message_key="bid_incomplete")
        price = parse_total_price(total_price)

        with self._lock:
            invoice = self.invoice_store.get_invoice(normalized_invoice_id)
            flow_policy.require_action(invoice.status, "place_bid")

            key = (invoice.id, merchant.id)
            if key in self._by_invoice_merchant:
                raise ConflictError(
                    code="bid_already_placed",
                    message_key="bid_already_placed",
                    payload={"bid_id": self._by_invoice_merchant[key].id},
                )

            bid = Bid(
                id=self._sequence.next_id(),
                invoice_id=invoice.id,
                merchant_id=merchant.id,
                merchant_name=merchant.name,
                total_price=price,
                item_prices=freeze_item_prices(item_prices),
            )
            self.invoice_store.record_bid_outcome(invoice.id, bid.total_price)
            self._bids.append(bid)
            self._by_invoice_merchant[key] = bid
            return bid

    def list_bids(self, invoice_id: object, requesting_actor: Actor) -> List[Bid]:
        with self._lock:
            invoice = self.invoice_store.get_invoice(invoice_id)
            if requesting_actor.role == ROLE_GROCERY and requesting_actor.id != invoice.owner_id:
                raise ForbiddenError(code="invoice_access_denied", message_key="invoice_access_denied")
            bids = self.bids_for_invoice(invoice.id)
            if self.redact_competing_bids and requesting_actor.role == ROLE_MERCHANT:
                return [bid for bid in bids if bid.merchant_id == requesting_actor.id]
            if requesting_actor.role not in (ROLE_GROCERY, ROLE_MERCHANT, ROLE_ADMIN):
                return []
            return bids

    def bids_for_invoice(self, invoice_id: str) -> List[Bid]:
        with self._lock:
            return [bid for bid in self._bids if bid.invoice_id == invoice_id]

    def find_bid(self, invoice_id: str, merchant_id: str) -> Bid | None:
        with self._lock:
            return self._by_invoice_merchant.get((str(invoice_id), str(merchant_id)))

    def __len__(self) -> int:
        return len(self._bids)
