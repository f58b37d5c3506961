from __future__ import annotations

from threading import RLock

from order_pro.domain.contracts import Actor, Invoice
from order_pro.marketplace.bid_store import BidStore
from order_pro.marketplace.invoice_store import InvoiceStore


class MatchingEngine:
    """Approval needs both stores: ownership and status from invoices, the chosen bid from bids."""

    def __init__(self, invoice_store: InvoiceStore, bid_store: BidStore, *, lock: RLock | None = None) -> None:
        self.invoice_store = invoice_store
        self.bid_store = bid_store
        self._lock = lock or RLock()

    def _bid_exists(self, invoice_id: str, merchant_id: str) -> bool:
        return self.bid_store.find_bid(invoice_id, merchant_id) is not None

    def approve_invoice(self, invoice_id: object, merchant_id: object, requesting_actor: Actor) -> Invoice:
        with self._lock:
            return self.invoice_store.approve(
                invoice_id,
                merchant_id,
                requesting_actor,
                bid_exists=self._bid_exists,
            )
