from __future__ import annotations

from threading import RLock
from typing import Dict

from order_pro.marketplace.bid_store import BidStore
from order_pro.marketplace.directory import DEMO_ACTORS, Directory
from order_pro.marketplace.invoice_store import InvoiceStore
from order_pro.marketplace.matching import MatchingEngine
from order_pro.marketplace.sequence import IdSequence


class MarketplaceStore:
    """Process-lifetime owner of actors, invoices and bids.

    One reentrant lock is shared by every component, so the read-modify-write
    sequences in place_bid and approve_invoice are serialized even when the
    WSGI server runs requests on several threads.
    """

    def __init__(self, *, seed_demo_actors: bool = True, redact_competing_bids: bool = False) -> None:
        self.lock = RLock()
        self.directory = Directory(
            lock=self.lock,
            sequence=IdSequence(),
            seed=DEMO_ACTORS if seed_demo_actors else (),
        )
        self.invoices = InvoiceStore(lock=self.lock, sequence=IdSequence())
        self.bids = BidStore(
            self.invoices,
            lock=self.lock,
            sequence=IdSequence(),
            redact_competing_bids=redact_competing_bids,
        )
        self.matching = MatchingEngine(self.invoices, self.bids, lock=self.lock)

    @classmethod
    def from_config(cls, config) -> "MarketplaceStore":
        return cls(
            seed_demo_actors=bool(config.get("SEED_DEMO_ACTORS", True)),
            redact_competing_bids=bool(config.get("BID_REDACTION_ENABLED", False)),
        )

    def stats(self) -> Dict[str, int]:
        with self.lock:
            by_role = self.directory.count_by_role()
            by_status = self.invoices.count_by_status()
            return {
                "total_users": len(self.directory),
                "total_invoices": len(self.invoices),
                "total_bids": len(self.bids),
                "groceries": by_role.get("grocery", 0),
                "merchants": by_role.get("merchant", 0),
                "admins": by_role.get("admin", 0),
                "pending_invoices": by_status.get("pending", 0),
                "priced_invoices": by_status.get("priced", 0),
                "approved_invoices": by_status.get("approved", 0),
            }
