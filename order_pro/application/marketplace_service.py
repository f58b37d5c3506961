from __future__ import annotations

import logging
from typing import Dict, List

from order_pro.core import BidPlaced, EventBus, InvoiceApproved, InvoiceCreated, get_event_bus
from order_pro.domain.contracts import (
    Actor,
    Bid,
    BidPlaceInput,
    Invoice,
    InvoiceApproveInput,
    InvoiceCreateInput,
)
from order_pro.errors import AppError, ForbiddenError
from order_pro.marketplace.store import MarketplaceStore
from order_pro.policies import ROLE_ADMIN, ROLE_GROCERY, ROLE_MERCHANT, require_roles


_LOGGER = logging.getLogger("order_pro.marketplace")


class MarketplaceService:
    """Application facade: role gates, store calls, then event publication."""

    def __init__(self, store: MarketplaceStore, event_bus: EventBus | None = None) -> None:
        self.store = store
        self.event_bus = event_bus or get_event_bus()

    def create_invoice(self, actor: Actor, create_input: InvoiceCreateInput) -> Invoice:
        require_roles(actor.role, ROLE_GROCERY)
        invoice = self.store.invoices.create_invoice(
            actor,
            create_input.items,
            address=create_input.address,
            phone=create_input.phone,
        )
        _LOGGER.info(
            "invoice_created",
            extra={"invoice_id": invoice.id, "owner_id": invoice.owner_id, "items_count": len(invoice.items)},
        )
        self.event_bus.publish(
            InvoiceCreated(invoice_id=invoice.id, owner_id=invoice.owner_id, items_count=len(invoice.items))
        )
        return invoice

    def list_invoices(self, actor: Actor) -> List[Invoice]:
        return self.store.invoices.list_invoices(actor)

    def get_invoice(self, actor: Actor, invoice_id: str) -> Invoice:
        invoice = self.store.invoices.get_invoice(invoice_id)
        if not self.store.invoices.is_visible_to(invoice, actor):
            raise ForbiddenError(code="invoice_access_denied", message_key="invoice_access_denied")
        return invoice

    def place_bid(self, actor: Actor, bid_input: BidPlaceInput) -> Bid:
        require_roles(actor.role, ROLE_MERCHANT)
        try:
            with self.store.lock:
                bid = self.store.bids.place_bid(
                    bid_input.invoice_id,
                    actor,
                    bid_input.total_price,
                    bid_input.item_prices,
                )
                invoice = self.store.invoices.get_invoice(bid.invoice_id)
        except AppError as exc:
            _LOGGER.info(
                "bid_rejected",
                extra={"invoice_id": bid_input.invoice_id, "merchant_id": actor.id, "error_code": exc.code},
            )
            raise
        _LOGGER.info(
            "bid_placed",
            extra={
                "invoice_id": bid.invoice_id,
                "bid_id": bid.id,
                "merchant_id": bid.merchant_id,
                "total_price": bid.total_price,
                "lowest_price": invoice.lowest_price,
            },
        )
        self.event_bus.publish(
            BidPlaced(
                invoice_id=bid.invoice_id,
                bid_id=bid.id,
                merchant_id=bid.merchant_id,
                total_price=bid.total_price,
                lowest_price=invoice.lowest_price,
            )
        )
        return bid

    def list_bids(self, actor: Actor, invoice_id: str) -> List[Bid]:
        return self.store.bids.list_bids(invoice_id, actor)

    def approve_invoice(self, actor: Actor, approve_input: InvoiceApproveInput) -> Invoice:
        # Role and ownership are checked by the invoice store after the existence check.
        invoice = self.store.matching.approve_invoice(
            approve_input.invoice_id,
            approve_input.merchant_id,
            actor,
        )
        _LOGGER.info(
            "invoice_approved",
            extra={
                "invoice_id": invoice.id,
                "merchant_id": invoice.selected_merchant_id,
                "approved_by": actor.id,
            },
        )
        self.event_bus.publish(
            InvoiceApproved(
                invoice_id=invoice.id,
                merchant_id=str(invoice.selected_merchant_id or ""),
                approved_by=actor.id,
            )
        )
        return invoice

    def list_actors(self, actor: Actor) -> List[Actor]:
        require_roles(actor.role, ROLE_ADMIN)
        return self.store.directory.list_actors()

    def stats(self, actor: Actor) -> Dict[str, int]:
        require_roles(actor.role, ROLE_ADMIN)
        return self.store.stats()
