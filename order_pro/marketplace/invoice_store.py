from __future__ import annotations

import dataclasses
import math
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping

from order_pro.domain.contracts import Actor, Invoice, InvoiceItem, utc_now_iso
from order_pro.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from order_pro.marketplace import flow_policy
from order_pro.marketplace.sequence import IdSequence
from order_pro.policies import ROLE_ADMIN, ROLE_GROCERY, ROLE_MERCHANT


BidExistsFn = Callable[[str, str], bool]


def parse_quantity(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        parsed = int(value)
    elif isinstance(value, str):
        raw = value.strip()
        try:
            parsed = int(raw)
        except ValueError:
            return None
    else:
        return None
    return parsed if parsed > 0 else None


def parse_item(raw: Any) -> InvoiceItem | None:
    if not isinstance(raw, Mapping):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    quantity = parse_quantity(raw.get("quantity"))
    if quantity is None:
        return None
    return InvoiceItem(name=name.strip(), quantity=quantity)


def filter_valid_items(items: Any) -> List[InvoiceItem]:
    """Keep the well-formed entries; malformed ones are dropped silently."""
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationError(code="items_required", message_key="items_required")
    valid = [item for item in (parse_item(raw) for raw in items) if item is not None]
    if not valid:
        raise ValidationError(code="items_invalid", message_key="items_invalid")
    return valid


class InvoiceStore:
    def __init__(self, *, lock: RLock | None = None, sequence: IdSequence | None = None) -> None:
        self._lock = lock or RLock()
        self._sequence = sequence or IdSequence()
        self._invoices: Dict[str, Invoice] = {}

    def create_invoice(
        self,
        owner: Actor,
        items: Any,
        address: str | None = None,
        phone: str | None = None,
    ) -> Invoice:
        valid_items = filter_valid_items(items)
        with self._lock:
            flow_policy.require_transition(None, flow_policy.STATUS_PENDING)
            invoice = Invoice(
                id=self._sequence.next_id(),
                owner_id=owner.id,
                owner_name=owner.name,
                phone=str(phone or "").strip() or owner.phone,
                address=str(address or "").strip() or owner.address,
                items=tuple(valid_items),
                status=flow_policy.STATUS_PENDING,
            )
            self._invoices[invoice.id] = invoice
            return invoice

    def list_invoices(self, actor: Actor) -> List[Invoice]:
        with self._lock:
            return [invoice for invoice in self._invoices.values() if self.is_visible_to(invoice, actor)]

    @staticmethod
    def is_visible_to(invoice: Invoice, actor: Actor) -> bool:
        if actor.role == ROLE_GROCERY:
            return invoice.owner_id == actor.id
        if actor.role == ROLE_MERCHANT:
            return invoice.status in (flow_policy.STATUS_PENDING, flow_policy.STATUS_PRICED)
        return actor.role == ROLE_ADMIN

    def get_invoice(self, invoice_id: object) -> Invoice:
        invoice = self._invoices.get(str(invoice_id or "").strip())
        if invoice is None:
            raise NotFoundError(code="invoice_not_found", message_key="invoice_not_found")
        return invoice

    def record_bid_outcome(self, invoice_id: str, bid_price: float) -> Invoice:
        with self._lock:
            invoice = self.get_invoice(invoice_id)
            status = flow_policy.require_transition(invoice.status, flow_policy.STATUS_PRICED)
            lowest = invoice.lowest_price if invoice.lowest_price is not None else math.inf
            updated = dataclasses.replace(
                invoice,
                status=status,
                lowest_price=min(lowest, float(bid_price)),
            )
            self._invoices[updated.id] = updated
            return updated

    def approve(
        self,
        invoice_id: object,
        merchant_id: object,
        requesting_actor: Actor,
        *,
        bid_exists: BidExistsFn,
    ) -> Invoice:
        with self._lock:
            invoice = self.get_invoice(invoice_id)

            role = requesting_actor.role
            if role == ROLE_GROCERY and requesting_actor.id != invoice.owner_id:
                raise ForbiddenError(code="approve_not_allowed", message_key="approve_not_allowed")
            if role not in (ROLE_GROCERY, ROLE_ADMIN):
                raise ForbiddenError(code="permission_denied", message_key="permission_denied")

            if flow_policy.is_terminal(invoice.status):
                raise ConflictError(
                    code="invoice_already_approved",
                    message_key="invoice_already_approved",
                    payload={"selected_merchant_id": invoice.selected_merchant_id},
                )

            chosen_merchant = str(merchant_id or "").strip()
            if not chosen_merchant:
                raise ValidationError(code="merchant_id_required", message_key="merchant_id_required")
            if not bid_exists(invoice.id, chosen_merchant):
                raise ValidationError(code="bid_not_found", message_key="bid_not_found")

            status = flow_policy.require_transition(invoice.status, flow_policy.STATUS_APPROVED)
            updated = dataclasses.replace(
                invoice,
                status=status,
                selected_merchant_id=chosen_merchant,
                approved_at=utc_now_iso(),
            )
            self._invoices[updated.id] = updated
            return updated

    def count_by_status(self) -> Dict[str, int]:
        with self._lock:
            counts = {status: 0 for status in flow_policy.INVOICE_STATUSES}
            for invoice in self._invoices.values():
                counts[invoice.status] = counts.get(invoice.status, 0) + 1
            return counts

    def __len__(self) -> int:
        return len(self._invoices)
