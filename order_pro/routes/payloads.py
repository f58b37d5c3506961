from __future__ import annotations

from typing import Any, Dict

from flask import request

from order_pro.domain.contracts import Actor, Bid, Invoice
from order_pro.marketplace.bid_store import thaw
from order_pro.marketplace.flow_policy import action_label, flow_meta
from order_pro.ui_strings import role_label, status_label


def json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def actor_summary(actor: Actor) -> Dict[str, Any]:
    return {"id": actor.id, "name": actor.name, "role": actor.role}


def actor_profile(actor: Actor) -> Dict[str, Any]:
    return {
        "id": actor.id,
        "name": actor.name,
        "role": actor.role,
        "role_label": role_label(actor.role),
        "phone": actor.phone,
        "address": actor.address,
    }


def invoice_payload(invoice: Invoice) -> Dict[str, Any]:
    meta = flow_meta(invoice.status)
    return {
        "id": invoice.id,
        "owner_id": invoice.owner_id,
        "owner_name": invoice.owner_name,
        "phone": invoice.phone,
        "address": invoice.address,
        "items": [item.to_dict() for item in invoice.items],
        "status": invoice.status,
        "status_label": status_label(invoice.status),
        "lowest_price": invoice.lowest_price,
        "selected_merchant_id": invoice.selected_merchant_id,
        "created_at": invoice.created_at,
        "approved_at": invoice.approved_at,
        "allowed_actions": meta["allowed_actions"],
        "primary_action": meta["primary_action"],
        "primary_action_label": action_label(meta["primary_action"]) if meta["primary_action"] else None,
    }


def bid_payload(bid: Bid) -> Dict[str, Any]:
    return {
        "id": bid.id,
        "invoice_id": bid.invoice_id,
        "merchant_id": bid.merchant_id,
        "merchant_name": bid.merchant_name,
        "total_price": bid.total_price,
        "item_prices": thaw(bid.item_prices),
        "created_at": bid.created_at,
    }
