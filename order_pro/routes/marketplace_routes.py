from __future__ import annotations

from flask import Blueprint, jsonify

from order_pro.access import require_actor, require_actor_roles
from order_pro.domain.contracts import BidPlaceInput, InvoiceApproveInput, InvoiceCreateInput
from order_pro.policies import ROLE_GROCERY, ROLE_MERCHANT
from order_pro.routes.payloads import bid_payload, invoice_payload, json_body
from order_pro.runtime import get_marketplace_service
from order_pro.ui_strings import success_message


marketplace_bp = Blueprint("marketplace", __name__)


def _optional_text(value) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


@marketplace_bp.route("/api/invoices", methods=["POST"])
def create_invoice():
    actor = require_actor_roles(ROLE_GROCERY)
    payload = json_body()
    items = payload.get("items")
    invoice = get_marketplace_service().create_invoice(
        actor,
        InvoiceCreateInput(
            items=items if isinstance(items, list) else [],
            address=_optional_text(payload.get("address")),
            phone=_optional_text(payload.get("phone")),
        ),
    )
    return (
        jsonify({"success": True, "message": success_message("invoice_created"), "invoice": invoice_payload(invoice)}),
        201,
    )


@marketplace_bp.route("/api/invoices", methods=["GET"])
def list_invoices():
    actor = require_actor()
    invoices = get_marketplace_service().list_invoices(actor)
    return jsonify({"success": True, "invoices": [invoice_payload(invoice) for invoice in invoices]})


@marketplace_bp.route("/api/invoices/<string:invoice_id>", methods=["GET"])
def get_invoice(invoice_id: str):
    actor = require_actor()
    invoice = get_marketplace_service().get_invoice(actor, invoice_id)
    return jsonify({"success": True, "invoice": invoice_payload(invoice)})


@marketplace_bp.route("/api/invoices/<string:invoice_id>/approve", methods=["POST"])
def approve_invoice(invoice_id: str):
    actor = require_actor()
    payload = json_body()
    invoice = get_marketplace_service().approve_invoice(
        actor,
        InvoiceApproveInput(invoice_id=invoice_id, merchant_id=_optional_text(payload.get("merchant_id"))),
    )
    return jsonify({"success": True, "message": success_message("invoice_approved"), "invoice": invoice_payload(invoice)})


@marketplace_bp.route("/api/bids", methods=["POST"])
def place_bid():
    actor = require_actor_roles(ROLE_MERCHANT)
    payload = json_body()
    item_prices = payload.get("item_prices")
    bid = get_marketplace_service().place_bid(
        actor,
        BidPlaceInput(
            invoice_id=_optional_text(payload.get("invoice_id")),
            total_price=payload.get("total_price"),
            item_prices=item_prices if isinstance(item_prices, list) else [],
        ),
    )
    return jsonify({"success": True, "message": success_message("bid_placed"), "bid": bid_payload(bid)}), 201


@marketplace_bp.route("/api/bids/<string:invoice_id>", methods=["GET"])
def list_bids(invoice_id: str):
    actor = require_actor()
    bids = get_marketplace_service().list_bids(actor, invoice_id)
    return jsonify({"success": True, "bids": [bid_payload(bid) for bid in bids]})
