from __future__ import annotations

from flask import Blueprint, jsonify

from order_pro.access import require_actor_roles
from order_pro.policies import ROLE_ADMIN
from order_pro.routes.payloads import actor_profile
from order_pro.runtime import get_marketplace_service


admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/api/users", methods=["GET"])
def list_users():
    actor = require_actor_roles(ROLE_ADMIN)
    actors = get_marketplace_service().list_actors(actor)
    return jsonify({"success": True, "users": [actor_profile(item) for item in actors]})


@admin_bp.route("/api/stats", methods=["GET"])
def stats():
    actor = require_actor_roles(ROLE_ADMIN)
    return jsonify({"success": True, "stats": get_marketplace_service().stats(actor)})
