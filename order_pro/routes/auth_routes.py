from __future__ import annotations

from flask import Blueprint, g, jsonify

from order_pro.access import bind_session, current_actor, end_session, require_actor
from order_pro.domain.contracts import LoginInput, ProfileUpdateInput, RegisterInput
from order_pro.routes.payloads import actor_profile, actor_summary, json_body
from order_pro.runtime import get_auth_service
from order_pro.ui_strings import success_message


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/api/register", methods=["POST"])
def register():
    payload = json_body()
    actor = get_auth_service().register(
        RegisterInput(
            name=payload.get("name"),
            phone=payload.get("phone"),
            role=payload.get("role"),
            address=payload.get("address"),
        )
    )
    bind_session(actor)
    return jsonify({"success": True, "message": success_message("registered"), "user": actor_summary(actor)}), 201


@auth_bp.route("/api/login", methods=["POST"])
def login():
    payload = json_body()
    actor = get_auth_service().login(LoginInput(phone=payload.get("phone")))
    bind_session(actor)
    return jsonify({"success": True, "message": success_message("logged_in"), "user": actor_summary(actor)})


@auth_bp.route("/api/user", methods=["GET"])
def current_user():
    actor = require_actor()
    return jsonify({"success": True, "user": actor_profile(actor)})


@auth_bp.route("/api/user", methods=["PATCH"])
def update_current_user():
    actor = require_actor()
    payload = json_body()
    updated = get_auth_service().update_profile(
        actor,
        ProfileUpdateInput(name=payload.get("name"), address=payload.get("address")),
    )
    g.current_actor = updated
    return jsonify({"success": True, "message": success_message("profile_updated"), "user": actor_profile(updated)})


@auth_bp.route("/api/logout", methods=["POST"])
def logout():
    was_logged_in = current_actor() is not None
    end_session()
    return jsonify({"success": True, "message": success_message("logged_out"), "was_logged_in": was_logged_in})
