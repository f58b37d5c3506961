from __future__ import annotations

from typing import Dict, FrozenSet, List

from order_pro.errors import ConflictError


STATUS_PENDING = "pending"
STATUS_PRICED = "priced"
STATUS_APPROVED = "approved"

INVOICE_STATUSES: List[str] = [STATUS_PENDING, STATUS_PRICED, STATUS_APPROVED]
TERMINAL_STATUSES: FrozenSet[str] = frozenset({STATUS_APPROVED})

# None is the state of an invoice that does not exist yet.
ALLOWED_TRANSITIONS: Dict[str | None, FrozenSet[str]] = {
    None: frozenset({STATUS_PENDING}),
    STATUS_PENDING: frozenset({STATUS_PRICED}),
    STATUS_PRICED: frozenset({STATUS_PRICED, STATUS_APPROVED}),
    STATUS_APPROVED: frozenset(),
}


ACTION_LABELS: Dict[str, str] = {
    "place_bid": "تقديم عرض",
    "view_bids": "عرض العروض",
    "approve_invoice": "اعتماد العرض",
}


FLOW_POLICY: Dict[str, Dict[str, object]] = {
    STATUS_PENDING: {
        "allowed_actions": ["place_bid", "view_bids"],
        "primary_action": "place_bid",
    },
    STATUS_PRICED: {
        "allowed_actions": ["place_bid", "view_bids", "approve_invoice"],
        "primary_action": "approve_invoice",
    },
    STATUS_APPROVED: {
        "allowed_actions": ["view_bids"],
        "primary_action": "view_bids",
    },
}


def _fallback_policy() -> Dict[str, object]:
    return {"allowed_actions": [], "primary_action": None}


def status_policy(status: str | None) -> Dict[str, object]:
    if not status:
        return _fallback_policy()
    return FLOW_POLICY.get(str(status), _fallback_policy())


def allowed_actions(status: str | None) -> List[str]:
    actions = status_policy(status).get("allowed_actions") or []
    if not isinstance(actions, list):
        return []
    return [str(action) for action in actions]


def primary_action(status: str | None) -> str | None:
    action = status_policy(status).get("primary_action")
    if not action:
        return None
    return str(action)


def action_allowed(status: str | None, action: str) -> bool:
    if not action:
        return False
    return action in set(allowed_actions(status))


def action_label(action: str, fallback: str | None = None) -> str:
    label = ACTION_LABELS.get(action)
    if label:
        return label
    if fallback is not None:
        return fallback
    return action


def flow_meta(status: str | None) -> Dict[str, object]:
    return {
        "status": status,
        "allowed_actions": allowed_actions(status),
        "primary_action": primary_action(status),
    }


def is_terminal(status: str | None) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: str | None, target: str) -> bool:
    allowed = ALLOWED_TRANSITIONS.get(current)
    if allowed is None:
        return False
    return target in allowed


def require_action(status: str | None, action: str) -> None:
    """Raise ConflictError when the invoice status does not admit the action."""
    if action_allowed(status, action):
        return
    code = "invoice_already_approved" if is_terminal(status) else "action_not_allowed_for_status"
    raise ConflictError(
        code=code,
        message_key="invoice_already_approved" if is_terminal(status) else "conflict",
        http_status=409,
        critical=False,
        payload={
            "status": status,
            "action": action,
            "allowed_actions": allowed_actions(status),
        },
    )


def require_transition(current: str | None, target: str) -> str:
    if can_transition(current, target):
        return target
    raise ConflictError(
        code="invoice_already_approved" if is_terminal(current) else "status_transition_invalid",
        message_key="invoice_already_approved" if is_terminal(current) else "conflict",
        http_status=409,
        critical=False,
        details=f"{current} -> {target}",
    )
