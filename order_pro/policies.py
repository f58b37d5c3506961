from __future__ import annotations

from typing import Iterable, Set

from order_pro.errors import ForbiddenError


ROLE_GROCERY = "grocery"
ROLE_MERCHANT = "merchant"
ROLE_ADMIN = "admin"

VALID_ROLES: Set[str] = {ROLE_GROCERY, ROLE_MERCHANT, ROLE_ADMIN}
# Admins are seeded, never self-registered.
REGISTRABLE_ROLES: Set[str] = {ROLE_GROCERY, ROLE_MERCHANT}


def normalize_role(role: str | None, default: str = "") -> str:
    normalized = str(role or "").strip().lower()
    if normalized in VALID_ROLES:
        return normalized
    return default if default in VALID_ROLES else ""


def normalize_allowed_roles(roles: Iterable[str]) -> Set[str]:
    allowed: Set[str] = set()
    for role in roles:
        normalized = normalize_role(role)
        if normalized:
            allowed.add(normalized)
    return allowed


def has_any_role(role: str | None, allowed_roles: Iterable[str]) -> bool:
    normalized_role = normalize_role(role)
    allowed = normalize_allowed_roles(allowed_roles)
    return not allowed or normalized_role in allowed


def require_roles(role: str | None, *allowed_roles: str) -> str:
    normalized_role = normalize_role(role)
    if normalized_role and has_any_role(normalized_role, allowed_roles):
        return normalized_role
    raise ForbiddenError(
        code="permission_denied",
        message_key="permission_denied",
        http_status=403,
        critical=False,
        details=f"role={role!r} allowed={sorted(allowed_roles)}",
    )
