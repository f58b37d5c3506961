from __future__ import annotations

from flask import g, session

from order_pro.domain.contracts import Actor
from order_pro.errors import AuthenticationError
from order_pro.policies import require_roles
from order_pro.runtime import get_auth_service


SESSION_ACTOR_KEY = "actor_id"


def bind_session(actor: Actor) -> None:
    session.clear()
    session.permanent = True
    session[SESSION_ACTOR_KEY] = actor.id
    g.current_actor = actor


def end_session() -> None:
    session.clear()
    g.pop("current_actor", None)


def current_actor() -> Actor | None:
    """Resolve the session's actor from the directory on every request.

    Only the id lives in the session cookie, so name, address and role
    changes apply to the very next request. A session pointing at an actor
    the directory no longer knows is cleared.
    """
    if "current_actor" in g:
        return g.current_actor
    actor_id = str(session.get(SESSION_ACTOR_KEY) or "").strip()
    actor = get_auth_service().resolve(actor_id)
    if actor is None and actor_id:
        session.clear()
    g.current_actor = actor
    return actor


def require_actor() -> Actor:
    actor = current_actor()
    if actor is None:
        raise AuthenticationError(code="auth_required", message_key="auth_required", http_status=401)
    return actor


def require_actor_roles(*allowed_roles: str) -> Actor:
    actor = require_actor()
    require_roles(actor.role, *allowed_roles)
    return actor
