from __future__ import annotations

import logging

from order_pro.core import ActorRegistered, EventBus, get_event_bus
from order_pro.domain.contracts import Actor, LoginInput, ProfileUpdateInput, RegisterInput
from order_pro.errors import AuthenticationError, NotFoundError
from order_pro.marketplace.directory import validate_phone
from order_pro.marketplace.store import MarketplaceStore


_LOGGER = logging.getLogger("order_pro.auth")


class AuthService:
    """Phone-based identity on top of the directory. Sessions are handled by order_pro.access."""

    def __init__(self, store: MarketplaceStore, event_bus: EventBus | None = None) -> None:
        self.directory = store.directory
        self.event_bus = event_bus or get_event_bus()

    def register(self, register_input: RegisterInput) -> Actor:
        actor = self.directory.register(
            register_input.name,
            register_input.phone,
            register_input.role,
            register_input.address,
        )
        _LOGGER.info("actor_registered", extra={"actor_id": actor.id, "role": actor.role})
        self.event_bus.publish(ActorRegistered(actor_id=actor.id, role=actor.role))
        return actor

    def login(self, login_input: LoginInput) -> Actor:
        phone = validate_phone(login_input.phone)
        actor = self.directory.find_by_phone(phone)
        if actor is None:
            raise NotFoundError(code="user_not_registered", message_key="user_not_registered")
        _LOGGER.info("actor_logged_in", extra={"actor_id": actor.id, "role": actor.role})
        return actor

    def resolve(self, actor_id: str | None) -> Actor | None:
        if not actor_id:
            return None
        return self.directory.find_by_id(actor_id)

    def update_profile(self, actor: Actor, update_input: ProfileUpdateInput) -> Actor:
        if self.directory.find_by_id(actor.id) is None:
            raise AuthenticationError()
        updated = self.directory.update_profile(actor.id, name=update_input.name, address=update_input.address)
        _LOGGER.info("actor_profile_updated", extra={"actor_id": updated.id})
        return updated
