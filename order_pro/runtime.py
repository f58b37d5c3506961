from __future__ import annotations

from flask import Flask, current_app

from order_pro.application.auth_service import AuthService
from order_pro.application.marketplace_service import MarketplaceService
from order_pro.core import EventBus, get_event_bus
from order_pro.marketplace.store import MarketplaceStore


_STORE_KEY = "marketplace"
_MARKETPLACE_SERVICE_KEY = "order_pro.marketplace_service"
_AUTH_SERVICE_KEY = "order_pro.auth_service"


def init_marketplace(app: Flask, store: MarketplaceStore | None = None, event_bus: EventBus | None = None) -> MarketplaceStore:
    store = store or MarketplaceStore.from_config(app.config)
    bus = event_bus or get_event_bus()
    app.extensions[_STORE_KEY] = store
    app.extensions[_MARKETPLACE_SERVICE_KEY] = MarketplaceService(store, event_bus=bus)
    app.extensions[_AUTH_SERVICE_KEY] = AuthService(store, event_bus=bus)
    return store


def get_store() -> MarketplaceStore:
    return current_app.extensions[_STORE_KEY]


def get_marketplace_service() -> MarketplaceService:
    return current_app.extensions[_MARKETPLACE_SERVICE_KEY]


def get_auth_service() -> AuthService:
    return current_app.extensions[_AUTH_SERVICE_KEY]
