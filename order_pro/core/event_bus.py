from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Dict, List, Type

from order_pro.observability import observe_domain_event_emitted


EventHandler = Callable[["DomainEvent"], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    occurred_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        normalized_event_id = str(self.event_id or "").strip() or uuid.uuid4().hex
        normalized_occurred_at = self.occurred_at if isinstance(self.occurred_at, datetime) else _utc_now()
        if normalized_occurred_at.tzinfo is None:
            normalized_occurred_at = normalized_occurred_at.replace(tzinfo=timezone.utc)
        object.__setattr__(self, "event_id", normalized_event_id)
        object.__setattr__(self, "occurred_at", normalized_occurred_at.astimezone(timezone.utc))

    def to_log_fields(self) -> Dict[str, object]:
        payload: Dict[str, object] = {}
        for key, value in asdict(self).items():
            if isinstance(value, datetime):
                payload[key] = value.isoformat().replace("+00:00", "Z")
            else:
                payload[key] = value
        payload["event_type"] = type(self).__name__
        return payload


@dataclass(frozen=True, kw_only=True)
class ActorRegistered(DomainEvent):
    actor_id: str
    role: str


@dataclass(frozen=True, kw_only=True)
class InvoiceCreated(DomainEvent):
    invoice_id: str
    owner_id: str
    items_count: int = 0


@dataclass(frozen=True, kw_only=True)
class BidPlaced(DomainEvent):
    invoice_id: str
    bid_id: str
    merchant_id: str
    total_price: float
    lowest_price: float | None = None


@dataclass(frozen=True, kw_only=True)
class InvoiceApproved(DomainEvent):
    invoice_id: str
    merchant_id: str
    approved_by: str


class EventBus:
    def __init__(self) -> None:
        self._lock = RLock()
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}
        self._logger = logging.getLogger("order_pro.events")

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        observe_domain_event_emitted(type(event).__name__)
        self._logger.debug("domain_event_published", extra=event.to_log_fields())
        with self._lock:
            handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            # The mutation is already committed; a failing subscriber must not undo it.
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                self._logger.exception("event_handler_failed", extra={"event_type": type(event).__name__})

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()


_DEFAULT_EVENT_BUS = EventBus()


def get_event_bus() -> EventBus:
    return _DEFAULT_EVENT_BUS


def reset_event_bus_for_tests() -> None:
    _DEFAULT_EVENT_BUS.clear()
