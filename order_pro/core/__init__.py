from order_pro.core.event_bus import (
    ActorRegistered,
    BidPlaced,
    DomainEvent,
    EventBus,
    InvoiceApproved,
    InvoiceCreated,
    get_event_bus,
    reset_event_bus_for_tests,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "ActorRegistered",
    "InvoiceCreated",
    "BidPlaced",
    "InvoiceApproved",
    "get_event_bus",
    "reset_event_bus_for_tests",
]
