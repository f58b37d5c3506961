import unittest

from order_pro.application.marketplace_service import MarketplaceService
from order_pro.core import BidPlaced, EventBus, InvoiceApproved, InvoiceCreated
from order_pro.domain.contracts import BidPlaceInput, InvoiceApproveInput, InvoiceCreateInput
from order_pro.errors import NotFoundError
from order_pro.marketplace.store import MarketplaceStore


class EventBusTest(unittest.TestCase):
    def test_handler_execution_order_is_predictable(self) -> None:
        bus = EventBus()
        execution_trace = []

        bus.subscribe(InvoiceCreated, lambda _event: execution_trace.append("first"))
        bus.subscribe(InvoiceCreated, lambda _event: execution_trace.append("second"))
        bus.publish(InvoiceCreated(invoice_id="1", owner_id="1", items_count=1))

        self.assertEqual(execution_trace, ["first", "second"])

    def test_failing_handler_does_not_stop_others(self) -> None:
        bus = EventBus()
        received = []

        def broken_handler(_event):
            raise RuntimeError("boom")

        bus.subscribe(InvoiceApproved, broken_handler)
        bus.subscribe(InvoiceApproved, received.append)
        with self.assertLogs("order_pro.events", level="ERROR"):
            bus.publish(InvoiceApproved(invoice_id="1", merchant_id="2", approved_by="1"))

        self.assertEqual(len(received), 1)

    def test_event_log_fields(self) -> None:
        event = BidPlaced(invoice_id="1", bid_id="1", merchant_id="2", total_price=80.0, lowest_price=80.0)
        fields = event.to_log_fields()
        self.assertEqual(fields["event_type"], "BidPlaced")
        self.assertTrue(fields["occurred_at"].endswith("Z"))
        self.assertTrue(fields["event_id"])

    def test_marketplace_flow_emits_events(self) -> None:
        bus = EventBus()
        received = []
        for event_type in (InvoiceCreated, BidPlaced, InvoiceApproved):
            bus.subscribe(event_type, received.append)

        store = MarketplaceStore()
        service = MarketplaceService(store, event_bus=bus)
        grocery = store.directory.find_by_id("1")
        merchant = store.directory.find_by_id("2")

        invoice = service.create_invoice(grocery, InvoiceCreateInput(items=[{"name": "أرز", "quantity": 5}]))
        service.place_bid(merchant, BidPlaceInput(invoice_id=invoice.id, total_price=100))
        service.approve_invoice(grocery, InvoiceApproveInput(invoice_id=invoice.id, merchant_id=merchant.id))

        self.assertEqual([type(event).__name__ for event in received], ["InvoiceCreated", "BidPlaced", "InvoiceApproved"])
        self.assertEqual(received[1].lowest_price, 100.0)
        self.assertEqual(received[2].approved_by, grocery.id)

    def test_rejected_bid_emits_nothing(self) -> None:
        bus = EventBus()
        received = []
        bus.subscribe(BidPlaced, received.append)
        store = MarketplaceStore()
        service = MarketplaceService(store, event_bus=bus)
        merchant = store.directory.find_by_id("2")

        with self.assertRaises(NotFoundError):
            service.place_bid(merchant, BidPlaceInput(invoice_id="404", total_price=100))
        self.assertEqual(received, [])


if __name__ == "__main__":
    unittest.main()
