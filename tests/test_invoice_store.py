import unittest

from order_pro.domain.contracts import Actor, InvoiceItem
from order_pro.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from order_pro.marketplace.invoice_store import InvoiceStore, filter_valid_items, parse_quantity


GROCERY = Actor(id="1", name="بقالة الأمل", phone="771234567", role="grocery", address="صنعاء")
OTHER_GROCERY = Actor(id="4", name="بقالة النور", phone="774000111", role="grocery")
MERCHANT = Actor(id="2", name="تاجر الجملة", phone="772345678", role="merchant")
ADMIN = Actor(id="3", name="المسؤول", phone="773456789", role="admin")


class ItemParsingTest(unittest.TestCase):
    def test_parse_quantity(self) -> None:
        self.assertEqual(parse_quantity(5), 5)
        self.assertEqual(parse_quantity(2.0), 2)
        self.assertEqual(parse_quantity(" 3 "), 3)
        for value in (0, -1, 2.5, "abc", "1.5", True, None, float("nan")):
            with self.subTest(value=value):
                self.assertIsNone(parse_quantity(value))

    def test_malformed_items_are_dropped(self) -> None:
        items = filter_valid_items(
            [
                {"name": "أرز", "quantity": 5},
                {"name": "", "quantity": 2},
                {"name": "سكر", "quantity": 0},
                "زيت",
                {"name": " شاي ", "quantity": "2"},
            ]
        )
        self.assertEqual(items, [InvoiceItem(name="أرز", quantity=5), InvoiceItem(name="شاي", quantity=2)])

    def test_empty_or_fully_invalid_items_are_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            filter_valid_items([])
        self.assertEqual(ctx.exception.code, "items_required")

        with self.assertRaises(ValidationError) as ctx:
            filter_valid_items("أرز")
        self.assertEqual(ctx.exception.code, "items_required")

        with self.assertRaises(ValidationError) as ctx:
            filter_valid_items([{"name": "أرز", "quantity": -2}])
        self.assertEqual(ctx.exception.code, "items_invalid")


class InvoiceStoreTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InvoiceStore()

    def test_create_invoice_starts_pending_with_owner_contact(self) -> None:
        invoice = self.store.create_invoice(GROCERY, [{"name": "أرز", "quantity": 5}])
        self.assertEqual(invoice.id, "1")
        self.assertEqual(invoice.status, "pending")
        self.assertIsNone(invoice.lowest_price)
        self.assertIsNone(invoice.selected_merchant_id)
        self.assertEqual(invoice.owner_name, GROCERY.name)
        self.assertEqual(invoice.phone, GROCERY.phone)
        self.assertEqual(invoice.address, GROCERY.address)

    def test_create_invoice_uses_supplied_contact(self) -> None:
        invoice = self.store.create_invoice(
            GROCERY,
            [{"name": "أرز", "quantity": 1}],
            address="عدن",
            phone="770000001",
        )
        self.assertEqual(invoice.address, "عدن")
        self.assertEqual(invoice.phone, "770000001")

    def test_visibility_by_role(self) -> None:
        own = self.store.create_invoice(GROCERY, [{"name": "أرز", "quantity": 1}])
        other = self.store.create_invoice(OTHER_GROCERY, [{"name": "سكر", "quantity": 1}])

        self.assertEqual([invoice.id for invoice in self.store.list_invoices(GROCERY)], [own.id])
        self.assertEqual([invoice.id for invoice in self.store.list_invoices(ADMIN)], [own.id, other.id])
        self.assertEqual(len(self.store.list_invoices(MERCHANT)), 2)

        stranger = Actor(id="9", name="زائر", phone="779999999", role="courier")
        self.assertEqual(self.store.list_invoices(stranger), [])

    def test_record_bid_outcome_tracks_minimum(self) -> None:
        invoice = self.store.create_invoice(GROCERY, [{"name": "أرز", "quantity": 5}])
        self.assertEqual(self.store.record_bid_outcome(invoice.id, 100).lowest_price, 100.0)
        self.assertEqual(self.store.record_bid_outcome(invoice.id, 120).lowest_price, 100.0)
        updated = self.store.record_bid_outcome(invoice.id, 80)
        self.assertEqual(updated.status, "priced")
        self.assertEqual(updated.lowest_price, 80.0)

    def test_get_invoice_unknown(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            self.store.get_invoice("404")
        self.assertEqual(ctx.exception.code, "invoice_not_found")


class InvoiceApproveTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InvoiceStore()
        self.invoice = self.store.create_invoice(GROCERY, [{"name": "أرز", "quantity": 5}])
        self.store.record_bid_outcome(self.invoice.id, 90)
        self.bids = {(self.invoice.id, MERCHANT.id)}

    def _bid_exists(self, invoice_id: str, merchant_id: str) -> bool:
        return (invoice_id, merchant_id) in self.bids

    def test_owner_approves_existing_bid(self) -> None:
        approved = self.store.approve(self.invoice.id, MERCHANT.id, GROCERY, bid_exists=self._bid_exists)
        self.assertEqual(approved.status, "approved")
        self.assertEqual(approved.selected_merchant_id, MERCHANT.id)
        self.assertTrue(approved.approved_at)
        self.assertEqual(approved.lowest_price, 90.0)

    def test_admin_may_approve_any_invoice(self) -> None:
        approved = self.store.approve(self.invoice.id, MERCHANT.id, ADMIN, bid_exists=self._bid_exists)
        self.assertEqual(approved.status, "approved")

    def test_non_owner_and_merchant_are_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            self.store.approve(self.invoice.id, MERCHANT.id, OTHER_GROCERY, bid_exists=self._bid_exists)
        self.assertEqual(ctx.exception.code, "approve_not_allowed")

        with self.assertRaises(ForbiddenError) as ctx:
            self.store.approve(self.invoice.id, MERCHANT.id, MERCHANT, bid_exists=self._bid_exists)
        self.assertEqual(ctx.exception.code, "permission_denied")
        self.assertEqual(self.store.get_invoice(self.invoice.id).status, "priced")

    def test_missing_or_unknown_merchant(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.store.approve(self.invoice.id, None, GROCERY, bid_exists=self._bid_exists)
        self.assertEqual(ctx.exception.code, "merchant_id_required")

        with self.assertRaises(ValidationError) as ctx:
            self.store.approve(self.invoice.id, "77", GROCERY, bid_exists=self._bid_exists)
        self.assertEqual(ctx.exception.code, "bid_not_found")

    def test_second_approval_is_conflict_and_keeps_fields(self) -> None:
        approved = self.store.approve(self.invoice.id, MERCHANT.id, GROCERY, bid_exists=self._bid_exists)
        with self.assertRaises(ConflictError) as ctx:
            self.store.approve(self.invoice.id, MERCHANT.id, ADMIN, bid_exists=self._bid_exists)
        self.assertEqual(ctx.exception.code, "invoice_already_approved")
        self.assertEqual(ctx.exception.payload, {"selected_merchant_id": MERCHANT.id})
        self.assertEqual(self.store.get_invoice(self.invoice.id), approved)

    def test_record_bid_outcome_after_approval_is_conflict(self) -> None:
        self.store.approve(self.invoice.id, MERCHANT.id, GROCERY, bid_exists=self._bid_exists)
        with self.assertRaises(ConflictError):
            self.store.record_bid_outcome(self.invoice.id, 10)
        self.assertEqual(self.store.get_invoice(self.invoice.id).lowest_price, 90.0)

    def test_count_by_status(self) -> None:
        self.store.create_invoice(GROCERY, [{"name": "سكر", "quantity": 1}])
        self.assertEqual(self.store.count_by_status(), {"pending": 1, "priced": 1, "approved": 0})
        self.assertEqual(len(self.store), 2)


if __name__ == "__main__":
    unittest.main()
