import unittest

from order_pro.errors import ForbiddenError
from order_pro.marketplace.flow_policy import INVOICE_STATUSES
from order_pro.policies import has_any_role, normalize_allowed_roles, normalize_role, require_roles
from order_pro.ui_strings import (
    MESSAGES,
    STATUS_LABELS,
    error_message,
    role_label,
    status_label,
    success_message,
)


class UiStringsTest(unittest.TestCase):
    def test_every_invoice_status_has_a_label(self) -> None:
        self.assertEqual(sorted(STATUS_LABELS), sorted(INVOICE_STATUSES))
        for status in INVOICE_STATUSES:
            self.assertTrue(status_label(status).strip())
            self.assertNotEqual(status_label(status), status)

    def test_labels_fall_back_to_key(self) -> None:
        self.assertEqual(status_label("approved"), "تمت الموافقة")
        self.assertEqual(status_label("archived"), "archived")
        self.assertEqual(status_label("archived", "-"), "-")
        self.assertEqual(role_label("merchant"), "تاجر جملة")
        self.assertEqual(role_label("courier"), "courier")

    def test_messages(self) -> None:
        self.assertEqual(error_message("auth_required"), MESSAGES["error"]["auth_required"])
        self.assertEqual(error_message("missing_key", "fallback"), "fallback")
        self.assertEqual(success_message("missing_key"), "missing_key")
        self.assertTrue(success_message("invoice_approved"))


class RolePolicyTest(unittest.TestCase):
    def test_normalize_role(self) -> None:
        self.assertEqual(normalize_role(" Merchant "), "merchant")
        self.assertEqual(normalize_role("courier"), "")
        self.assertEqual(normalize_role(None, default="grocery"), "grocery")
        self.assertEqual(normalize_allowed_roles(["ADMIN", "nope"]), {"admin"})

    def test_role_checks(self) -> None:
        self.assertTrue(has_any_role("admin", ["admin"]))
        self.assertFalse(has_any_role("merchant", ["grocery", "admin"]))
        self.assertEqual(require_roles("grocery", "grocery"), "grocery")
        with self.assertRaises(ForbiddenError) as ctx:
            require_roles("merchant", "grocery")
        self.assertEqual(ctx.exception.code, "permission_denied")
        self.assertEqual(ctx.exception.http_status, 403)
        with self.assertRaises(ForbiddenError):
            require_roles("", "grocery")


if __name__ == "__main__":
    unittest.main()
