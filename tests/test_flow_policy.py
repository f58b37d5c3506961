import unittest

from order_pro.errors import ConflictError
from order_pro.marketplace import flow_policy
from order_pro.marketplace.flow_policy import ALLOWED_TRANSITIONS, FLOW_POLICY, INVOICE_STATUSES


class FlowPolicyTest(unittest.TestCase):
    def test_every_status_has_a_policy(self) -> None:
        self.assertEqual(sorted(FLOW_POLICY), sorted(INVOICE_STATUSES))
        for status_name, policy in FLOW_POLICY.items():
            actions = policy.get("allowed_actions") or []
            self.assertTrue(actions, f"no actions for {status_name}")

    def test_primary_action_is_in_allowed_actions(self) -> None:
        for status_name, policy in FLOW_POLICY.items():
            primary_action = policy.get("primary_action")
            allowed_actions = policy.get("allowed_actions") or []
            if primary_action:
                self.assertIn(primary_action, allowed_actions, f"primary outside allowed for {status_name}")

    def test_every_action_has_a_label(self) -> None:
        for policy in FLOW_POLICY.values():
            for action in policy["allowed_actions"]:
                self.assertNotEqual(flow_policy.action_label(action), action)
        self.assertEqual(flow_policy.action_label("unknown", "fallback"), "fallback")

    def test_status_never_regresses(self) -> None:
        order = {status: index for index, status in enumerate(INVOICE_STATUSES)}
        for current, targets in ALLOWED_TRANSITIONS.items():
            if current is None:
                self.assertEqual(targets, frozenset({"pending"}))
                continue
            for target in targets:
                self.assertGreaterEqual(order[target], order[current])

    def test_transitions(self) -> None:
        self.assertTrue(flow_policy.can_transition(None, "pending"))
        self.assertTrue(flow_policy.can_transition("pending", "priced"))
        self.assertTrue(flow_policy.can_transition("priced", "priced"))
        self.assertTrue(flow_policy.can_transition("priced", "approved"))
        self.assertFalse(flow_policy.can_transition("pending", "approved"))
        self.assertFalse(flow_policy.can_transition("approved", "priced"))
        self.assertFalse(flow_policy.can_transition("unknown", "priced"))

    def test_require_transition_out_of_terminal_status(self) -> None:
        self.assertEqual(flow_policy.require_transition("pending", "priced"), "priced")
        with self.assertRaises(ConflictError) as ctx:
            flow_policy.require_transition("approved", "priced")
        self.assertEqual(ctx.exception.code, "invoice_already_approved")
        with self.assertRaises(ConflictError) as ctx:
            flow_policy.require_transition("pending", "approved")
        self.assertEqual(ctx.exception.code, "status_transition_invalid")

    def test_require_action(self) -> None:
        flow_policy.require_action("pending", "place_bid")
        with self.assertRaises(ConflictError) as ctx:
            flow_policy.require_action("approved", "place_bid")
        self.assertEqual(ctx.exception.code, "invoice_already_approved")
        self.assertEqual(ctx.exception.payload["allowed_actions"], ["view_bids"])
        with self.assertRaises(ConflictError) as ctx:
            flow_policy.require_action("pending", "approve_invoice")
        self.assertEqual(ctx.exception.code, "action_not_allowed_for_status")

    def test_flow_meta_for_unknown_status(self) -> None:
        self.assertEqual(
            flow_policy.flow_meta("archived"),
            {"status": "archived", "allowed_actions": [], "primary_action": None},
        )
        self.assertEqual(flow_policy.primary_action("priced"), "approve_invoice")
        self.assertTrue(flow_policy.is_terminal("approved"))
        self.assertFalse(flow_policy.is_terminal("priced"))


if __name__ == "__main__":
    unittest.main()
