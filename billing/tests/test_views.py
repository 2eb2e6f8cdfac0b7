from django.core import mail
from django.test import SimpleTestCase
from rest_framework.test import APIClient

from billing.store import get_ledger, reset_ledger

BILLED_AT = "2026-01-01T00:00:00Z"
OVERDUE_AT = "2026-02-15T00:00:00Z"


class BillingApiTestCase(SimpleTestCase):
    """
    Each test starts from a fresh in-memory ledger so no state leaks
    between cases.
    """

    def setUp(self):
        reset_ledger()
        self.client = APIClient()

    def create_account(self, **overrides):
        payload = {
            "id": 1001,
            "name": "John Smith",
            "email": "jsmith@email.com",
            "address": "123 Howard Ave, Ontario",
            "province": "Ontario",
            "category": "crude_oil",
            "allocation": 100,
        }
        payload.update(overrides)
        return self.client.post("/api/billing/accounts/", payload)


class AccountEndpointTest(BillingApiTestCase):

    def test_create_account(self):
        response = self.create_account()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["id"], 1001)
        self.assertEqual(response.data["remaining"], 100)
        self.assertEqual(get_ledger().get_account(1001).province, "Ontario")

    def test_duplicate_id_returns_409(self):
        self.create_account()
        response = self.create_account(name="Someone Else")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(get_ledger().get_account(1001).name, "John Smith")

    def test_invalid_payload_returns_400(self):
        self.assertEqual(self.create_account(allocation=0).status_code, 400)
        self.assertEqual(self.create_account(category="coal").status_code, 400)
        self.assertEqual(self.client.post("/api/billing/accounts/", {"id": 5}).status_code, 400)

    def test_search(self):
        self.create_account()
        self.create_account(id=1002, name="Jane Jones", email="jjones@email.com", province="Quebec")

        everyone = self.client.get("/api/billing/accounts/")
        janes = self.client.get("/api/billing/accounts/", {"q": "Jane"})
        ontario = self.client.get("/api/billing/accounts/", {"province": "Ontario"})

        self.assertEqual([a["id"] for a in everyone.data], [1001, 1002])
        self.assertEqual([a["id"] for a in janes.data], [1002])
        self.assertEqual([a["id"] for a in ontario.data], [1001])

    def test_detail_and_not_found(self):
        self.create_account()

        response = self.client.get("/api/billing/accounts/1001/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["category_label"], "Crude Oil")
        self.assertEqual(response.data["bills"], [])
        self.assertEqual(self.client.get("/api/billing/accounts/9999/").status_code, 404)


class UsageEndpointTest(BillingApiTestCase):

    def setUp(self):
        super().setUp()
        self.create_account()

    def test_successful_usage(self):
        response = self.client.post("/api/billing/accounts/1001/usage/", {"amount": 30})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["usage"], 30)
        self.assertEqual(response.data["remaining"], 70)

    def test_exceeding_allocation_returns_422(self):
        """Requesting more than the allocation must fail without side effects."""
        self.client.post("/api/billing/accounts/1001/usage/", {"amount": 80})
        response = self.client.post("/api/billing/accounts/1001/usage/", {"amount": 30})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(get_ledger().get_account(1001).usage, 80)

    def test_negative_amount_returns_400(self):
        response = self.client.post("/api/billing/accounts/1001/usage/", {"amount": -5})
        self.assertEqual(response.status_code, 400)

    def test_unknown_account_returns_404(self):
        response = self.client.post("/api/billing/accounts/99999/usage/", {"amount": 5})
        self.assertEqual(response.status_code, 404)


class BillingLifecycleTest(BillingApiTestCase):

    def setUp(self):
        super().setUp()
        self.create_account()
        self.create_account(id=1002, email="idle@email.com")
        self.client.post("/api/billing/accounts/1001/usage/", {"amount": 80})

    def run_cycle(self):
        return self.client.post("/api/billing/billing-cycles/", {"as_of": BILLED_AT})

    def test_billing_cycle_skips_idle_accounts(self):
        response = self.run_cycle()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["bills_issued"], 1)
        self.assertEqual(response.data["total_billed"], 100.0)

        detail = self.client.get("/api/billing/accounts/1001/", {"as_of": OVERDUE_AT})
        self.assertEqual(detail.data["usage"], 0)
        self.assertEqual(detail.data["bills"][0]["amount"], 100.0)
        self.assertEqual(detail.data["bills"][0]["days_since_issue"], 45)
        self.assertTrue(detail.data["bills"][0]["overdue"])
        self.assertTrue(detail.data["has_overdue_bills"])

    def test_partial_payment_is_refused(self):
        self.run_cycle()

        response = self.client.post("/api/billing/accounts/1001/payments/", {"bill_index": 0, "amount": 50})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["paid"])
        self.assertEqual(response.data["total_owed"], 100.0)

    def test_full_payment_settles(self):
        self.run_cycle()

        response = self.client.post("/api/billing/accounts/1001/payments/", {"bill_index": 0, "amount": 100})

        self.assertTrue(response.data["paid"])
        self.assertEqual(response.data["total_owed"], 0)

    def test_unknown_bill_returns_404(self):
        response = self.client.post("/api/billing/accounts/1001/payments/", {"bill_index": 3, "amount": 100})
        self.assertEqual(response.status_code, 404)

    def test_overdue_listing(self):
        self.run_cycle()

        before = self.client.get("/api/billing/accounts/overdue/", {"as_of": "2026-01-31T00:00:00Z"})
        after = self.client.get("/api/billing/accounts/overdue/", {"as_of": OVERDUE_AT})

        self.assertEqual(before.data, [])
        self.assertEqual([a["id"] for a in after.data], [1001])

    def test_reminders_are_emailed_once(self):
        self.run_cycle()

        first = self.client.post("/api/billing/reminders/", {"as_of": OVERDUE_AT})
        second = self.client.post("/api/billing/reminders/", {"as_of": OVERDUE_AT})

        self.assertEqual(first.data["reminders_sent"], 1)
        self.assertEqual(second.data["reminders_sent"], 0)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["jsmith@email.com"])
        self.assertEqual(mail.outbox[0].subject, "Your energy payment is overdue")
        self.assertIn("15 days overdue", mail.outbox[0].body)

    def test_maintenance(self):
        ok = self.client.post("/api/billing/accounts/1001/maintenance/", {"description": "Meter swap", "cost": 80})
        bad = self.client.post("/api/billing/accounts/1001/maintenance/", {"description": "Oops", "cost": -1})

        self.assertEqual(ok.status_code, 201)
        self.assertEqual(bad.status_code, 422)
        self.assertEqual(len(get_ledger().get_account(1001).maintenance_log), 1)


class ReportingEndpointTest(BillingApiTestCase):

    def test_empty_report(self):
        response = self.client.get("/api/billing/reports/monthly/", {"as_of": OVERDUE_AT})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["overall"]["customer_count"], 0)
        self.assertEqual(response.data["overall"]["overdue_percentage"], 0.0)
        self.assertEqual(response.data["period_label"], "February 2026")

    def test_statistics_and_trades(self):
        self.create_account()
        self.client.post("/api/billing/accounts/1001/usage/", {"amount": 25})
        self.client.post("/api/billing/trades/", {"category": "solar", "quantity": 10, "price_per_unit": 2, "is_import": True})
        self.client.post("/api/billing/trades/", {"category": "nuclear", "quantity": 5, "price_per_unit": 3, "is_import": False})

        stats = self.client.get("/api/billing/statistics/")
        report = self.client.get("/api/billing/reports/monthly/")
        trades = self.client.get("/api/billing/trades/")

        self.assertEqual(stats.data["Ontario"]["total_used"], 25)
        self.assertEqual(stats.data["Ontario"]["usage_percentage"], 25.0)
        self.assertEqual(report.data["trades"]["net_balance"], 5)
        self.assertEqual(len(trades.data), 2)
        self.assertEqual(trades.data[0]["value"], 20)

    def test_negative_trade_returns_422(self):
        response = self.client.post(
            "/api/billing/trades/",
            {"category": "solar", "quantity": -10, "price_per_unit": 2, "is_import": True},
        )
        self.assertEqual(response.status_code, 422)

    def test_text_report(self):
        response = self.client.get("/api/billing/reports/monthly/text/", {"as_of": OVERDUE_AT})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response["Content-Type"].startswith("text/plain"))
        self.assertIn(b"Energy Provider Monthly Report - February 2026", response.content)

    def test_health(self):
        self.assertEqual(self.client.get("/api/billing/health/").data, {"status": "ok"})
