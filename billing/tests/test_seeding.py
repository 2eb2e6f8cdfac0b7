import random

from django.test import SimpleTestCase

from billing.application.seeding import FIRST_ACCOUNT_ID, PROVINCES, populate_ledger
from billing.tests.factories import NOW, make_ledger


def _fingerprint(ledger):
    return [
        (a.id, a.name, a.email, a.address, a.category, a.allocation, a.usage, len(a.bills))
        for a in ledger.accounts()
    ]


class PopulateLedgerTest(SimpleTestCase):

    def setUp(self):
        self.ledger = make_ledger()
        self.created = populate_ledger(self.ledger, random.Random(42), customers_per_province=10, now=NOW)

    def test_same_seed_same_ledger(self):
        other = make_ledger()
        populate_ledger(other, random.Random(42), customers_per_province=10, now=NOW)

        self.assertEqual(_fingerprint(self.ledger), _fingerprint(other))
        self.assertEqual(
            [(t.category, t.quantity, t.is_import) for t in self.ledger.trades()],
            [(t.category, t.quantity, t.is_import) for t in other.trades()],
        )

    def test_accounts_spread_over_provinces(self):
        self.assertEqual(self.created, 50)
        self.assertEqual(self.ledger.provinces(), sorted(PROVINCES))
        ids = [a.id for a in self.ledger.accounts()]
        self.assertEqual(ids, list(range(FIRST_ACCOUNT_ID, FIRST_ACCOUNT_ID + 50)))

    def test_usage_within_allocation(self):
        for account in self.ledger.accounts():
            self.assertGreaterEqual(account.usage, 0)
            self.assertLessEqual(account.usage, account.allocation)
            self.assertTrue(250 <= account.allocation <= 1000)

    def test_some_accounts_overdue(self):
        # customers 0 and 9 in each province carry an unpaid backdated bill
        self.assertEqual(len(self.ledger.overdue_accounts(now=NOW)), 10)

    def test_trades(self):
        trades = self.ledger.trades()
        self.assertEqual(len(trades), 30)
        self.assertEqual(sum(1 for t in trades if t.is_import), 20)
