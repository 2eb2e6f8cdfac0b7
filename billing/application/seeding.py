"""
Sample data for demos and the monthly_report command.

All randomness comes from the ``rng`` argument (a ``random.Random``), so a
given seed always yields the same ledger.
"""

from datetime import timedelta

from billing.domain.account import Account
from billing.domain.entities import EnergyCategory, resolve_now

PROVINCES = ["Ontario", "Quebec", "Alberta", "British Columbia", "Manitoba"]
FIRST_NAMES = ["John", "Jane", "Mike", "Emily", "Dave"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Jones", "Brown"]
STREETS = ["Howard Ave", "Dougall Ave", "Walker Rd", "Ouellette Ave", "Lauzon Rd"]

FIRST_ACCOUNT_ID = 1001
UNPAID_BILL_AGE = timedelta(days=45)


def populate_ledger(ledger, rng, customers_per_province=100, trade_count=30, now=None):
    """
    Fills ``ledger`` with customers across PROVINCES plus a set of trades.

    Every third customer has been billed once; every ninth of those bills is
    backdated and left unpaid so the ledger has overdue accounts to report.
    Returns the number of accounts created.
    """
    now = resolve_now(now)
    categories = list(EnergyCategory)
    account_id = FIRST_ACCOUNT_ID
    created = 0

    for province in PROVINCES:
        for i in range(customers_per_province):
            first = rng.choice(FIRST_NAMES)
            last = rng.choice(LAST_NAMES)
            address = f"{rng.randint(100, 9999)} {rng.choice(STREETS)}, {province}"
            category = rng.choice(categories)
            allocation = rng.uniform(250, 1000)

            account = Account(
                account_id=account_id,
                name=f"{first} {last}",
                email=f"{first[0]}{last}@email.com".lower(),
                address=address,
                province=province,
                category=category,
                allocation=allocation,
            )
            account.record_usage(rng.uniform(50, allocation * 0.8))

            if i % 3 == 0:
                if i % 9 == 0:
                    account.issue_bill(ledger.rate_for(category), now=now - UNPAID_BILL_AGE)
                else:
                    bill = account.issue_bill(ledger.rate_for(category), now=now)
                    account.apply_payment(0, bill.amount)

            if i % 15 == 0:
                account.add_maintenance("Equipment check", rng.uniform(50, 200), now=now)

            ledger.add_account(account)
            account_id += 1
            created += 1

    for i in range(trade_count):
        category = rng.choice(categories)
        rate = ledger.rate_for(category)
        ledger.record_trade(
            category,
            quantity=rng.uniform(1000, 10000),
            price_per_unit=rng.uniform(rate * 0.7, rate * 1.3),
            is_import=i % 3 != 0,
            now=now,
        )

    return created
