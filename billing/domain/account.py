"""
Domain Entity — Customer Account

One customer's energy allocation for the current period, the usage recorded
against it, the bills issued at each billing cycle, and a maintenance log.

Invariants enforced by every mutation:

- 0 <= usage <= allocation
- bills are kept in issue order and are never removed
- reminder_sent is set when a reminder is produced and cleared by any
  successful payment, so at most one reminder goes out per overdue episode

Rejected operations raise a domain exception before touching any state.
"""

import math
from typing import List, Optional, Tuple

from billing.domain.entities import (
    Bill,
    EnergyCategory,
    MaintenanceEntry,
    resolve_now,
)
from billing.domain.exceptions import (
    InvalidBillIndex,
    InvalidMaintenanceCost,
    InvalidUsageAmount,
    UsageExceeded,
)

REMINDER_SUBJECT = "Your energy payment is overdue"


class Account:
    def __init__(
        self,
        account_id: int,
        name: str,
        email: str,
        address: str,
        province: str,
        category: EnergyCategory,
        allocation: float,
    ):
        if allocation <= 0:
            raise ValueError(f"Allocation must be positive, got {allocation}")

        self.id = account_id
        self.name = name
        self.email = email
        self.address = address
        self.province = province
        self.category = EnergyCategory(category)
        self.allocation = allocation
        self.usage = 0.0
        self.bills: List[Bill] = []
        self.reminder_sent = False
        self.maintenance_log: List[MaintenanceEntry] = []

    def __str__(self):
        return f"Account {self.id} - {self.name} ({self.province})"

    def __repr__(self):
        return f"<Account id={self.id} usage={self.usage}/{self.allocation}>"

    @property
    def remaining(self) -> float:
        return self.allocation - self.usage

    def record_usage(self, amount: float) -> None:
        if not math.isfinite(amount) or amount < 0:
            raise InvalidUsageAmount(self.id, amount)
        if amount > self.remaining:
            raise UsageExceeded(self.id, amount, self.remaining)
        self.usage += amount

    def issue_bill(self, rate: float, now=None) -> Bill:
        """
        Closes the current period: bills ``usage * rate`` and resets usage.

        A zero-usage account still gets a zero-amount bill here; filtering
        idle accounts is the ledger's job.
        """
        bill = Bill(amount=self.usage * rate, issued_at=resolve_now(now))
        self.bills.append(bill)
        self.usage = 0.0
        return bill

    def apply_payment(self, bill_index: int, amount: float) -> bool:
        """
        Settles one bill in full or not at all.

        Returns False and leaves the bill untouched when ``amount`` is short.
        """
        if not 0 <= bill_index < len(self.bills):
            raise InvalidBillIndex(self.id, bill_index, len(self.bills))

        bill = self.bills[bill_index]
        if amount < bill.amount:
            return False

        bill.paid = True
        self.reminder_sent = False
        return True

    def add_maintenance(self, description: str, cost: float, now=None) -> MaintenanceEntry:
        if not math.isfinite(cost) or cost < 0:
            raise InvalidMaintenanceCost(self.id, cost)
        entry = MaintenanceEntry(timestamp=resolve_now(now), description=description, cost=cost)
        self.maintenance_log.append(entry)
        return entry

    def overdue_bills(self, now=None) -> List[Tuple[int, Bill]]:
        now = resolve_now(now)
        return [(index, bill) for index, bill in enumerate(self.bills) if bill.is_overdue(now)]

    def has_overdue_bills(self, now=None) -> bool:
        now = resolve_now(now)
        return any(bill.is_overdue(now) for bill in self.bills)

    def total_owed(self) -> float:
        return sum(bill.amount for bill in self.bills if not bill.paid)

    def generate_reminder(self, now=None) -> Optional[str]:
        """
        Produces reminder text for the current overdue episode, once.

        Further calls return None until a payment clears ``reminder_sent``,
        even when another bill becomes overdue in the meantime.
        """
        now = resolve_now(now)
        if self.reminder_sent or not self.has_overdue_bills(now):
            return None

        self.reminder_sent = True

        lines = [
            f"Hi {self.name},",
            "",
            "Just a reminder that you have unpaid bills that are now overdue:",
            "",
        ]
        for _, bill in self.overdue_bills(now):
            lines.append(
                f"Bill from {bill.issued_at:%Y-%m-%d} - Amount: ${bill.amount:.2f}"
                f" - {bill.days_overdue(now)} days overdue"
            )
        lines += [
            "",
            "Please pay ASAP to avoid service interruption.",
            "",
            "Thanks,",
            "Customer Service Team",
        ]
        return "\n".join(lines)
