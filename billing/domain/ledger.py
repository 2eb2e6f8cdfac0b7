"""
Domain Aggregate — Ledger

The ledger owns every customer account, indexed by id and by province, the
per-category rate table and the company's import/export trades. It is the
single entry point for mutating accounts, so that the billing cycle, the
reminder run and the statistics all see one consistent state.

Concurrency:

All operations run under one re-entrant lock. The account map and the
province index are traversed by billing, statistics and reporting and
mutated on insert, so they share a single mutual-exclusion domain.
ReportBuilder holds the same lock across a whole snapshot.
"""

import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from billing.domain.account import Account
from billing.domain.entities import Bill, EnergyCategory, TradeRecord, resolve_now
from billing.domain.exceptions import (
    AccountNotFound,
    DuplicateID,
    InvalidRate,
    InvalidTrade,
)

logger = logging.getLogger(__name__)


def percentage(part, whole) -> float:
    """part / whole * 100, or 0.0 when there is nothing to divide by."""
    if not whole:
        return 0.0
    return part / whole * 100


@dataclass
class ProvinceStats:
    customer_count: int = 0
    total_allocated: float = 0.0
    total_used: float = 0.0
    total_unpaid: float = 0.0
    overdue_count: int = 0

    @property
    def usage_percentage(self) -> float:
        return percentage(self.total_used, self.total_allocated)

    @property
    def overdue_percentage(self) -> float:
        return percentage(self.overdue_count, self.customer_count)


class Ledger:
    def __init__(self, rates):
        self.rates: Dict[EnergyCategory, float] = {}
        for category in EnergyCategory:
            rate = rates.get(category)
            if rate is None or rate <= 0:
                raise InvalidRate(category.label, rate)
            self.rates[category] = rate

        self.lock = threading.RLock()
        self._accounts: Dict[int, Account] = OrderedDict()
        self._province_index: Dict[str, List[int]] = {}
        self._trades: List[TradeRecord] = []

    # Accounts

    def add_account(self, account: Account) -> None:
        with self.lock:
            if account.id in self._accounts:
                raise DuplicateID(account.id)
            self._accounts[account.id] = account
            self._province_index.setdefault(account.province, []).append(account.id)

    def get_account(self, account_id: int) -> Account:
        with self.lock:
            try:
                return self._accounts[account_id]
            except KeyError:
                raise AccountNotFound(account_id)

    def accounts(self) -> List[Account]:
        with self.lock:
            return list(self._accounts.values())

    def provinces(self) -> List[str]:
        with self.lock:
            return sorted(self._province_index)

    def accounts_in_province(self, province: str) -> List[Account]:
        with self.lock:
            return [self._accounts[i] for i in self._province_index.get(province, [])]

    def rate_for(self, category: EnergyCategory) -> float:
        return self.rates[EnergyCategory(category)]

    def record_usage(self, account_id: int, amount: float) -> Account:
        with self.lock:
            account = self.get_account(account_id)
            account.record_usage(amount)
            return account

    def apply_payment(self, account_id: int, bill_index: int, amount: float) -> bool:
        with self.lock:
            return self.get_account(account_id).apply_payment(bill_index, amount)

    def add_maintenance(self, account_id: int, description: str, cost: float, now=None):
        with self.lock:
            return self.get_account(account_id).add_maintenance(description, cost, now=now)

    # Trades

    def record_trade(self, category, quantity: float, price_per_unit: float,
                     is_import: bool, now=None) -> TradeRecord:
        finite = math.isfinite(quantity) and math.isfinite(price_per_unit)
        if not finite or quantity < 0 or price_per_unit < 0:
            raise InvalidTrade(quantity, price_per_unit)

        trade = TradeRecord(
            category=EnergyCategory(category),
            quantity=quantity,
            price_per_unit=price_per_unit,
            is_import=is_import,
            timestamp=resolve_now(now),
        )
        with self.lock:
            self._trades.append(trade)
        return trade

    def trades(self) -> List[TradeRecord]:
        with self.lock:
            return list(self._trades)

    # Billing

    def run_billing_cycle(self, now=None) -> List[Tuple[Account, Bill]]:
        """
        Issues a bill to every account with usage in the current period.

        Idle accounts are skipped rather than billed for zero.
        """
        now = resolve_now(now)
        issued = []
        with self.lock:
            for account in self._accounts.values():
                if account.usage > 0:
                    bill = account.issue_bill(self.rates[account.category], now=now)
                    issued.append((account, bill))
        logger.debug("Billing cycle issued %s bills", len(issued))
        return issued

    def dispatch_reminders(self, now=None,
                           notify: Optional[Callable[[Account, str], None]] = None) -> int:
        """
        Generates reminders for accounts in a fresh overdue episode.

        Each produced reminder is handed to ``notify`` (when given) and
        counted; delivery itself belongs to the caller. When ``notify``
        raises, the account keeps its reminder pending for the next run
        and the remaining accounts are still processed.
        """
        now = resolve_now(now)
        sent = 0
        with self.lock:
            for account in self._accounts.values():
                text = account.generate_reminder(now)
                if text:
                    if notify is not None:
                        try:
                            notify(account, text)
                        except Exception:
                            account.reminder_sent = False
                            logger.exception("Reminder delivery failed: account=%s", account.id)
                            continue
                    sent += 1
        return sent

    # Queries

    def find_accounts(self, query: str, province: str = "") -> List[Account]:
        """
        Accounts in ``province`` (any, when empty) whose id, name or email
        contains ``query``. An empty query matches every account.
        """
        with self.lock:
            return [
                account for account in self._accounts.values()
                if (not province or account.province == province)
                and (query in str(account.id) or query in account.name or query in account.email)
            ]

    def overdue_accounts(self, now=None) -> List[Account]:
        now = resolve_now(now)
        with self.lock:
            return [a for a in self._accounts.values() if a.has_overdue_bills(now)]

    def statistics(self, now=None) -> Dict[str, ProvinceStats]:
        now = resolve_now(now)
        stats = OrderedDict()
        with self.lock:
            for province in sorted(self._province_index):
                entry = ProvinceStats()
                for account_id in self._province_index[province]:
                    account = self._accounts[account_id]
                    entry.customer_count += 1
                    entry.total_allocated += account.allocation
                    entry.total_used += account.usage
                    entry.total_unpaid += account.total_owed()
                    if account.has_overdue_bills(now):
                        entry.overdue_count += 1
                stats[province] = entry
        return stats
