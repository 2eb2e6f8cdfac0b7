"""
Application Use Cases — Billing Ledger

Each function here is one externally triggered operation on the process
ledger: opening accounts, recording usage and payments, running the billing
cycle, dispatching reminders and recording trades.

Core guarantees provided:

- Atomicity: every operation runs under the ledger lock and either applies
  completely or raises a domain exception with nothing changed.
- Explicit domain signaling: business rule violations surface as
  billing.domain.exceptions, which callers map to their own error channel.
- Traceability: rejected operations are logged at WARNING, state changes
  at INFO.

Retrying is the caller's decision; nothing here retries.
"""

import logging

from billing.application.notifications import email_reminder
from billing.domain.account import Account
from billing.domain.exceptions import (
    DuplicateID,
    InvalidBillIndex,
    InvalidMaintenanceCost,
    InvalidUsageAmount,
    UsageExceeded,
)
from billing.domain.reports import ReportBuilder
from billing.store import get_ledger

logger = logging.getLogger(__name__)


def open_account(account_id, name, email, address, province, category, allocation):
    account = Account(
        account_id=account_id,
        name=name,
        email=email,
        address=address,
        province=province,
        category=category,
        allocation=allocation,
    )
    try:
        get_ledger().add_account(account)
    except DuplicateID:
        logger.warning("Duplicate account id rejected: account=%s", account_id)
        raise

    logger.info("Account opened: account=%s province=%s", account_id, province)
    return account


def record_usage(account_id, amount):
    """
    Adds usage to an account's current period.

    Guarantees:
    - The account never ends up above its allocation.
    - A rejected request leaves usage exactly as it was.
    """
    ledger = get_ledger()
    try:
        account = ledger.record_usage(account_id, amount)
    except (UsageExceeded, InvalidUsageAmount) as exc:
        logger.warning("Usage rejected: %s", exc)
        raise

    logger.info("Usage recorded: account=%s amount=%s usage=%s", account_id, amount, account.usage)
    return {
        "account_id": account.id,
        "amount_recorded": amount,
        "usage": account.usage,
        "remaining": account.remaining,
    }


def apply_payment(account_id, bill_index, amount):
    ledger = get_ledger()
    with ledger.lock:
        try:
            paid = ledger.apply_payment(account_id, bill_index, amount)
        except InvalidBillIndex as exc:
            logger.warning("Payment rejected: %s", exc)
            raise
        account = ledger.get_account(account_id)
        total_owed = account.total_owed()

    if paid:
        logger.info("Bill settled: account=%s bill=%s amount=%s", account_id, bill_index, amount)
    else:
        logger.warning(
            "Partial payment refused: account=%s bill=%s offered=%s",
            account_id, bill_index, amount,
        )

    return {
        "account_id": account_id,
        "bill_index": bill_index,
        "paid": paid,
        "total_owed": total_owed,
    }


def add_maintenance(account_id, description, cost, now=None):
    try:
        entry = get_ledger().add_maintenance(account_id, description, cost, now=now)
    except InvalidMaintenanceCost as exc:
        logger.warning("Maintenance entry rejected: %s", exc)
        raise

    logger.info("Maintenance logged: account=%s cost=%s", account_id, cost)
    return entry


def run_billing_cycle(now=None):
    issued = get_ledger().run_billing_cycle(now=now)
    total = sum(bill.amount for _, bill in issued)
    logger.info("Billing cycle complete: bills=%s total=%.2f", len(issued), total)
    return {
        "bills_issued": len(issued),
        "total_billed": total,
    }


def dispatch_reminders(now=None, notify=email_reminder):
    sent = get_ledger().dispatch_reminders(now=now, notify=notify)
    logger.info("Reminder run complete: sent=%s", sent)
    return {"reminders_sent": sent}


def record_trade(category, quantity, price_per_unit, is_import, now=None):
    trade = get_ledger().record_trade(category, quantity, price_per_unit, is_import, now=now)
    logger.info(
        "Trade recorded: %s %s x %s (%s)",
        "import" if is_import else "export", quantity, price_per_unit, trade.category.label,
    )
    return trade


def build_monthly_report(now=None):
    return ReportBuilder(get_ledger()).build(now=now)
