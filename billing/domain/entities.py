"""
Domain Entities — Billing Records

Value objects shared by accounts and the ledger: the energy categories a
customer can be supplied with, the bills issued against an account, the
maintenance log entries, and the company-level import/export trades.

Every time-sensitive method takes an explicit ``now``; ``None`` falls back to
the wall clock via ``django.utils.timezone.now`` so callers that do not care
about determinism get sensible defaults.
"""

from dataclasses import dataclass
from datetime import datetime

from django.db import models
from django.utils import timezone

# A bill becomes overdue once strictly more than this many whole days have
# passed since it was issued.
OVERDUE_AFTER_DAYS = 30


def resolve_now(now=None) -> datetime:
    return timezone.now() if now is None else now


class EnergyCategory(models.TextChoices):
    CRUDE_OIL = "crude_oil", "Crude Oil"
    SOLAR = "solar", "Solar"
    NUCLEAR = "nuclear", "Nuclear"
    NATURAL_GAS = "natural_gas", "Natural Gas"


DEFAULT_RATES = {
    EnergyCategory.CRUDE_OIL: 1.25,
    EnergyCategory.SOLAR: 0.18,
    EnergyCategory.NUCLEAR: 0.22,
    EnergyCategory.NATURAL_GAS: 0.85,
}


@dataclass
class Bill:
    """
    A billing record for one closed usage period.

    Created only by Account.issue_bill; ``paid`` flips from False to True
    through Account.apply_payment and never goes back.
    """

    amount: float
    issued_at: datetime
    paid: bool = False

    def days_since_issue(self, now=None) -> int:
        return (resolve_now(now) - self.issued_at).days

    def is_overdue(self, now=None) -> bool:
        return self.days_since_issue(now) > OVERDUE_AFTER_DAYS and not self.paid

    def days_overdue(self, now=None) -> int:
        return self.days_since_issue(now) - OVERDUE_AFTER_DAYS


@dataclass(frozen=True)
class MaintenanceEntry:
    timestamp: datetime
    description: str
    cost: float


@dataclass(frozen=True)
class TradeRecord:
    """An energy import or export, independent of customer accounts."""

    category: EnergyCategory
    quantity: float
    price_per_unit: float
    is_import: bool
    timestamp: datetime

    @property
    def value(self) -> float:
        return self.quantity * self.price_per_unit
