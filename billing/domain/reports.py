"""
Domain Service — Monthly Report

ReportBuilder derives a structured snapshot of the ledger: company-wide
totals, a per-province breakdown and the import/export balance. Building a
report never mutates the ledger; the whole snapshot is read under the
ledger lock so its sections agree with each other.

Rendering the snapshot to text or files is left to callers
(see billing.rendering).
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List

from billing.domain.entities import EnergyCategory, resolve_now
from billing.domain.ledger import Ledger, percentage


@dataclass
class OverallStats:
    customer_count: int
    total_unpaid: float
    overdue_count: int
    overdue_percentage: float
    overdue_amount: float


@dataclass
class ProvinceBreakdown:
    province: str
    customer_count: int
    total_allocated: float
    total_used: float
    usage_percentage: float
    total_unpaid: float
    overdue_count: int
    overdue_percentage: float


@dataclass
class TradeSummary:
    total_imports: float = 0.0
    total_exports: float = 0.0
    imports_by_category: Dict[str, float] = field(default_factory=dict)
    exports_by_category: Dict[str, float] = field(default_factory=dict)

    @property
    def net_balance(self) -> float:
        return self.total_imports - self.total_exports


@dataclass
class MonthlyReport:
    period_label: str
    generated_at: datetime
    overall: OverallStats
    provinces: List[ProvinceBreakdown]
    trades: TradeSummary
    rates: Dict[str, float]

    def as_dict(self) -> dict:
        data = asdict(self)
        data["generated_at"] = self.generated_at.isoformat()
        data["trades"]["net_balance"] = self.trades.net_balance
        return data


class ReportBuilder:
    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def build(self, now=None) -> MonthlyReport:
        now = resolve_now(now)
        with self.ledger.lock:
            return MonthlyReport(
                period_label=f"{now:%B %Y}",
                generated_at=now,
                overall=self._overall(now),
                provinces=self._provinces(now),
                trades=self._trades(),
                rates={category.label: rate for category, rate in self.ledger.rates.items()},
            )

    def _overall(self, now) -> OverallStats:
        accounts = self.ledger.accounts()
        overdue = [a for a in accounts if a.has_overdue_bills(now)]
        return OverallStats(
            customer_count=len(accounts),
            total_unpaid=sum(a.total_owed() for a in accounts),
            overdue_count=len(overdue),
            overdue_percentage=percentage(len(overdue), len(accounts)),
            overdue_amount=sum(a.total_owed() for a in overdue),
        )

    def _provinces(self, now) -> List[ProvinceBreakdown]:
        return [
            ProvinceBreakdown(
                province=province,
                customer_count=stats.customer_count,
                total_allocated=stats.total_allocated,
                total_used=stats.total_used,
                usage_percentage=stats.usage_percentage,
                total_unpaid=stats.total_unpaid,
                overdue_count=stats.overdue_count,
                overdue_percentage=stats.overdue_percentage,
            )
            for province, stats in self.ledger.statistics(now).items()
        ]

    def _trades(self) -> TradeSummary:
        summary = TradeSummary()
        imports: Dict[str, float] = {}
        exports: Dict[str, float] = {}

        for trade in self.ledger.trades():
            label = EnergyCategory(trade.category).label
            if trade.is_import:
                summary.total_imports += trade.value
                imports[label] = imports.get(label, 0.0) + trade.value
            else:
                summary.total_exports += trade.value
                exports[label] = exports.get(label, 0.0) + trade.value

        summary.imports_by_category = dict(sorted(imports.items()))
        summary.exports_by_category = dict(sorted(exports.items()))
        return summary
