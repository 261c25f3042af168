from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict, Dict, Iterable, List

from loguru import logger

from fintrack.database.transaction_store import TransactionStore
from fintrack.models.analytics import CategoryTotal, SummaryView, TrendPoint
from fintrack.models.transaction import Transaction, as_utc, is_income

DEFAULT_PERIOD = "month"
TREND_GRANULARITY = "monthly"


def summarize(records: Iterable[Transaction]) -> SummaryView:
    """Income vs everything else; an uncategorised record counts as an expense."""
    income = 0.0
    expenses = 0.0
    for t in records:
        if is_income(t.category):
            income += t.amount
        else:
            expenses += t.amount
    return SummaryView(income=income, expenses=expenses, savings=income - expenses)


def _counts_as_spending(t: Transaction) -> bool:
    # Unlike summarize, a record without a category is left out here.
    # An empty-string category is still a category.
    return t.category is not None and not is_income(t.category)


def category_breakdown(records: Iterable[Transaction]) -> List[CategoryTotal]:
    totals: Dict[str, float] = {}
    for t in records:
        if not _counts_as_spending(t):
            continue
        totals[t.category] = totals.get(t.category, 0.0) + abs(t.amount)
    out = [CategoryTotal(category=c, amount=a) for c, a in totals.items()]
    out.sort(key=lambda x: x.amount, reverse=True)
    return out


def _month_key(t: Transaction) -> str:
    return as_utc(t.date).strftime("%Y-%m")


def trends(records: Iterable[Transaction], period: str = DEFAULT_PERIOD) -> List[TrendPoint]:
    """
    Signed amount per calendar month, oldest first.

    ``period`` is accepted but buckets are always monthly, whatever is asked for.
    """
    if period not in {"month", "monthly"}:
        logger.debug("Trend period={} requested; bucketing by month", period)
    buckets: DefaultDict[str, float] = defaultdict(float)
    for t in records:
        buckets[_month_key(t)] += t.amount
    return [TrendPoint(date=k, amount=buckets[k]) for k in sorted(buckets)]


@dataclass
class AnalyticsService:
    """Per-owner views. Each call reads the owner's full record set; store errors propagate."""

    store: TransactionStore

    def summary(self, owner: str) -> Dict[str, Any]:
        records = self.store.find_by_owner(owner)
        return {
            "message": (
                "No transactions found - showing empty summary"
                if not records
                else "Financial summary calculated successfully"
            ),
            "summary": summarize(records),
        }

    def categories(self, owner: str) -> Dict[str, Any]:
        records = self.store.find_by_owner(owner)
        return {
            "message": "Spending by category calculated successfully",
            "categories": category_breakdown(records),
        }

    def trends(self, owner: str, period: str = DEFAULT_PERIOD) -> Dict[str, Any]:
        records = self.store.find_by_owner(owner)
        return {
            "message": f"Trends calculated successfully (grouped by {period})",
            "data": trends(records, period),
            "granularity": TREND_GRANULARITY,
        }
