import pytest

from fintrack.core.analytics import AnalyticsService, category_breakdown, summarize, trends
from fintrack.database.transaction_store import MemoryTransactionStore, TransactionStore
from fintrack.models.transaction import Transaction


def _tx(amount, category=None, date="2024-01-15", owner="user-1"):
    return Transaction(owner=owner, amount=amount, category=category, date=date)


def _example_records():
    return [
        _tx(50, "Food", "2024-01-05"),
        _tx(2000, "Income", "2024-01-10"),
        _tx(30, "Food", "2024-02-01"),
    ]


# ---- Worked example ---------------------------------------------------------------


def test_example_summary():
    assert summarize(_example_records()).model_dump() == {"income": 2000, "expenses": 80, "savings": 1920}


def test_example_categories():
    assert [c.model_dump() for c in category_breakdown(_example_records())] == [{"category": "Food", "amount": 80}]


def test_example_trends():
    assert [p.model_dump() for p in trends(_example_records(), "month")] == [
        {"date": "2024-01", "amount": 2050},
        {"date": "2024-02", "amount": 30},
    ]


# ---- Summary ------------------------------------------------------------------------


def test_summary_of_nothing_is_zero():
    assert summarize([]).model_dump() == {"income": 0, "expenses": 0, "savings": 0}


@pytest.mark.parametrize("label", ["income", "Income", "INCOME", "iNcOmE"])
def test_income_sentinel_is_case_insensitive(label):
    view = summarize([_tx(100, label)])
    assert (view.income, view.expenses) == (100, 0)


@pytest.mark.parametrize("category", [None, "", "Incomes", "Food", "Uncategorized"])
def test_everything_else_is_an_expense(category):
    view = summarize([_tx(42, category)])
    assert (view.income, view.expenses, view.savings) == (0, 42, -42)


def test_summary_is_additive_over_a_partition():
    a = [_tx(10, "Food"), _tx(500, "income"), _tx(-3, None)]
    b = [_tx(7.5, "Transport"), _tx(250, "Income")]
    whole, left, right = summarize(a + b), summarize(a), summarize(b)
    assert whole.income == left.income + right.income
    assert whole.expenses == left.expenses + right.expenses


def test_each_record_counted_exactly_once():
    records = [_tx(1, "Food"), _tx(2, "income"), _tx(4, None), _tx(8, "")]
    view = summarize(records)
    assert view.income + view.expenses == sum(r.amount for r in records)


def test_summary_uses_signed_amounts():
    view = summarize([_tx(100, "Food"), _tx(-30, "Food")])
    assert view.expenses == 70


# ---- Category breakdown -----------------------------------------------------------


def test_breakdown_skips_income_in_any_case_and_missing_categories():
    records = [_tx(10, "income"), _tx(20, "INCOME"), _tx(30, None), _tx(5, "Food")]
    assert [c.category for c in category_breakdown(records)] == ["Food"]


def test_breakdown_keeps_empty_string_category():
    out = category_breakdown([_tx(9, "")])
    assert [(c.category, c.amount) for c in out] == [("", 9)]


def test_breakdown_sums_absolute_values():
    out = category_breakdown([_tx(-40, "Shopping"), _tx(15, "Shopping")])
    assert out[0].amount == 55
    assert all(c.amount >= 0 for c in out)


def test_breakdown_sorted_descending():
    records = [_tx(5, "Food"), _tx(50, "Transport"), _tx(20, "Shopping"), _tx(30, "Food")]
    amounts = [c.amount for c in category_breakdown(records)]
    assert amounts == sorted(amounts, reverse=True)
    assert [c.category for c in category_breakdown(records)] == ["Transport", "Food", "Shopping"]


def test_breakdown_groups_by_exact_label():
    out = category_breakdown([_tx(1, "Food"), _tx(2, "food")])
    assert {c.category for c in out} == {"Food", "food"}


def test_breakdown_of_nothing_is_empty():
    assert category_breakdown([]) == []


# ---- Trends -----------------------------------------------------------------------


@pytest.mark.parametrize("period", ["daily", "weekly", "monthly", "month", "yearly"])
def test_trends_always_bucket_by_month(period):
    records = [_tx(1, "Food", "2024-03-01"), _tx(2, "Food", "2024-03-09"), _tx(4, "Food", "2024-03-31")]
    assert [(p.date, p.amount) for p in trends(records, period)] == [("2024-03", 7)]


def test_trend_buckets_preserve_the_signed_total():
    records = [
        _tx(100, "income", "2023-12-31"),
        _tx(-25, "Food", "2024-01-02"),
        _tx(40, None, "2024-01-20"),
        _tx(-5, "Food", "2024-11-11"),
    ]
    points = trends(records)
    assert sum(p.amount for p in points) == sum(r.amount for r in records)
    assert [p.date for p in points] == ["2023-12", "2024-01", "2024-11"]


def test_trends_bucket_on_utc_month():
    # 23:30 at UTC-5 on Jan 31 is already February in UTC
    out = trends([_tx(10, "Food", "2024-01-31T23:30:00-05:00")])
    assert out[0].date == "2024-02"


def test_trends_of_nothing_is_empty():
    assert trends([]) == []


# ---- Service ------------------------------------------------------------------------


def _service_with(records):
    store = MemoryTransactionStore()
    for r in records:
        store.insert(r)
    return AnalyticsService(store)


def test_service_reads_only_the_callers_records():
    service = _service_with(_example_records() + [_tx(999, "Food", owner="user-2")])
    assert service.summary("user-1")["summary"].expenses == 80
    assert service.categories("user-2")["categories"][0].amount == 999


def test_service_distinguishes_empty_from_computed():
    service = _service_with(_example_records())
    assert service.summary("nobody")["message"] == "No transactions found - showing empty summary"
    assert service.summary("user-1")["message"] == "Financial summary calculated successfully"


def test_service_trends_report_actual_granularity():
    view = _service_with(_example_records()).trends("user-1", "weekly")
    assert view["granularity"] == "monthly"
    assert [p.date for p in view["data"]] == ["2024-01", "2024-02"]


class _BrokenStore(TransactionStore):
    def find_by_owner(self, owner):
        raise RuntimeError("database is down")


@pytest.mark.parametrize("view", ["summary", "categories", "trends"])
def test_service_propagates_store_failures(view):
    service = AnalyticsService(_BrokenStore())
    with pytest.raises(RuntimeError, match="database is down"):
        getattr(service, view)("user-1")
