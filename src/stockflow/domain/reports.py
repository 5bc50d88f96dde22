from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from stockflow.domain.models import Product, Purchase, Sale


@dataclass(frozen=True)
class MonthlyTotals:
    year: int
    month: int
    label: str
    purchases: float
    sales: float
    profit: float
    profit_margin: float
    roi: float
    transaction_count: int


@dataclass(frozen=True)
class PeriodSummary:
    months: int
    purchases: float
    sales: float
    profit: float
    profit_margin: float


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class DashboardSummary:
    total_products: int
    low_stock_count: int
    month_purchases: float
    month_sales: float
    month_profit: float
    recent_purchases: list[Purchase]
    recent_sales: list[Sale]


def safe_pct(numerator: float, denominator: float) -> float:
    return (numerator / denominator) * 100 if denominator > 0 else 0.0


def in_month(value: datetime, month: int, year: int) -> bool:
    return value.month == month and value.year == year


def month_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%b/%y")


def monthly_totals(purchases: Iterable[Purchase], sales: Iterable[Sale], month: int, year: int) -> MonthlyTotals:
    """Totals for one calendar month (``month`` is 1-12)."""
    month_purchases = [p for p in purchases if in_month(p.date, month, year)]
    month_sales = [s for s in sales if in_month(s.date, month, year)]

    purchases_total = sum(p.total_price for p in month_purchases)
    sales_total = sum(s.total_price for s in month_sales)
    profit = sales_total - purchases_total

    return MonthlyTotals(
        year=year,
        month=month,
        label=month_label(year, month),
        purchases=purchases_total,
        sales=sales_total,
        profit=profit,
        profit_margin=safe_pct(profit, sales_total),
        roi=safe_pct(profit, purchases_total),
        transaction_count=len(month_purchases) + len(month_sales),
    )


def last_months(today: date, months: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the ``months`` calendar months ending at ``today``, oldest first."""
    anchor = today.year * 12 + (today.month - 1)
    out = []
    for offset in range(months - 1, -1, -1):
        idx = anchor - offset
        out.append((idx // 12, idx % 12 + 1))
    return out


def monthly_series(purchases: Sequence[Purchase], sales: Sequence[Sale], months: int, today: date) -> list[MonthlyTotals]:
    return [monthly_totals(purchases, sales, m, y) for y, m in last_months(today, months)]


def summarize_period(series: Sequence[MonthlyTotals]) -> PeriodSummary:
    purchases_total = sum(m.purchases for m in series)
    sales_total = sum(m.sales for m in series)
    profit = sales_total - purchases_total
    return PeriodSummary(
        months=len(series),
        purchases=purchases_total,
        sales=sales_total,
        profit=profit,
        profit_margin=safe_pct(profit, sales_total),
    )


def top_products(sales: Iterable[Sale], limit: int = 5) -> list[TopProduct]:
    """Best sellers by revenue.

    The name shown is the snapshot carried by the first sale seen for each
    product. Ties keep first-seen order.
    """
    grouped: dict[str, list] = {}
    for s in sales:
        entry = grouped.setdefault(s.product_id, [s.product_name, 0, 0.0])
        entry[1] += s.quantity
        entry[2] += s.total_price

    ranked = sorted(grouped.items(), key=lambda kv: kv[1][2], reverse=True)
    return [
        TopProduct(product_id=pid, name=name, quantity=int(qty), revenue=float(revenue))
        for pid, (name, qty, revenue) in ranked[:limit]
    ]


def low_stock_products(products: Iterable[Product], threshold: int = 10) -> list[Product]:
    return [p for p in products if p.stock < threshold]


def recent(records: Sequence, limit: int = 5) -> list:
    """Last ``limit`` records in insertion order, newest first."""
    if limit <= 0:
        return []
    return list(reversed(records[-limit:]))


def dashboard(
    products: Sequence[Product],
    purchases: Sequence[Purchase],
    sales: Sequence[Sale],
    today: date,
    *,
    low_stock_threshold: int = 10,
    recent_limit: int = 5,
) -> DashboardSummary:
    current = monthly_totals(purchases, sales, today.month, today.year)
    return DashboardSummary(
        total_products=len(products),
        low_stock_count=len(low_stock_products(products, low_stock_threshold)),
        month_purchases=current.purchases,
        month_sales=current.sales,
        month_profit=current.profit,
        recent_purchases=recent(purchases, recent_limit),
        recent_sales=recent(sales, recent_limit),
    )


def matches_listing(name: str, search: str, when: datetime, month: Optional[int]) -> bool:
    if search and search.strip().lower() not in name.lower():
        return False
    if month is not None and when.month != month:
        return False
    return True
