from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from stockflow.domain import reports
from stockflow.domain.errors import ValidationError
from stockflow.domain.models import Product
from stockflow.repositories.entity_store import EntityStore


@dataclass(frozen=True)
class ReportPolicy:
    low_stock_threshold: int = 10
    top_products_limit: int = 5
    default_months: int = 6
    recent_limit: int = 5


class ReportingService:
    def __init__(self, store: EntityStore, policy: ReportPolicy | None = None, today: Callable[[], date] = date.today):
        self.store = store
        self.policy = policy or ReportPolicy()
        self.today = today

    def dashboard(self) -> reports.DashboardSummary:
        return reports.dashboard(
            self.store.products,
            self.store.purchases,
            self.store.sales,
            self.today(),
            low_stock_threshold=self.policy.low_stock_threshold,
            recent_limit=self.policy.recent_limit,
        )

    def balance(self, month: Optional[int] = None, year: Optional[int] = None) -> reports.MonthlyTotals:
        today = self.today()
        month = today.month if month is None else int(month)
        year = today.year if year is None else int(year)
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12.")
        return reports.monthly_totals(self.store.purchases, self.store.sales, month, year)

    def monthly_series(self, months: Optional[int] = None) -> list[reports.MonthlyTotals]:
        months = self.policy.default_months if months is None else int(months)
        if months <= 0:
            raise ValidationError("Months must be >= 1.")
        return reports.monthly_series(self.store.purchases, self.store.sales, months, self.today())

    def period_summary(self, months: Optional[int] = None) -> reports.PeriodSummary:
        return reports.summarize_period(self.monthly_series(months))

    def top_products(self, limit: Optional[int] = None) -> list[reports.TopProduct]:
        limit = self.policy.top_products_limit if limit is None else int(limit)
        return reports.top_products(self.store.sales, limit)

    def low_stock(self) -> list[Product]:
        return reports.low_stock_products(self.store.products, self.policy.low_stock_threshold)

    def low_stock_count(self) -> int:
        return len(self.low_stock())

    def export_report_excel(self, path: str | Path, months: Optional[int] = None) -> Path:
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def pct(cell):
            cell.number_format = "0.0"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, end_row: int, end_col: int):
            ref = f"A{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        series = self.monthly_series(months)
        summary = reports.summarize_period(series)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Summary"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Window"
        ws["B3"] = f"{series[0].label}  ->  {series[-1].label}"

        rows = [
            ("Purchases", summary.purchases, "money"),
            ("Sales", summary.sales, "money"),
            ("Profit", summary.profit, "money"),
            ("Profit margin %", summary.profit_margin, "pct"),
            ("Products", len(self.store.products), "int"),
            ("Low stock products", self.low_stock_count(), "int"),
        ]
        start_row = 5
        for i, (label, val, kind) in enumerate(rows):
            r = start_row + i
            ws[f"A{r}"] = label
            ws[f"B{r}"] = val
            if kind == "money":
                money(ws[f"B{r}"])
            elif kind == "pct":
                pct(ws[f"B{r}"])
        set_widths(ws, {"A": 24, "B": 24})

        # -------- 2) Monthly --------
        ws2 = wb.create_sheet("Monthly")
        ws2.append(["Month", "Purchases", "Sales", "Profit", "Margin %", "ROI %", "Transactions"])
        bold_row(ws2, 1)
        for out_row, m in enumerate(series, start=2):
            ws2.append([m.label, m.purchases, m.sales, m.profit, m.profit_margin, m.roi, m.transaction_count])
            for col in "BCD":
                money(ws2[f"{col}{out_row}"])
            pct(ws2[f"E{out_row}"])
            pct(ws2[f"F{out_row}"])
        set_widths(ws2, {"A": 10, "B": 14, "C": 14, "D": 14, "E": 10, "F": 10, "G": 13})
        add_table(ws2, "MonthlyTotals", 1, ws2.max_row, 7)

        # -------- 3) Top products --------
        ws3 = wb.create_sheet("Top Products")
        ws3.append(["Product", "Qty", "Revenue"])
        bold_row(ws3, 1)
        for out_row, tp in enumerate(self.top_products(), start=2):
            ws3.append([tp.name, tp.quantity, tp.revenue])
            money(ws3[f"C{out_row}"])
        set_widths(ws3, {"A": 34, "B": 8, "C": 16})

        # -------- 4) Purchases / 5) Sales --------
        ws4 = wb.create_sheet("Purchases")
        ws4.append(["Purchase ID", "Date", "Type", "Product", "Qty", "Unit Price", "Total"])
        bold_row(ws4, 1)
        for out_row, p in enumerate(self.store.purchases, start=2):
            ws4.append([p.id, p.date.isoformat(sep=" "), p.type.value, p.product_name, p.quantity, p.unit_price, p.total_price])
            money(ws4[f"F{out_row}"])
            money(ws4[f"G{out_row}"])
        ws4.freeze_panes = "A2"
        set_widths(ws4, {"A": 34, "B": 20, "C": 10, "D": 34, "E": 6, "F": 14, "G": 14})
        if ws4.max_row >= 2:
            add_table(ws4, "PurchasesDetail", 1, ws4.max_row, 7)

        ws5 = wb.create_sheet("Sales")
        ws5.append(["Sale ID", "Date", "Product", "Qty", "Unit Price", "Total"])
        bold_row(ws5, 1)
        for out_row, s in enumerate(self.store.sales, start=2):
            ws5.append([s.id, s.date.isoformat(sep=" "), s.product_name, s.quantity, s.unit_price, s.total_price])
            money(ws5[f"E{out_row}"])
            money(ws5[f"F{out_row}"])
        ws5.freeze_panes = "A2"
        set_widths(ws5, {"A": 34, "B": 20, "C": 34, "D": 6, "E": 14, "F": 14})
        if ws5.max_row >= 2:
            add_table(ws5, "SalesDetail", 1, ws5.max_row, 6)

        target = Path(path)
        wb.save(target)
        return target
