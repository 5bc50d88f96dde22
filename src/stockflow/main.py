from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from stockflow.application.container import AppContainer, build_container
from stockflow.config import get_app_paths
from stockflow.domain.errors import AppError
from stockflow.logging_config import setup_logging

log = logging.getLogger(__name__)


def _money(value: float) -> str:
    return f"{value:,.2f}"


def render_snapshot(container: AppContainer, months: int) -> str:
    dash = container.reporting.dashboard()
    bal = container.reporting.balance()
    period = container.reporting.period_summary(months)

    lines = [
        f"Products: {dash.total_products}  (low stock: {dash.low_stock_count})",
        f"This month  purchases {_money(dash.month_purchases)}  sales {_money(dash.month_sales)}  profit {_money(dash.month_profit)}",
        f"Balance {bal.label}  margin {bal.profit_margin:.1f}%  ROI {bal.roi:.1f}%  transactions {bal.transaction_count}",
        f"Last {period.months} months  purchases {_money(period.purchases)}  sales {_money(period.sales)}  "
        f"profit {_money(period.profit)}  margin {period.profit_margin:.1f}%",
    ]
    top = container.reporting.top_products()
    if top:
        lines.append("Top products:")
        lines.extend(f"  {i}. {tp.name}  qty {tp.quantity}  revenue {_money(tp.revenue)}" for i, tp in enumerate(top, start=1))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="stockflow", description="Inventory and cash-flow snapshot.")
    parser.add_argument("--db", type=Path, help="Store database (defaults to the per-user app directory).")
    parser.add_argument("--months", type=int, default=6, help="Months covered by the period summary.")
    parser.add_argument("--export", type=Path, help="Write an Excel report to this path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Also log to stderr.")
    args = parser.parse_args(argv)

    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO, console=args.verbose)

    try:
        container = build_container(args.db or paths.db_path)
        print(render_snapshot(container, args.months))

        if args.export:
            target = container.reporting.export_report_excel(args.export, months=args.months)
            log.info("report_exported path=%s", target)
            print(f"Report written to {target}")
    except AppError as e:
        log.error("command_failed error=%s", e)
        print(f"stockflow: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
