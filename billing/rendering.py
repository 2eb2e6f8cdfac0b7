"""
Plain-text rendering of a MonthlyReport, in the layout of the monthly report
file: header, overall stats, province breakdown, import/export summary, then
per-category import and export subtotals.
"""


def _money(value):
    return f"${value:.2f}"


def _percent(value):
    return f"{value:.1f}%"


def render_report(report):
    overall = report.overall
    trades = report.trades

    lines = [
        f"Energy Provider Monthly Report - {report.period_label}",
        "",
        "Overall Stats:",
        f"Total Customers: {overall.customer_count}",
        f"Total Unpaid: {_money(overall.total_unpaid)}",
        f"Overdue Customers: {overall.overdue_count} ({_percent(overall.overdue_percentage)})",
        f"Overdue Amount: {_money(overall.overdue_amount)}",
        "",
        "Province Breakdown:",
    ]

    for province in report.provinces:
        lines += [
            f"{province.province}:",
            f"  Customers: {province.customer_count}",
            f"  Energy Allocated: {province.total_allocated:.2f} units",
            f"  Energy Used: {province.total_used:.2f} ({_percent(province.usage_percentage)})",
            f"  Unpaid Bills: {_money(province.total_unpaid)}",
            f"  Overdue: {province.overdue_count} ({_percent(province.overdue_percentage)})",
            "",
        ]

    lines += [
        "Import/Export Summary:",
        f"Total Imports: {_money(trades.total_imports)}",
        f"Total Exports: {_money(trades.total_exports)}",
        f"Net Balance: {_money(trades.net_balance)}",
        "",
        "Imports by Type:",
    ]
    lines += [f"  {label}: {_money(value)}" for label, value in trades.imports_by_category.items()]
    lines += ["", "Exports by Type:"]
    lines += [f"  {label}: {_money(value)}" for label, value in trades.exports_by_category.items()]
    lines += ["", "--- End of Report ---", ""]

    return "\n".join(lines)
