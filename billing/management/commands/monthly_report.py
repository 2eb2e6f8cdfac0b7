"""
Writes the monthly report for a freshly seeded ledger.

What it does:
- Builds a standalone ledger from the configured rates (the process
  ledger served by the API is left untouched) and fills it with sample
  customers and trades from a seeded random generator.
- Optionally runs a billing cycle and a reminder run against it.
- Renders the report snapshot as text and writes it to --output.
"""

import random
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from billing.application.notifications import email_reminder
from billing.application.seeding import populate_ledger
from billing.domain.ledger import Ledger
from billing.domain.reports import ReportBuilder
from billing.rendering import render_report
from billing.store import configured_rates


class Command(BaseCommand):
    help = "Seed a sample ledger and write its monthly report to a text file."

    def add_arguments(self, parser):
        parser.add_argument("--output", default="monthly_report.txt", help="Report file path (default monthly_report.txt)")
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible sample data")
        parser.add_argument("--customers-per-province", type=int, default=100, help="Sample customers per province (default 100)")
        parser.add_argument("--run-billing", action="store_true", help="Run a billing cycle before reporting")
        parser.add_argument("--send-reminders", action="store_true", help="Dispatch overdue reminders before reporting")

    def handle(self, *args, **opts):
        if opts["customers_per_province"] < 0:
            raise CommandError("--customers-per-province must not be negative")

        ledger = Ledger(rates=configured_rates())
        created = populate_ledger(
            ledger,
            random.Random(opts["seed"]),
            customers_per_province=opts["customers_per_province"],
        )
        self.stdout.write(f"Seeded {created} customers.")

        if opts["run_billing"]:
            issued = ledger.run_billing_cycle()
            self.stdout.write(f"Billing completed: {len(issued)} bills issued.")

        if opts["send_reminders"]:
            sent = ledger.dispatch_reminders(notify=email_reminder)
            self.stdout.write(f"Payment reminders sent: {sent}.")

        output = Path(opts["output"])
        try:
            output.write_text(render_report(ReportBuilder(ledger).build()), encoding="utf-8")
        except OSError as exc:
            raise CommandError(f"Couldn't write report file {output}: {exc}")

        self.stdout.write(self.style.SUCCESS(f"Report saved to {output}"))
