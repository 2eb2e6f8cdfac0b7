"""
In-Memory Ledger Store

Holds the single ledger that serves this process. Persistence across
restarts is out of scope, so this module stands where ORM models would
otherwise sit: everything the application layer reads or writes goes
through get_ledger().

Rates come from ``settings.BILLING_RATES`` (category value -> price per
unit), falling back to the domain defaults for categories it leaves out.
"""

import logging
import threading

from django.conf import settings

from billing.domain.entities import DEFAULT_RATES, EnergyCategory
from billing.domain.ledger import Ledger

logger = logging.getLogger(__name__)

_ledger = None
_ledger_lock = threading.Lock()


def configured_rates():
    overrides = getattr(settings, "BILLING_RATES", None) or {}
    rates = dict(DEFAULT_RATES)
    for key, rate in overrides.items():
        rates[EnergyCategory(key)] = float(rate)
    return rates


def get_ledger() -> Ledger:
    global _ledger
    with _ledger_lock:
        if _ledger is None:
            _ledger = Ledger(rates=configured_rates())
            logger.info("Initialised in-memory ledger")
        return _ledger


def reset_ledger(ledger=None) -> Ledger:
    """Replaces the process ledger, with a fresh empty one by default."""
    global _ledger
    with _ledger_lock:
        _ledger = ledger if ledger is not None else Ledger(rates=configured_rates())
        return _ledger
