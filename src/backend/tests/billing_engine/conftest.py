import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.billing_engine.config import PriceRuleConfig
from common.billing_engine.models import RawPeriodEntry


@pytest.fixture
def reference_period() -> str:
    return "2025-02"


@pytest.fixture
def price_rules() -> PriceRuleConfig:
    return PriceRuleConfig.template()


@pytest.fixture
def make_entry():
    def _make(period: str, charge="0", paid="0", balance=None, status=None) -> RawPeriodEntry:
        return RawPeriodEntry(period=period, charge=charge, paid=paid, balance=balance, status=status)

    return _make
