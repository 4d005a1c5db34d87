from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from common.billing_engine.models import RawPeriodEntry

logger = logging.getLogger(__name__)


def raw_entries_from_payload(payload: Any) -> list[RawPeriodEntry]:
    """
    Build RawPeriodEntry rows from a client debt response body.

    Expected shape (list, or wrapped in "items"/"data"):
      [
        {"period": "2025-03", "charge": 3000, "paid": 0, "balance": 3000, "status": "due"},
        {"period": "2025-03", "amountDue": 0, "paid": 1000}
      ]

    Notes:
    - `charge` falls back to `amountDue` when absent.
    - Rows that are not objects or carry no valid "YYYY-MM" period are skipped
      and logged; they never reach the reconciler.
    """
    entries: list[RawPeriodEntry] = []
    for index, row in enumerate(_select_rows(payload)):
        if not isinstance(row, dict):
            logger.warning("Skipping ledger row %d: expected an object, got %s", index, type(row).__name__)
            continue
        charge = row.get("charge")
        if charge is None:
            charge = row.get("amountDue")
        try:
            entries.append(
                RawPeriodEntry(
                    period=row.get("period"),
                    charge=charge,
                    paid=row.get("paid"),
                    balance=row.get("balance"),
                    status=row.get("status"),
                )
            )
        except ValidationError:
            logger.warning("Skipping ledger row %d: invalid period %r", index, row.get("period"))
    return entries


def _select_rows(payload: Any) -> Iterable[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "data"):
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    return []
