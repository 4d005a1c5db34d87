"""Period ledger payload adapters for the client debt REST resource (no I/O)."""

from .period_entries import raw_entries_from_payload

__all__ = [
    "raw_entries_from_payload",
]
