"""Service module exports."""

from . import budgeting, demo_seed, gateway, gemini, ledger, reports

__all__ = [
    "budgeting",
    "demo_seed",
    "gateway",
    "gemini",
    "ledger",
    "reports",
]
