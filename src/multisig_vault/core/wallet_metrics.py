"""
Multisig wallet instrumentation.

Provides Prometheus metrics that track proposal activity, votes, released
value and rejected calls, with helper functions that are safe to call from
the wallet's call path.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

proposals_created_counter = Counter(
    "multisig_proposals_created_total", "Total number of transfer proposals created", ["wallet"]
)

votes_counter = Counter(
    "multisig_votes_total",
    "Total number of approvals cast or withdrawn",
    ["wallet", "action"],
)

executions_counter = Counter(
    "multisig_executions_total", "Total number of proposals executed", ["wallet"]
)

released_value_counter = Counter(
    "multisig_released_value_total", "Total value released from custody", ["wallet"]
)

deposited_value_counter = Counter(
    "multisig_deposited_value_total", "Total value deposited into custody", ["wallet"]
)

rejections_counter = Counter(
    "multisig_rejections_total",
    "Total number of rejected wallet calls",
    ["wallet", "operation", "error"],
)

custody_balance_gauge = Gauge(
    "multisig_custody_balance", "Current custodied balance of the wallet", ["wallet"]
)

owner_count_gauge = Gauge(
    "multisig_owner_count", "Current number of wallet owners", ["wallet"]
)


def record_proposal(wallet: str) -> None:
    proposals_created_counter.labels(wallet=wallet).inc()


def record_vote(wallet: str, action: str) -> None:
    """Count an ``approve`` or ``revoke``."""
    votes_counter.labels(wallet=wallet, action=action).inc()


def record_execution(wallet: str, amount: int) -> None:
    executions_counter.labels(wallet=wallet).inc()
    if amount > 0:
        released_value_counter.labels(wallet=wallet).inc(amount)


def record_deposit(wallet: str, amount: int) -> None:
    if amount <= 0:
        return
    deposited_value_counter.labels(wallet=wallet).inc(amount)


def record_rejection(wallet: str, operation: str, error: str) -> None:
    rejections_counter.labels(wallet=wallet, operation=operation, error=error).inc()


def update_wallet_gauges(wallet: str, balance: int, owner_count: int) -> None:
    """Refresh the balance and owner gauges after a state change."""
    custody_balance_gauge.labels(wallet=wallet).set(balance)
    owner_count_gauge.labels(wallet=wallet).set(owner_count)
