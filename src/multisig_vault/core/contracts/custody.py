"""
Custodied balance for multisig wallets.

Anyone may deposit; value only leaves through ``release``, which the
transaction ledger calls once a proposal has met quorum. The transport that
actually moves value is a pluggable disburser.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Protocol

from ..wallet_exceptions import DisbursementFailed, InvalidAmount
from .events import DEPOSITED, EventLog
from .owner_registry import normalize_address

logger = logging.getLogger(__name__)


class Disburser(Protocol):
    """Moves released value to its destination; raises to reject it."""

    def disburse(self, destination: str, amount: int) -> None:
        ...


class InMemoryDisburser:
    """
    Disburser that credits an in-memory payout map.

    Destinations listed in ``rejecting`` refuse incoming value, which models
    a receiver that cannot accept transfers.
    """

    def __init__(self, rejecting: Optional[Iterable[str]] = None) -> None:
        self.payouts: Dict[str, int] = {}
        self.rejecting = {normalize_address(address) for address in rejecting or []}

    def disburse(self, destination: str, amount: int) -> None:
        destination = normalize_address(destination)
        if destination in self.rejecting:
            raise ValueError(f"{destination} rejected incoming value")
        self.payouts[destination] = self.payouts.get(destination, 0) + amount

    def received(self, destination: str) -> int:
        return self.payouts.get(normalize_address(destination), 0)


def validate_amount(amount: int) -> None:
    """Amounts are positive integers (bools are rejected)."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(
            f"Amount must be an integer, got {type(amount).__name__}",
            details={"amount": repr(amount)},
        )
    if amount <= 0:
        raise InvalidAmount("Amount must be positive", details={"amount": amount})


class Custody:
    """Integer balance held on behalf of the wallet owners."""

    def __init__(
        self,
        event_log: Optional[EventLog] = None,
        disburser: Optional[Disburser] = None,
    ) -> None:
        self.balance = 0
        self.disburser = disburser if disburser is not None else InMemoryDisburser()
        self._events = event_log if event_log is not None else EventLog()

    def deposit(self, sender: str, amount: int) -> int:
        """
        Credit the custodied balance. Open to any party.

        Returns:
            New balance

        Raises:
            InvalidAmount: If amount is not a positive integer
        """
        validate_amount(amount)
        sender_norm = normalize_address(sender)

        self.balance += amount
        self._events.emit(DEPOSITED, **{"from": sender_norm, "amount": amount})

        logger.info(
            "Deposit received",
            extra={
                "event": "multisig.deposit",
                "from": sender_norm[:10],
                "amount": amount,
                "balance": self.balance,
            },
        )
        return self.balance

    def can_cover(self, amount: int) -> bool:
        """Balance must strictly exceed the amount (one-unit margin)."""
        return self.balance > amount

    def release(self, destination: str, amount: int) -> None:
        """
        Debit the balance and hand the value to the disburser.

        The debit is undone if the disburser raises. Interrupts such as
        KeyboardInterrupt propagate unwrapped.

        Raises:
            DisbursementFailed: If the disburser rejects the value
        """
        self.balance -= amount
        try:
            self.disburser.disburse(destination, amount)
        except Exception as exc:
            self.balance += amount
            logger.warning(
                "Disbursement rejected",
                extra={
                    "event": "multisig.disbursement_failed",
                    "to": destination[:10],
                    "amount": amount,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise DisbursementFailed(
                f"Disbursement of {amount} to {destination} failed: {exc}",
                details={"destination": destination, "amount": amount, "cause": str(exc)},
            ) from exc
        except BaseException:
            self.balance += amount
            raise
