"""
Multisig Wallet.

A shared custodial wallet where co-owners must jointly authorize every
release of held value:

- Owners propose transfers, approve or revoke their approval, and execute
  once two-thirds of the current owners have approved
- The administrator (the initializing address) adds and removes owners
- Anyone may deposit

Every call takes the invoking principal explicitly (``caller``) and runs
under a single re-entrant lock, so each call is atomic with respect to the
others. A rejected call raises a MultiSigError subclass, leaves state
unchanged and emits no event.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .. import wallet_metrics
from ..config import WalletConfig
from ..wallet_exceptions import MultiSigError
from .custody import Custody, Disburser
from .events import EventLog, WalletEvent
from .owner_registry import OwnerRegistry
from .transaction_ledger import TransactionLedger

logger = logging.getLogger(__name__)


class MultiSigWallet:
    """
    Caller-facing authority object for one wallet.

    Args:
        administrator: Address initializing the wallet; becomes an owner
        owners: Co-owners besides the administrator (at least one)
        disburser: Transport used to release value (in-memory by default)
        config: Wallet policy settings
        address: Wallet address (derived from the owner set if omitted)

    Raises:
        EmptyOwnerSet, NullOwner, DuplicateOwner, OwnerLimitExceeded
    """

    def __init__(
        self,
        administrator: str,
        owners: Iterable[str],
        disburser: Optional[Disburser] = None,
        config: Optional[WalletConfig] = None,
        address: str = "",
    ) -> None:
        self.config = config or WalletConfig()
        self._lock = threading.RLock()
        self._event_log = EventLog()

        self.registry = OwnerRegistry(
            administrator,
            owners,
            event_log=self._event_log,
            max_owners=self.config.max_owners,
        )
        self.custody = Custody(event_log=self._event_log, disburser=disburser)
        self.ledger = TransactionLedger(self.registry, self.custody, event_log=self._event_log)

        if not address:
            addr_input = f"{':'.join(self.registry.list_owners())}{time.time()}".encode()
            address = f"0x{hashlib.sha3_256(addr_input).digest()[-20:].hex()}"
        self.address = address.lower()

        wallet_metrics.update_wallet_gauges(self.address, self.custody.balance, self.registry.owner_count)

        logger.info(
            "MultiSigWallet initialized",
            extra={
                "event": "multisig.wallet_created",
                "wallet": self.address,
                "administrator": self.registry.administrator[:10],
                "owner_count": self.registry.owner_count,
                "max_owners": self.config.max_owners,
            },
        )

    # ==================== Owner Registry ====================

    def add_owner(self, caller: str, address: str) -> bool:
        with self._operation("add_owner", caller):
            self.registry.add_owner(caller, address)
        self._refresh_gauges()
        return True

    def remove_owner(self, caller: str, address: str) -> bool:
        with self._operation("remove_owner", caller):
            self.registry.remove_owner(caller, address)
        self._refresh_gauges()
        return True

    def is_owner(self, address: str) -> bool:
        return self.registry.is_owner(address)

    def list_owners(self) -> List[str]:
        with self._lock:
            return self.registry.list_owners()

    @property
    def administrator(self) -> str:
        return self.registry.administrator

    # ==================== Transaction Ledger ====================

    def propose(self, caller: str, destination: str, amount: int) -> int:
        """Create a pending transfer and return its id."""
        with self._operation("propose", caller):
            proposal_id = self.ledger.propose(caller, destination, amount)
        wallet_metrics.record_proposal(self.address)
        return proposal_id

    def approve(self, caller: str, proposal_id: int) -> bool:
        with self._operation("approve", caller):
            self.ledger.approve(caller, proposal_id)
        wallet_metrics.record_vote(self.address, "approve")
        return True

    def revoke(self, caller: str, proposal_id: int) -> bool:
        with self._operation("revoke", caller):
            self.ledger.revoke(caller, proposal_id)
        wallet_metrics.record_vote(self.address, "revoke")
        return True

    def execute(self, caller: str, proposal_id: int) -> bool:
        """Release value for a proposal that has met quorum."""
        with self._operation("execute", caller):
            self.ledger.execute(caller, proposal_id)
            amount = self.ledger.get(proposal_id).amount
        wallet_metrics.record_execution(self.address, amount)
        self._refresh_gauges()
        return True

    def get_proposal(self, proposal_id: int) -> Dict[str, Any]:
        with self._lock:
            return self.ledger.status(proposal_id)

    def get_pending_proposals(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {
                    "id": proposal.id,
                    "destination": proposal.destination,
                    "amount": proposal.amount,
                    "approval_count": proposal.approval_count,
                    "ready": self.ledger.is_quorum_met(proposal.id),
                }
                for proposal in self.ledger.pending()
            ]

    def has_approved(self, proposal_id: int, owner: str) -> bool:
        with self._lock:
            return self.ledger.has_approved(proposal_id, owner)

    @property
    def proposal_count(self) -> int:
        return self.ledger.proposal_count

    # ==================== Custody ====================

    def deposit(self, sender: str, amount: int) -> int:
        """Credit custody; open to any party. Returns the new balance."""
        with self._operation("deposit", sender):
            balance = self.custody.deposit(sender, amount)
        wallet_metrics.record_deposit(self.address, amount)
        self._refresh_gauges()
        return balance

    def get_balance(self) -> int:
        return self.custody.balance

    # ==================== Events & State ====================

    @property
    def events(self) -> List[WalletEvent]:
        return self._event_log.snapshot()

    def events_of_type(self, event_type: str) -> List[WalletEvent]:
        return self._event_log.of_type(event_type)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of wallet state."""
        with self._lock:
            return {
                "address": self.address,
                "administrator": self.registry.administrator,
                "owners": self.registry.list_owners(),
                "next_id": self.ledger.next_id,
                "proposals": {
                    proposal.id: {
                        "destination": proposal.destination,
                        "amount": proposal.amount,
                        "approval_count": proposal.approval_count,
                        "executed": proposal.executed,
                    }
                    for proposal in self.ledger.proposals
                },
                "votes": {
                    proposal.id: dict(proposal.votes) for proposal in self.ledger.proposals
                },
                "balance": self.custody.balance,
            }

    # ==================== Helpers ====================

    @contextmanager
    def _operation(self, operation: str, caller: Optional[str]) -> Iterator[None]:
        """Serialize a call and account for rejections."""
        with self._lock:
            try:
                yield
            except MultiSigError as exc:
                wallet_metrics.record_rejection(self.address, operation, type(exc).__name__)
                logger.warning(
                    "Wallet call rejected",
                    extra={
                        "event": "multisig.rejected",
                        "wallet": self.address,
                        "operation": operation,
                        "caller": str(caller)[:10],
                        "error_type": type(exc).__name__,
                        "error": exc.message,
                        "recoverable": exc.recoverable,
                    },
                )
                raise

    def _refresh_gauges(self) -> None:
        wallet_metrics.update_wallet_gauges(self.address, self.custody.balance, self.registry.owner_count)
