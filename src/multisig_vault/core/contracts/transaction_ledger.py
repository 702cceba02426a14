"""
Transaction ledger for multisig wallets.

An append-only, index-addressed list of value-transfer proposals. Owners
propose, approve, revoke and execute; each proposal tracks its own approval
tally and a per-owner vote map so an owner can only be counted once.

Quorum is a two-thirds super-majority evaluated with integer arithmetic:

    3 * approval_count >= 2 * owner_count

Execution additionally requires custody to hold strictly more than the
amount being released.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..wallet_exceptions import (
    AlreadyApproved,
    AlreadyExecuted,
    InsufficientFunds,
    InvalidId,
    NotApproved,
    NullDestination,
    QuorumNotMet,
)
from .custody import Custody, validate_amount
from .events import APPROVED, EXECUTED, PROPOSAL_CREATED, REVOKED, EventLog
from .owner_registry import OwnerRegistry, is_null_address, normalize_address

logger = logging.getLogger(__name__)


def quorum_reached(approval_count: int, owner_count: int) -> bool:
    """Two-thirds threshold using exact integer comparison."""
    return 3 * approval_count >= 2 * owner_count


@dataclass
class Proposal:
    """A pending or executed value-transfer intent."""

    id: int
    proposer: str
    destination: str
    amount: int
    approval_count: int = 0
    executed: bool = False
    votes: Dict[str, bool] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)
    executed_at: Optional[float] = None
    executor: Optional[str] = None

    def has_approved(self, owner: str) -> bool:
        return self.votes.get(normalize_address(owner), False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "proposer": self.proposer,
            "destination": self.destination,
            "amount": self.amount,
            "approval_count": self.approval_count,
            "executed": self.executed,
            "votes": dict(self.votes),
        }


class TransactionLedger:
    """
    Propose / approve / revoke / execute workflow.

    The ledger reads membership from the owner registry and releases value
    through custody; it never deletes proposals.
    """

    def __init__(
        self,
        registry: OwnerRegistry,
        custody: Custody,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self.registry = registry
        self.custody = custody
        self.proposals: List[Proposal] = []
        self._events = event_log if event_log is not None else EventLog()

    @property
    def next_id(self) -> int:
        return len(self.proposals)

    @property
    def proposal_count(self) -> int:
        return len(self.proposals)

    # ==================== State-Changing Functions ====================

    def propose(self, caller: str, destination: str, amount: int) -> int:
        """
        Create a pending transfer proposal.

        Args:
            caller: Proposing owner (msg.sender)
            destination: Address to receive value
            amount: Positive integer amount

        Returns:
            The new proposal id

        Raises:
            Unauthorized: If caller is not an owner
            NullDestination: If destination is the null address
            InvalidAmount: If amount is not a positive integer
        """
        proposer = self.registry.require_owner(caller)
        if is_null_address(destination):
            raise NullDestination("Destination cannot be the null address")
        validate_amount(amount)

        proposal = Proposal(
            id=self.next_id,
            proposer=proposer,
            destination=normalize_address(destination),
            amount=amount,
        )
        self.proposals.append(proposal)
        self._events.emit(
            PROPOSAL_CREATED,
            id=proposal.id,
            proposer=proposer,
            destination=proposal.destination,
            amount=amount,
        )

        logger.info(
            "Proposal created",
            extra={
                "event": "multisig.proposal_created",
                "proposal_id": proposal.id,
                "proposer": proposer[:10],
                "to": proposal.destination[:10],
                "amount": amount,
            },
        )
        return proposal.id

    def approve(self, caller: str, proposal_id: int) -> bool:
        """
        Record the caller's approval.

        Raises:
            Unauthorized, InvalidId, AlreadyExecuted, AlreadyApproved
        """
        owner = self.registry.require_owner(caller)
        proposal = self._pending(proposal_id)
        if proposal.votes.get(owner, False):
            raise AlreadyApproved(
                f"{owner} already approved proposal {proposal.id}",
                details={"proposal_id": proposal.id, "owner": owner},
            )

        proposal.votes[owner] = True
        proposal.approval_count += 1
        self._events.emit(APPROVED, id=proposal.id, owner=owner)

        logger.info(
            "Proposal approved",
            extra={
                "event": "multisig.approved",
                "proposal_id": proposal.id,
                "owner": owner[:10],
                "approvals": proposal.approval_count,
                "owners": self.registry.owner_count,
            },
        )
        return True

    def revoke(self, caller: str, proposal_id: int) -> bool:
        """
        Withdraw the caller's approval.

        Raises:
            Unauthorized, InvalidId, AlreadyExecuted, NotApproved
        """
        owner = self.registry.require_owner(caller)
        proposal = self._pending(proposal_id)
        if not proposal.votes.get(owner, False):
            raise NotApproved(
                f"{owner} has not approved proposal {proposal.id}",
                details={"proposal_id": proposal.id, "owner": owner},
            )

        proposal.votes[owner] = False
        proposal.approval_count -= 1
        self._events.emit(REVOKED, id=proposal.id, owner=owner)

        logger.info(
            "Approval revoked",
            extra={
                "event": "multisig.revoked",
                "proposal_id": proposal.id,
                "owner": owner[:10],
                "approvals": proposal.approval_count,
            },
        )
        return True

    def execute(self, caller: str, proposal_id: int) -> bool:
        """
        Execute a proposal that has met quorum.

        The proposal is marked executed before value is released, so a
        disburser calling back into the ledger sees it as executed. If the
        disbursement fails the flag is cleared again and the error re-raised.

        Raises:
            Unauthorized, InvalidId, AlreadyExecuted, QuorumNotMet,
            InsufficientFunds, DisbursementFailed
        """
        executor = self.registry.require_owner(caller)
        proposal = self._pending(proposal_id)

        owner_count = self.registry.owner_count
        if not quorum_reached(proposal.approval_count, owner_count):
            raise QuorumNotMet(
                f"Proposal {proposal.id} has {proposal.approval_count} of {owner_count} approvals",
                details={
                    "proposal_id": proposal.id,
                    "approvals": proposal.approval_count,
                    "owners": owner_count,
                },
            )
        if not self.custody.can_cover(proposal.amount):
            raise InsufficientFunds(
                f"Balance {self.custody.balance} must exceed amount {proposal.amount}",
                details={
                    "proposal_id": proposal.id,
                    "balance": self.custody.balance,
                    "amount": proposal.amount,
                },
            )

        proposal.executed = True
        try:
            self.custody.release(proposal.destination, proposal.amount)
        except BaseException:
            proposal.executed = False
            raise

        proposal.executed_at = time.time()
        proposal.executor = executor
        self._events.emit(
            EXECUTED,
            id=proposal.id,
            destination=proposal.destination,
            amount=proposal.amount,
        )

        logger.info(
            "Proposal executed",
            extra={
                "event": "multisig.executed",
                "proposal_id": proposal.id,
                "executor": executor[:10],
                "to": proposal.destination[:10],
                "amount": proposal.amount,
                "balance": self.custody.balance,
            },
        )
        return True

    # ==================== View Functions ====================

    def get(self, proposal_id: int) -> Proposal:
        """Return the proposal, or raise InvalidId."""
        if (
            isinstance(proposal_id, bool)
            or not isinstance(proposal_id, int)
            or not 0 <= proposal_id < self.next_id
        ):
            raise InvalidId(
                f"Proposal {proposal_id!r} does not exist",
                details={"proposal_id": repr(proposal_id), "next_id": self.next_id},
            )
        return self.proposals[proposal_id]

    def is_quorum_met(self, proposal_id: int) -> bool:
        proposal = self.get(proposal_id)
        return quorum_reached(proposal.approval_count, self.registry.owner_count)

    def has_approved(self, proposal_id: int, owner: str) -> bool:
        return self.get(proposal_id).has_approved(owner)

    def status(self, proposal_id: int) -> Dict[str, Any]:
        """Detailed status of a proposal."""
        proposal = self.get(proposal_id)
        return {
            **proposal.to_dict(),
            "status": "executed" if proposal.executed else "pending",
            "approvals": [owner for owner, voted in proposal.votes.items() if voted],
            "owner_count": self.registry.owner_count,
            "ready_to_execute": not proposal.executed
            and quorum_reached(proposal.approval_count, self.registry.owner_count),
            "created_at": proposal.created_at,
            "executed_at": proposal.executed_at,
            "executor": proposal.executor,
        }

    def pending(self) -> List[Proposal]:
        return [proposal for proposal in self.proposals if not proposal.executed]

    # ==================== Helpers ====================

    def _pending(self, proposal_id: int) -> Proposal:
        proposal = self.get(proposal_id)
        if proposal.executed:
            raise AlreadyExecuted(
                f"Proposal {proposal.id} has already been executed",
                details={"proposal_id": proposal.id},
            )
        return proposal
