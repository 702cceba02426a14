"""
Domain events emitted by multisig wallet contracts.

Each successful state-changing call appends exactly one event to the
wallet's event log; rejected calls append nothing.

Payload keys follow the event signatures, e.g. ``Deposited`` carries
``from`` and ``amount``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

OWNER_ADDED = "OwnerAdded"
OWNER_REMOVED = "OwnerRemoved"
PROPOSAL_CREATED = "ProposalCreated"
APPROVED = "Approved"
REVOKED = "Revoked"
EXECUTED = "Executed"
DEPOSITED = "Deposited"


@dataclass(frozen=True)
class WalletEvent:
    """Represents a multisig wallet event."""

    event_type: str
    data: Dict[str, Any]
    sequence: int = 0
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "sequence": self.sequence,
            "timestamp": self.timestamp,
            **self.data,
        }


class EventLog:
    """Append-only event log shared by the contracts of one wallet."""

    def __init__(self) -> None:
        self._events: List[WalletEvent] = []

    def emit(self, event_type: str, **data: Any) -> WalletEvent:
        event = WalletEvent(event_type=event_type, data=data, sequence=len(self._events))
        self._events.append(event)
        return event

    def of_type(self, event_type: str) -> List[WalletEvent]:
        return [event for event in self._events if event.event_type == event_type]

    def snapshot(self) -> List[WalletEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))
