"""
Owner registry for multisig wallets.

Holds the authoritative owner set and the administrator identity. The
administrator is fixed at construction, is always an owner, and is the only
principal allowed to add or remove owners.

Owners enumerate in insertion order; removal keeps the relative order of
the remaining owners.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..wallet_exceptions import (
    CannotRemoveAdministrator,
    DuplicateOwner,
    EmptyOwnerSet,
    NotAnOwner,
    NullOwner,
    OwnerLimitExceeded,
    Unauthorized,
    ValidationError,
)
from .events import OWNER_ADDED, OWNER_REMOVED, EventLog

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40


def normalize_address(address: Optional[str]) -> str:
    """Normalize address to lowercase ("" for None)."""
    if address is None:
        return ""
    return str(address).strip().lower()


def is_null_address(address: Optional[str]) -> bool:
    """Return True for None, the empty string and the zero address."""
    normalized = normalize_address(address)
    return not normalized or normalized == ZERO_ADDRESS


class OwnerRegistry:
    """
    Membership set plus administrator.

    Args:
        administrator: Address initializing the wallet (msg.sender)
        initial_owners: Co-owners besides the administrator
        event_log: Shared wallet event log
        max_owners: Upper bound on the owner count (0 = unlimited)

    Raises:
        EmptyOwnerSet: If no co-owners are supplied
        NullOwner: If any address is the null address
        DuplicateOwner: If an address repeats (including the administrator)
    """

    def __init__(
        self,
        administrator: str,
        initial_owners: Iterable[str],
        event_log: Optional[EventLog] = None,
        max_owners: int = 0,
    ) -> None:
        if isinstance(initial_owners, (str, bytes)):
            raise ValidationError(
                "Initial owners must be a collection of addresses, not a single string",
                details={"initial_owners": initial_owners},
            )
        candidates = list(initial_owners or [])
        if not candidates:
            raise EmptyOwnerSet("Owner set cannot be empty")

        # dict as an insertion-ordered set
        owners: Dict[str, None] = {}
        for address in [administrator, *candidates]:
            if is_null_address(address):
                raise NullOwner("Owner cannot be the null address", details={"owner": address})
            normalized = normalize_address(address)
            if normalized in owners:
                raise DuplicateOwner(
                    f"Duplicate owner {normalized}", details={"owner": normalized}
                )
            owners[normalized] = None

        if max_owners and len(owners) > max_owners:
            raise OwnerLimitExceeded(
                f"Owner count {len(owners)} exceeds limit {max_owners}",
                details={"owner_count": len(owners), "max_owners": max_owners},
            )

        self.administrator = normalize_address(administrator)
        self.max_owners = max_owners
        self._owners = owners
        self._events = event_log if event_log is not None else EventLog()

        logger.info(
            "Owner registry initialized",
            extra={
                "event": "multisig.registry_initialized",
                "administrator": self.administrator[:10],
                "owner_count": len(self._owners),
            },
        )

    # ==================== View Functions ====================

    def is_owner(self, address: Optional[str]) -> bool:
        return normalize_address(address) in self._owners

    def is_administrator(self, address: Optional[str]) -> bool:
        return normalize_address(address) == self.administrator

    def list_owners(self) -> List[str]:
        """Owners in insertion order."""
        return list(self._owners)

    @property
    def owner_count(self) -> int:
        return len(self._owners)

    # ==================== Administration ====================

    def add_owner(self, caller: str, address: str) -> bool:
        """
        Add a new owner (administrator only).

        Raises:
            Unauthorized: If caller is not the administrator
            NullOwner: If address is the null address
            DuplicateOwner: If address is already an owner
            OwnerLimitExceeded: If the configured cap is reached
        """
        self._require_administrator(caller)
        if is_null_address(address):
            raise NullOwner("Owner cannot be the null address", details={"owner": address})

        owner = normalize_address(address)
        if owner in self._owners:
            raise DuplicateOwner(f"{owner} is already an owner", details={"owner": owner})
        if self.max_owners and len(self._owners) >= self.max_owners:
            raise OwnerLimitExceeded(
                f"Owner limit {self.max_owners} reached",
                details={"owner_count": len(self._owners), "max_owners": self.max_owners},
            )

        self._owners[owner] = None
        self._events.emit(OWNER_ADDED, owner=owner)

        logger.info(
            "Owner added",
            extra={"event": "multisig.owner_added", "owner": owner[:10], "owner_count": len(self._owners)},
        )
        return True

    def remove_owner(self, caller: str, address: str) -> bool:
        """
        Remove an owner (administrator only).

        Approvals the removed owner already cast keep counting toward quorum.

        Raises:
            Unauthorized: If caller is not the administrator
            NullOwner: If address is the null address
            CannotRemoveAdministrator: If address is the administrator
            NotAnOwner: If address is not an owner
        """
        self._require_administrator(caller)
        if is_null_address(address):
            raise NullOwner("Owner cannot be the null address", details={"owner": address})

        owner = normalize_address(address)
        if owner == self.administrator:
            raise CannotRemoveAdministrator("Administrator cannot be removed")
        if owner not in self._owners:
            raise NotAnOwner(f"{owner} is not an owner", details={"owner": owner})

        del self._owners[owner]
        self._events.emit(OWNER_REMOVED, owner=owner)

        logger.info(
            "Owner removed",
            extra={"event": "multisig.owner_removed", "owner": owner[:10], "owner_count": len(self._owners)},
        )
        return True

    # ==================== Helpers ====================

    def require_owner(self, caller: Optional[str]) -> str:
        """Return the normalized caller, or raise Unauthorized."""
        normalized = normalize_address(caller)
        if normalized not in self._owners:
            raise Unauthorized(f"{normalized or caller!r} is not an owner", details={"caller": normalized})
        return normalized

    def _require_administrator(self, caller: Optional[str]) -> None:
        if not self.is_administrator(caller):
            raise Unauthorized(
                "Caller is not the administrator",
                details={"caller": normalize_address(caller)},
            )

    def to_dict(self) -> Dict:
        return {
            "administrator": self.administrator,
            "owners": self.list_owners(),
            "max_owners": self.max_owners,
        }
