"""
Multisig wallet exception hierarchy.

Provides typed exceptions for every way a wallet call can be rejected so
callers can handle precise failure modes. Every rejection is raised before
any state is mutated for that call.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class MultiSigError(Exception):
    """Base exception for all multisig wallet errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the same call may succeed later without
            changing its arguments (e.g. after more approvals or deposits)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for structured logs."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# ==================== Authorization Errors ====================


class AuthorizationError(MultiSigError):
    """Raised when the caller is not allowed to perform an operation."""
    pass


class Unauthorized(AuthorizationError):
    """Raised when a non-owner (or non-administrator) invokes a gated call."""
    pass


class NotAnOwner(AuthorizationError):
    """Raised when removing an address that is not in the owner set."""
    pass


# ==================== Validation Errors ====================


class ValidationError(MultiSigError):
    """Raised when call arguments fail validation rules."""
    pass


class NullOwner(ValidationError):
    """Raised when an owner address is the null address."""
    pass


class DuplicateOwner(ValidationError):
    """Raised when an owner address is already registered or repeated."""
    pass


class NullDestination(ValidationError):
    """Raised when a proposal targets the null address."""
    pass


class InvalidAmount(ValidationError):
    """Raised when an amount is not a positive integer."""
    pass


class InvalidId(ValidationError):
    """Raised when a proposal id does not reference an existing proposal."""
    pass


class EmptyOwnerSet(ValidationError):
    """Raised when a wallet is initialized without any co-owners."""
    pass


class OwnerLimitExceeded(ValidationError):
    """Raised when adding an owner would exceed the configured cap."""
    pass


# ==================== State Errors ====================


class StateError(MultiSigError):
    """Raised when an operation conflicts with the current proposal state."""
    pass


class AlreadyApproved(StateError):
    """Raised when an owner approves a proposal twice."""
    pass


class NotApproved(StateError):
    """Raised when an owner revokes an approval it never cast."""
    pass


class AlreadyExecuted(StateError):
    """Raised when touching a proposal that has already executed."""
    pass


class CannotRemoveAdministrator(StateError):
    """Raised when the administrator is targeted for removal."""
    pass


# ==================== Resource Errors ====================


class ResourceError(MultiSigError):
    """Raised when quorum or funds are not (yet) available."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)


class QuorumNotMet(ResourceError):
    """Raised when a proposal lacks the two-thirds approval threshold."""
    pass


class InsufficientFunds(ResourceError):
    """Raised when custody does not strictly exceed the proposal amount."""
    pass


class DisbursementFailed(ResourceError):
    """Raised when the receiving side rejects released value."""
    pass
