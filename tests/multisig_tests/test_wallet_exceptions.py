"""
Tests for the wallet error taxonomy.
"""

import pytest

from multisig_vault.core import wallet_exceptions as errors


@pytest.mark.parametrize(
    "error_cls,family",
    [
        (errors.Unauthorized, errors.AuthorizationError),
        (errors.NotAnOwner, errors.AuthorizationError),
        (errors.NullOwner, errors.ValidationError),
        (errors.DuplicateOwner, errors.ValidationError),
        (errors.NullDestination, errors.ValidationError),
        (errors.InvalidAmount, errors.ValidationError),
        (errors.InvalidId, errors.ValidationError),
        (errors.EmptyOwnerSet, errors.ValidationError),
        (errors.OwnerLimitExceeded, errors.ValidationError),
        (errors.AlreadyApproved, errors.StateError),
        (errors.NotApproved, errors.StateError),
        (errors.AlreadyExecuted, errors.StateError),
        (errors.CannotRemoveAdministrator, errors.StateError),
        (errors.QuorumNotMet, errors.ResourceError),
        (errors.InsufficientFunds, errors.ResourceError),
        (errors.DisbursementFailed, errors.ResourceError),
    ],
)
def test_error_families(error_cls, family):
    assert issubclass(error_cls, family)
    assert issubclass(error_cls, errors.MultiSigError)


def test_resource_errors_are_recoverable():
    assert errors.QuorumNotMet("not yet").recoverable is True
    assert errors.InvalidId("nope").recoverable is False


def test_to_dict():
    exc = errors.InvalidAmount("Amount must be positive", details={"amount": 0})
    assert exc.to_dict() == {
        "error_type": "InvalidAmount",
        "message": "Amount must be positive",
        "details": {"amount": 0},
        "recoverable": False,
    }
    assert str(exc) == "Amount must be positive"
