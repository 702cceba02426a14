"""
Tests for Custody and the in-memory disburser.
"""

import pytest

from multisig_vault.core.contracts.custody import Custody, InMemoryDisburser, validate_amount
from multisig_vault.core.contracts.events import DEPOSITED, EventLog
from multisig_vault.core.wallet_exceptions import DisbursementFailed, InvalidAmount

from .addresses import BOB, DAVE, MALLORY


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def custody(event_log):
    return Custody(event_log=event_log)


class TestValidateAmount:
    @pytest.mark.parametrize("amount", [1, 10**30])
    def test_valid(self, amount):
        validate_amount(amount)

    @pytest.mark.parametrize("amount", [0, -5, 2.0, "3", None, False])
    def test_invalid(self, amount):
        with pytest.raises(InvalidAmount):
            validate_amount(amount)


class TestDeposit:
    def test_deposit_increases_balance(self, custody):
        assert custody.deposit(MALLORY, 100) == 100
        assert custody.deposit(DAVE, 25) == 125
        assert custody.balance == 125

    def test_deposit_emits_event(self, custody, event_log):
        custody.deposit(MALLORY, 100)
        events = event_log.of_type(DEPOSITED)
        assert len(events) == 1
        assert events[0].data == {"from": MALLORY.lower(), "amount": 100}

    def test_zero_deposit_rejected(self, custody, event_log):
        with pytest.raises(InvalidAmount):
            custody.deposit(MALLORY, 0)
        assert custody.balance == 0
        assert len(event_log) == 0


class TestRelease:
    def test_can_cover_is_strict(self, custody):
        custody.deposit(DAVE, 100)
        assert not custody.can_cover(100)
        assert custody.can_cover(99)

    def test_release_pays_destination(self, custody):
        custody.deposit(DAVE, 100)
        custody.release(BOB.lower(), 40)
        assert custody.balance == 60
        assert custody.disburser.received(BOB) == 40

    def test_rejected_release_restores_balance(self, event_log):
        custody = Custody(event_log=event_log, disburser=InMemoryDisburser(rejecting=[BOB]))
        custody.deposit(DAVE, 100)

        with pytest.raises(DisbursementFailed) as excinfo:
            custody.release(BOB.lower(), 40)

        assert custody.balance == 100
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert excinfo.value.details["amount"] == 40

    def test_custom_disburser_exception_is_wrapped(self):
        class ExplodingDisburser:
            def disburse(self, destination, amount):
                raise RuntimeError("transport down")

        custody = Custody(disburser=ExplodingDisburser())
        custody.deposit(DAVE, 10)
        with pytest.raises(DisbursementFailed, match="transport down"):
            custody.release(BOB.lower(), 5)
        assert custody.balance == 10

    def test_interrupted_release_restores_balance(self):
        class InterruptedDisburser:
            def disburse(self, destination, amount):
                raise SystemExit(1)

        custody = Custody(disburser=InterruptedDisburser())
        custody.deposit(DAVE, 10)
        with pytest.raises(SystemExit):
            custody.release(BOB.lower(), 5)
        assert custody.balance == 10
