import pytest

from .addresses import ALICE, BOB, CAROL, DAVE


@pytest.fixture
def disburser():
    from multisig_vault.core.contracts import InMemoryDisburser

    return InMemoryDisburser()


@pytest.fixture
def wallet(disburser):
    """3-owner wallet (ALICE administrator) holding 1000."""
    from multisig_vault.core.contracts import MultiSigWallet

    w = MultiSigWallet(ALICE, [BOB, CAROL], disburser=disburser)
    w.deposit(DAVE, 1000)
    return w


@pytest.fixture
def empty_wallet(disburser):
    """3-owner wallet with no funds."""
    from multisig_vault.core.contracts import MultiSigWallet

    return MultiSigWallet(ALICE, [BOB, CAROL], disburser=disburser)
