"""
Multisig wallet contracts.

This module provides:
- OwnerRegistry: owner membership and administrator identity
- TransactionLedger: proposal workflow with two-thirds quorum
- Custody: custodied balance and guarded release
- MultiSigWallet: the authority object composing all of the above
"""

from .custody import Custody, Disburser, InMemoryDisburser
from .events import EventLog, WalletEvent
from .multisig_wallet import MultiSigWallet
from .owner_registry import ZERO_ADDRESS, OwnerRegistry
from .transaction_ledger import Proposal, TransactionLedger, quorum_reached

__all__ = [
    "MultiSigWallet",
    "OwnerRegistry",
    "TransactionLedger",
    "Proposal",
    "quorum_reached",
    "Custody",
    "Disburser",
    "InMemoryDisburser",
    "EventLog",
    "WalletEvent",
    "ZERO_ADDRESS",
]
