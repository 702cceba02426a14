"""
multisig-vault - Multi-party Transaction Authorization Engine

A shared custodial ledger where a set of co-owners must jointly approve
the release of held value before any transfer executes.

Main Components:
- OwnerRegistry: owner membership and the administrator identity
- TransactionLedger: propose / approve / revoke / execute workflow
- Custody: custodied balance with guarded release
- MultiSigWallet: the caller-facing authority object
"""

__version__ = "0.1.0"
__author__ = "multisig-vault Development Team"

__all__ = []
