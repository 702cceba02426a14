"""
multisig-vault Core Module

Core functionality for the engine including:
- Contract state machines (owner registry, transaction ledger, custody)
- Error taxonomy
- Configuration, logging and metrics
"""

__all__ = []
