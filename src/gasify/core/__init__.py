"""
Gasify Core Module

Core functionality for the Gasify vault including:
- Token ledger contracts
- Vault state machine and its components
- Configuration, structured logging and metrics
- Typed vault exceptions
"""

__all__ = []
