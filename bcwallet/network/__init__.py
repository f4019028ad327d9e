"""
Ledger service adapters.

The wallet reaches the remote UTXO index only through LedgerService:
- HttpLedgerClient talks to a node over HTTP
- MemoryLedgerService keeps the index in memory
"""

from bcwallet.network.ledger_client import (
    HttpLedgerClient,
    LedgerService,
    OutputEntry,
    SpendableResponse,
)
from bcwallet.network.memory import MemoryLedgerService

__all__ = [
    "HttpLedgerClient",
    "LedgerService",
    "OutputEntry",
    "SpendableResponse",
    "MemoryLedgerService",
]
