"""
Typed errors raised by the wallet core.

Every failure at a decoding or network boundary surfaces as one of these.
The core never terminates the process; presenting errors is the caller's job.
"""

from typing import Optional


class WalletError(Exception):
    """Base class for all wallet errors."""


# =============================================================================
# Key Storage
# =============================================================================


class KeyDecodeError(WalletError):
    """Persisted key material is malformed or on the wrong curve."""


class KeyNotFound(WalletError):
    """No persisted key exists for the requested wallet name."""

    def __init__(self, name: str, path: Optional[str] = None):
        self.name = name
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"No wallet named '{name}'{location}")


class WalletExistsError(WalletError):
    """Refusing to overwrite key material already stored under a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Wallet '{name}' already exists")


# =============================================================================
# Transactions
# =============================================================================


class InvalidAddress(WalletError):
    """Address failed Base58Check decoding or has an unexpected version."""


class InsufficientFunds(WalletError):
    """Requested amount exceeds the spendable total."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough funds: requested {requested}, spendable {available}"
        )


# =============================================================================
# Ledger Service
# =============================================================================


class NetworkError(WalletError):
    """Transport failure reaching the ledger service."""


class RemoteError(WalletError):
    """Non-success status or malformed response from the ledger service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SubmissionError(RemoteError):
    """The ledger service rejected a submitted transaction."""

    def __init__(self, remote_message: str, status_code: Optional[int] = None):
        self.remote_message = remote_message
        super().__init__(
            f"Transaction rejected (HTTP {status_code}): {remote_message}",
            status_code=status_code,
        )
