"""
Wallet - one private key bound to one ledger service.

A Wallet is an explicitly constructed context: it carries its key and the
ledger it talks to, so several wallets (or test doubles) can coexist in one
process. It is meant for one logical actor at a time; after a send the
ledger's view of the spent outputs changes, so each operation must finish
before the next starts.

The private key is held privately and only used to derive the public key
and to sign; it is never logged or returned.
"""

from typing import Optional

from Crypto.PublicKey import ECC

from bcwallet.core.state.address import encode_address, hash_public_key
from bcwallet.core.state.transaction import Transaction
from bcwallet.core.state.utxo import select_spendable
from bcwallet.core.wallet.builder import build_transaction
from bcwallet.core.wallet.keystore import KeyStore
from bcwallet.core.wallet.signing import SigningEngine
from bcwallet.crypto import generate_private_key
from bcwallet.network.ledger_client import LedgerService
from bcwallet.utils.logger import get_logger

logger = get_logger("wallet")


class Wallet:
    """
    Signs and submits spends from a single key.

    Args:
        private_key: P-256 private key owned by this wallet
        ledger: Ledger service used for queries and submission
        name: Optional wallet name (for display only)
    """

    def __init__(self, private_key: ECC.EccKey, ledger: LedgerService, name: Optional[str] = None):
        self._signer = SigningEngine(private_key)
        self.ledger = ledger
        self.name = name

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def create(cls, name: str, keystore: KeyStore, ledger: LedgerService) -> "Wallet":
        """
        Generate a fresh key and persist it under ``name``.

        Raises:
            WalletExistsError: a wallet with this name already exists
        """
        private_key = generate_private_key()
        keystore.save(name, private_key)
        wallet = cls(private_key, ledger, name=name)
        logger.info(f"Created wallet '{name}' with address {wallet.address}")
        return wallet

    @classmethod
    def open(cls, name: str, keystore: KeyStore, ledger: LedgerService) -> "Wallet":
        """
        Load the key stored under ``name``.

        Raises:
            KeyNotFound: no wallet with this name
            KeyDecodeError: the stored key is unreadable
        """
        return cls(keystore.load(name), ledger, name=name)

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def public_key(self) -> bytes:
        return self._signer.public_key

    @property
    def public_key_hash(self) -> bytes:
        return hash_public_key(self.public_key)

    @property
    def address(self) -> str:
        return encode_address(self.public_key_hash)

    # =========================================================================
    # Ledger Operations
    # =========================================================================

    def get_balance(self) -> int:
        """Current balance as reported by the ledger (no caching)."""
        return self.ledger.get_balance(self.public_key_hash)

    def create_transaction(self, to_address: str, amount: int) -> Transaction:
        """
        Select outputs and build a signed transaction; nothing is submitted.

        Raises:
            InsufficientFunds, InvalidAddress, NetworkError, RemoteError
        """
        selection = select_spendable(self.ledger, self.public_key_hash, amount)
        return build_transaction(
            selection=selection,
            from_pub_key=self.public_key,
            from_address=self.address,
            to_address=to_address,
            amount=amount,
            signer=self._signer,
        )

    def send(self, to_address: str, amount: int) -> Transaction:
        """
        Build, sign and submit a payment.

        Returns:
            The submitted transaction

        Raises:
            InsufficientFunds, InvalidAddress, NetworkError, RemoteError,
            SubmissionError
        """
        tx = self.create_transaction(to_address, amount)
        self.ledger.submit(tx)
        logger.info(f"Sent {amount} to {to_address} in transaction {tx.id.hex()}")
        return tx

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"Wallet({label}address={self.address})"

