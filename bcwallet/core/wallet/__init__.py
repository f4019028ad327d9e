"""Key storage, transaction building and signing"""
from bcwallet.core.wallet.keystore import KeyStore
from bcwallet.core.wallet.signing import SigningEngine, signing_digest, signing_payload
from bcwallet.core.wallet.builder import build_transaction
from bcwallet.core.wallet.wallet import Wallet

__all__ = [
    "KeyStore",
    "SigningEngine",
    "signing_digest",
    "signing_payload",
    "build_transaction",
    "Wallet",
]
