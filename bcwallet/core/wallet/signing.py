"""
SigningEngine - per-input signatures over the trimmed transaction.

Signing protocol:
1. Take a trimmed copy: same inputs/outputs, every signature cleared.
   For multi-signer transactions the public keys of the inputs not being
   signed are cleared too; a single-signer wallet keeps them all.
2. ECDSA-sign the SHA-256 of the trimmed copy's content.
3. Write the 64-byte signature into the matching input of the real
   transaction.

The transaction id is never touched. With every public key kept, the
signing digest equals the transaction id.

Nonces are random, so re-signing gives different bytes that all verify
against the same digest and public key.
"""

from typing import Iterable, Optional

from Crypto.PublicKey import ECC

from bcwallet.core.state.transaction import Transaction
from bcwallet.crypto import public_key_bytes, sha256, sign, verify
from bcwallet.utils.logger import get_logger

logger = get_logger("signing")


# =============================================================================
# Pure Digest Functions
# =============================================================================


def signing_payload(tx: Transaction, input_index: Optional[int] = None) -> bytes:
    """
    Bytes a signature for ``tx`` attests to.

    Args:
        tx: Transaction to sign (not modified)
        input_index: restrict the public keys to this input (multi-signer);
            None keeps every public key (single signer)
    """
    if input_index is not None and not 0 <= input_index < len(tx.vin):
        raise IndexError(f"Input index {input_index} out of range")
    return tx.trimmed_copy(keep_pub_key_for=input_index).content_bytes()


def signing_digest(tx: Transaction, input_index: Optional[int] = None) -> bytes:
    """SHA-256 of the signing payload."""
    return sha256(signing_payload(tx, input_index))


# =============================================================================
# Engine
# =============================================================================


class SigningEngine:
    """
    Signs transaction inputs with one private key.

    The key stays inside the engine; only the derived public key is exposed.
    """

    def __init__(self, private_key: ECC.EccKey):
        self._private_key = private_key
        self.public_key = public_key_bytes(private_key)

    def sign_inputs(self, tx: Transaction, input_indexes: Iterable[int]) -> None:
        """
        Fill in the signature of each listed input.

        Raises:
            IndexError: an index does not name an input of tx
        """
        indexes = sorted(set(input_indexes))
        for index in indexes:
            if not 0 <= index < len(tx.vin):
                raise IndexError(f"Input index {index} out of range")

        payload = signing_payload(tx)
        for index in indexes:
            tx.vin[index].signature = sign(payload, self._private_key)

        logger.debug(f"Signed {len(indexes)} inputs of {tx!r}")

    def sign_all(self, tx: Transaction) -> None:
        self.sign_inputs(tx, range(len(tx.vin)))

    def verify_input(self, tx: Transaction, index: int) -> bool:
        """Check the signature of input ``index`` against its public key."""
        if not 0 <= index < len(tx.vin):
            return False
        inp = tx.vin[index]
        return verify(signing_payload(tx), inp.signature, inp.pub_key)

    def __repr__(self) -> str:
        return f"SigningEngine(public_key={self.public_key.hex()[:16]}...)"
