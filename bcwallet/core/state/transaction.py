"""
Transaction - a spend of UTXOs into new outputs.

Conceptual Background:
---------------------
A Transaction consumes inputs (references to unspent outputs) and creates
outputs locked to public key hashes.

Each input carries:
- The UTXO reference (txid + output index)
- The spender's raw public key
- A signature authorizing the spend (empty until signed)

Identifier and Signatures:
-------------------------
Signatures are written after the identifier is assigned and must not
attest to each other, so both are computed over the *trimmed copy*: the
same inputs and outputs with every signature cleared.

    id = SHA256(content_bytes(trimmed_copy(tx)))

Because signatures never enter the hashed content, the identifier is the
same before and after signing.

Wire Format:
-----------
The ledger node speaks JSON with base64 byte fields:

    {"ID": b64, "Vin": [{"Txid": b64, "OutIndex": int, "Signature": b64,
     "PubKey": b64}], "Vout": [{"Value": int, "PubKeyHash": b64}],
     "IsCoinbase": false}
"""

import base64
import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bcwallet.core.state.address import address_to_pub_key_hash
from bcwallet.core.state.utxo import UTXOReference
from bcwallet.crypto import bytes_to_hex, sha256
from bcwallet.utils.validation import validate_amount, validate_bytes


# =============================================================================
# Input
# =============================================================================


@dataclass
class TxInput:
    """
    A transaction input - reference to an output being spent.

    Attributes:
        txid: Transaction that created the output
        out_index: Index in that transaction's outputs
        signature: 64-byte ECDSA signature, empty until signed
        pub_key: 64-byte raw public key of the spender
    """
    txid: bytes
    out_index: int
    signature: bytes = b""
    pub_key: bytes = b""

    @property
    def reference(self) -> UTXOReference:
        """The output this input spends."""
        return UTXOReference(txid=self.txid, output_index=self.out_index)

    @property
    def is_signed(self) -> bool:
        return len(self.signature) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Txid": _b64(self.txid),
            "OutIndex": self.out_index,
            "Signature": _b64(self.signature),
            "PubKey": _b64(self.pub_key),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TxInput":
        return cls(
            txid=_unb64(data.get("Txid")),
            out_index=int(data["OutIndex"]),
            signature=_unb64(data.get("Signature")),
            pub_key=_unb64(data.get("PubKey")),
        )


# =============================================================================
# Output
# =============================================================================


@dataclass
class TxOutput:
    """
    A transaction output - value locked to a public key hash.

    Attributes:
        value: Amount (must be > 0)
        pub_key_hash: 20-byte hash of the recipient's public key
    """
    value: int
    pub_key_hash: bytes

    def __post_init__(self):
        valid, err = validate_amount(self.value, "Output value")
        if not valid:
            raise ValueError(err)
        # length is written as a single byte
        valid, err = validate_bytes(self.pub_key_hash, "PubKeyHash", max_length=255)
        if not valid:
            raise ValueError(err)

    @classmethod
    def to_address(cls, value: int, address: str) -> "TxOutput":
        """
        Create an output paying ``value`` to ``address``.

        Raises:
            InvalidAddress: if the address does not decode
            ValueError: if value is not positive
        """
        return cls(value=value, pub_key_hash=address_to_pub_key_hash(address))

    def is_locked_with_key(self, pub_key_hash: bytes) -> bool:
        """Check whether the output belongs to ``pub_key_hash``."""
        return self.pub_key_hash == pub_key_hash

    def to_bytes(self) -> bytes:
        """Serialize output."""
        return (
            self.value.to_bytes(8, byteorder="big") +
            len(self.pub_key_hash).to_bytes(1, byteorder="big") +
            self.pub_key_hash
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"Value": self.value, "PubKeyHash": _b64(self.pub_key_hash)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TxOutput":
        return cls(value=data["Value"], pub_key_hash=_unb64(data.get("PubKeyHash")))


# =============================================================================
# Transaction
# =============================================================================


@dataclass
class Transaction:
    """
    A spend of existing outputs into new ones.

    Invariants:
    - Wallet-authored transactions are never coinbase
    - Every input is signed before submission
    - id is computed over the signature-free content

    Attributes:
        vin: Ordered inputs
        vout: Ordered outputs
        id: SHA-256 of the trimmed content (empty until computed)
        is_coinbase: Block-reward flag, False for wallet spends
    """
    vin: List[TxInput]
    vout: List[TxOutput]
    id: bytes = field(default=b"")
    is_coinbase: bool = False

    # =========================================================================
    # Canonical Content
    # =========================================================================

    def content_bytes(self) -> bytes:
        """
        Canonical byte representation of the transaction, excluding its id.

        Format:
            coinbase(1) || num_inputs(4) || inputs || num_outputs(4) || outputs
            input  = len(txid)(1) || txid || out_index(4)
                     || len(sig)(1) || sig || len(pub_key)(1) || pub_key
            output = value(8) || len(pkh)(1) || pkh
        """
        parts = [b"\x01" if self.is_coinbase else b"\x00"]

        parts.append(len(self.vin).to_bytes(4, byteorder="big"))
        for inp in self.vin:
            parts.append(len(inp.txid).to_bytes(1, byteorder="big"))
            parts.append(inp.txid)
            parts.append(inp.out_index.to_bytes(4, byteorder="big"))
            parts.append(len(inp.signature).to_bytes(1, byteorder="big"))
            parts.append(inp.signature)
            parts.append(len(inp.pub_key).to_bytes(1, byteorder="big"))
            parts.append(inp.pub_key)

        parts.append(len(self.vout).to_bytes(4, byteorder="big"))
        for out in self.vout:
            parts.append(out.to_bytes())

        return b"".join(parts)

    def trimmed_copy(self, keep_pub_key_for: Optional[int] = None) -> "Transaction":
        """
        Copy with every signature cleared.

        Args:
            keep_pub_key_for: if given, only this input keeps its public
                key; all other inputs have it cleared as well

        Returns:
            A new Transaction; self is left untouched
        """
        inputs = []
        for i, inp in enumerate(self.vin):
            keep = keep_pub_key_for is None or i == keep_pub_key_for
            inputs.append(TxInput(
                txid=inp.txid,
                out_index=inp.out_index,
                signature=b"",
                pub_key=inp.pub_key if keep else b"",
            ))

        return Transaction(
            vin=inputs,
            vout=copy.deepcopy(self.vout),
            id=self.id,
            is_coinbase=self.is_coinbase,
        )

    def compute_id(self) -> bytes:
        """Hash of the signature-free content."""
        return sha256(self.trimmed_copy().content_bytes())

    def finalize_id(self) -> None:
        """Compute and set the transaction id."""
        self.id = self.compute_id()

    # =========================================================================
    # Accounting
    # =========================================================================

    def total_output_value(self) -> int:
        """Sum of all output values."""
        return sum(out.value for out in self.vout)

    def is_fully_signed(self) -> bool:
        return all(inp.is_signed for inp in self.vin)

    def input_references(self) -> List[UTXOReference]:
        return [inp.reference for inp in self.vin]

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ID": _b64(self.id),
            "Vin": [inp.to_dict() for inp in self.vin],
            "Vout": [out.to_dict() for out in self.vout],
            "IsCoinbase": self.is_coinbase,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            vin=[TxInput.from_dict(d) for d in data.get("Vin") or []],
            vout=[TxOutput.from_dict(d) for d in data.get("Vout") or []],
            id=_unb64(data.get("ID")),
            is_coinbase=bool(data.get("IsCoinbase", False)),
        )

    @classmethod
    def from_json(cls, raw: str) -> "Transaction":
        return cls.from_dict(json.loads(raw))

    def __repr__(self) -> str:
        tx_id = bytes_to_hex(self.id)[:10] + "..." if self.id else "unset"
        return f"Transaction(id={tx_id}, inputs={len(self.vin)}, outputs={len(self.vout)})"


# =============================================================================
# Helpers
# =============================================================================


def _b64(data: bytes) -> Optional[str]:
    # Empty byte fields travel as null, like the node's own encoder
    if not data:
        return None
    return base64.b64encode(data).decode("ascii")


def _unb64(value: Optional[str]) -> bytes:
    if not value:
        return b""
    return base64.b64decode(value, validate=True)
