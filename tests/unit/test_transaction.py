"""
Unit tests for the transaction model.

Tests cover:
1. Output construction and value rules
2. Trimmed copies
3. Identifier stability
4. JSON wire format
"""

import base64
import json
import secrets

import pytest

from bcwallet.core.errors import InvalidAddress
from bcwallet.core.state import (
    Transaction,
    TxInput,
    TxOutput,
    UTXOReference,
    encode_address,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def tx():
    """Two-input, two-output transaction with placeholder signatures."""
    pub = secrets.token_bytes(64)
    return Transaction(
        vin=[
            TxInput(txid=bytes(32), out_index=0, signature=b"", pub_key=pub),
            TxInput(txid=b"\x11" * 32, out_index=3, signature=b"", pub_key=pub),
        ],
        vout=[
            TxOutput(value=100, pub_key_hash=b"\x01" * 20),
            TxOutput(value=50, pub_key_hash=b"\x02" * 20),
        ],
    )


# =============================================================================
# Output Tests
# =============================================================================


class TestTxOutput:
    """Tests for transaction outputs."""

    def test_to_address_locks_hash(self):
        pkh = secrets.token_bytes(20)
        out = TxOutput.to_address(42, encode_address(pkh))
        assert out.value == 42
        assert out.pub_key_hash == pkh
        assert out.is_locked_with_key(pkh)
        assert not out.is_locked_with_key(bytes(20))

    def test_zero_value_rejected(self):
        with pytest.raises(ValueError):
            TxOutput(value=0, pub_key_hash=bytes(20))

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            TxOutput(value=-5, pub_key_hash=bytes(20))

    def test_bad_address_rejected(self):
        with pytest.raises(InvalidAddress):
            TxOutput.to_address(10, "1111111111111111111114oLvT3")


# =============================================================================
# Trimmed Copy Tests
# =============================================================================


class TestTrimmedCopy:
    """Tests for signature-free copies."""

    def test_signatures_cleared(self, tx):
        tx.vin[0].signature = b"\xaa" * 64
        trimmed = tx.trimmed_copy()
        assert all(inp.signature == b"" for inp in trimmed.vin)
        assert trimmed.vin[0].pub_key == tx.vin[0].pub_key

    def test_original_untouched(self, tx):
        tx.vin[0].signature = b"\xaa" * 64
        trimmed = tx.trimmed_copy()
        trimmed.vout[0].value = 999
        assert tx.vin[0].signature == b"\xaa" * 64
        assert tx.vout[0].value == 100

    def test_keep_pub_key_for_single_input(self, tx):
        trimmed = tx.trimmed_copy(keep_pub_key_for=1)
        assert trimmed.vin[0].pub_key == b""
        assert trimmed.vin[1].pub_key == tx.vin[1].pub_key


# =============================================================================
# Identifier Tests
# =============================================================================


class TestIdentifier:
    """Tests for the transaction id."""

    def test_id_is_32_bytes(self, tx):
        tx.finalize_id()
        assert len(tx.id) == 32

    def test_id_deterministic(self, tx):
        assert tx.compute_id() == tx.compute_id()

    def test_id_ignores_signatures(self, tx):
        before = tx.compute_id()
        tx.vin[0].signature = secrets.token_bytes(64)
        tx.vin[1].signature = secrets.token_bytes(64)
        assert tx.compute_id() == before

    def test_id_ignores_existing_id(self, tx):
        before = tx.compute_id()
        tx.id = b"\xff" * 32
        assert tx.compute_id() == before

    def test_id_changes_with_outputs(self, tx):
        before = tx.compute_id()
        tx.vout[1].value = 51
        assert tx.compute_id() != before

    def test_id_changes_with_input_order(self, tx):
        before = tx.compute_id()
        tx.vin.reverse()
        assert tx.compute_id() != before


# =============================================================================
# Accounting Tests
# =============================================================================


class TestAccounting:

    def test_total_output_value(self, tx):
        assert tx.total_output_value() == 150

    def test_is_fully_signed(self, tx):
        assert not tx.is_fully_signed()
        for inp in tx.vin:
            inp.signature = b"\x01" * 64
        assert tx.is_fully_signed()

    def test_input_references(self, tx):
        assert tx.input_references() == [
            UTXOReference(bytes(32), 0),
            UTXOReference(b"\x11" * 32, 3),
        ]


# =============================================================================
# Wire Format Tests
# =============================================================================


class TestWireFormat:
    """Tests for the JSON encoding sent to the ledger."""

    def test_field_names_and_base64(self, tx):
        tx.finalize_id()
        tx.vin[0].signature = b"\x05" * 64
        data = json.loads(tx.to_json())

        assert set(data) == {"ID", "Vin", "Vout", "IsCoinbase"}
        assert data["IsCoinbase"] is False
        assert base64.b64decode(data["ID"]) == tx.id
        assert data["Vin"][1]["OutIndex"] == 3
        assert base64.b64decode(data["Vin"][0]["Signature"]) == b"\x05" * 64
        assert data["Vin"][1]["Signature"] is None
        assert data["Vout"][0] == {
            "Value": 100,
            "PubKeyHash": base64.b64encode(b"\x01" * 20).decode(),
        }

    def test_roundtrip(self, tx):
        tx.finalize_id()
        tx.vin[0].signature = b"\x05" * 64
        restored = Transaction.from_json(tx.to_json())
        assert restored == tx
