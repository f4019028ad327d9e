"""Transaction state: addresses, UTXO references and transactions"""
from bcwallet.core.state.address import (
    ADDRESS_VERSION,
    address_from_public_key,
    address_to_pub_key_hash,
    decode_address,
    encode_address,
    hash_public_key,
    is_valid_address,
    public_key,
)
from bcwallet.core.state.utxo import (
    Selection,
    UTXOReference,
    parse_spendable,
    require_sufficient,
    select_spendable,
)
from bcwallet.core.state.transaction import Transaction, TxInput, TxOutput

__all__ = [
    "ADDRESS_VERSION",
    "address_from_public_key",
    "address_to_pub_key_hash",
    "decode_address",
    "encode_address",
    "hash_public_key",
    "is_valid_address",
    "public_key",
    "Selection",
    "UTXOReference",
    "parse_spendable",
    "require_sufficient",
    "select_spendable",
    "Transaction",
    "TxInput",
    "TxOutput",
]
