"""
bcwallet - custodial-key UTXO wallet

Holds a private signing key and produces signed transactions for a remote
ledger service:
- P-256 key lifecycle and PEM key files
- Base58Check addresses
- UTXO selection, transaction assembly and canonical hashing
- Per-input ECDSA signatures over a trimmed transaction copy
"""

__version__ = "0.1.0"
