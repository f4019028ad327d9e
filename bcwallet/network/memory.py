"""
In-memory ledger service.

Keeps a plain UTXO index in a dict and answers the same three queries as
the HTTP node, selecting greedily in insertion order. Submitted transactions
spend their inputs and credit their outputs, so several sends can be chained
without a network. Used for offline runs and tests.
"""

from typing import Dict, List, Optional, Tuple

from bcwallet.core.errors import SubmissionError
from bcwallet.core.state.transaction import Transaction, TxOutput
from bcwallet.core.state.utxo import UTXOReference
from bcwallet.network.ledger_client import LedgerService
from bcwallet.utils.logger import get_logger

logger = get_logger("ledger.memory")


class MemoryLedgerService(LedgerService):
    """
    LedgerService holding its UTXO index in memory.

    Attributes:
        utxos: (txid, index) -> output
        submitted: transactions accepted so far, in order
        reject_with: when set, submit() fails with this message
    """

    def __init__(self):
        self.utxos: Dict[UTXOReference, TxOutput] = {}
        self.submitted: List[Transaction] = []
        self.reject_with: Optional[str] = None

    def fund(self, txid: bytes, index: int, value: int, pub_key_hash: bytes) -> UTXOReference:
        """Register an unspent output."""
        ref = UTXOReference(txid=txid, output_index=index)
        self.utxos[ref] = TxOutput(value=value, pub_key_hash=pub_key_hash)
        return ref

    def _owned(self, pub_key_hash: bytes) -> List[Tuple[UTXOReference, TxOutput]]:
        return [(ref, out) for ref, out in self.utxos.items() if out.is_locked_with_key(pub_key_hash)]

    def get_utxos(self, pub_key_hash: bytes) -> List[TxOutput]:
        return [out for _, out in self._owned(pub_key_hash)]

    def get_spendable(self, pub_key_hash: bytes, amount: int) -> Tuple[int, Dict[str, List[int]]]:
        total = 0
        spendable: Dict[str, List[int]] = {}
        for ref, out in self._owned(pub_key_hash):
            if total >= amount:
                break
            total += out.value
            spendable.setdefault(ref.txid_hex, []).append(ref.output_index)
        return total, spendable

    def submit(self, tx: Transaction) -> None:
        if self.reject_with is not None:
            raise SubmissionError(self.reject_with, status_code=400)

        refs = tx.input_references()
        missing = [ref for ref in refs if ref not in self.utxos]
        if missing:
            raise SubmissionError(f"unknown or spent outputs: {missing}", status_code=400)

        for ref in refs:
            del self.utxos[ref]
        for index, out in enumerate(tx.vout):
            self.utxos[UTXOReference(txid=tx.id, output_index=index)] = out

        self.submitted.append(tx)
        logger.debug(f"Accepted {tx!r}")
