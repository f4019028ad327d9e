"""
UTXO references and spendable-output selection.

Conceptual Background:
---------------------
The wallet keeps no UTXO set of its own. The ledger service indexes unspent
outputs by public key hash and, given a target amount, picks a subset
(greedy accumulation on the service side) covering it:

    {"total": 150, "spendable": {"<txid hex>": [0, 2], ...}}

That answer is untrusted input. Before anything is built from it:
1. every txid must be a 32-byte hex digest and every index a non-negative
   integer
2. no (txid, index) pair may appear twice
3. the reported total must cover the requested amount

Selection order is whatever the service reports; it is not canonical.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List

from bcwallet.core.errors import InsufficientFunds, RemoteError
from bcwallet.utils.logger import get_logger
from bcwallet.utils.validation import (
    TXID_SIZE,
    validate_amount,
    validate_hex_string,
    validate_integer,
    validate_output_index,
)

if TYPE_CHECKING:
    from bcwallet.network.ledger_client import LedgerService

logger = get_logger("selector")


# =============================================================================
# UTXO Reference
# =============================================================================


@dataclass(frozen=True)
class UTXOReference:
    """
    Identifies a spendable output.

    Attributes:
        txid: Transaction that created the output
        output_index: Index in that transaction's outputs
    """
    txid: bytes
    output_index: int

    @property
    def txid_hex(self) -> str:
        return self.txid.hex()

    def __repr__(self) -> str:
        return f"UTXOReference({self.txid_hex[:10]}...:{self.output_index})"


# =============================================================================
# Selection
# =============================================================================


@dataclass
class Selection:
    """
    Outputs picked to fund a spend.

    Attributes:
        total: Aggregate value of the referenced outputs, as reported
        references: Outputs to spend, without duplicates
    """
    total: int
    references: List[UTXOReference] = field(default_factory=list)

    def __post_init__(self):
        valid, err = validate_integer(self.total, "total", 0)
        if not valid:
            raise ValueError(err)
        if len(set(self.references)) != len(self.references):
            raise ValueError("Selection contains a duplicate output reference")

    def change_for(self, amount: int) -> int:
        """Value left over after paying ``amount``."""
        return self.total - amount

    def __len__(self) -> int:
        return len(self.references)


def parse_spendable(total: object, spendable: Dict[str, Iterable[object]]) -> Selection:
    """
    Turn a raw ledger answer into a Selection.

    Raises:
        RemoteError: malformed txids, indices or totals, or duplicate pairs
    """
    valid, err = validate_integer(total, "total", 0)
    if not valid:
        raise RemoteError(f"Malformed spendable total: {err}")

    references: List[UTXOReference] = []
    seen = set()
    for txid_hex, indices in spendable.items():
        valid, err = validate_hex_string(txid_hex, "txid", expected_bytes=TXID_SIZE)
        if not valid:
            raise RemoteError(f"Malformed spendable txid: {err}")
        txid = bytes.fromhex(txid_hex[2:] if txid_hex.startswith("0x") else txid_hex)

        for index in indices:
            valid, err = validate_output_index(index)
            if not valid:
                raise RemoteError(f"Malformed output index for {txid_hex}: {err}")

            ref = UTXOReference(txid=txid, output_index=index)
            if ref in seen:
                raise RemoteError(f"Ledger reported output {txid_hex}:{index} twice")
            seen.add(ref)
            references.append(ref)

    if total > 0 and not references:
        raise RemoteError(f"Ledger reported a total of {total} without any outputs")

    return Selection(total=total, references=references)


def require_sufficient(selection: Selection, amount: int) -> None:
    """
    Check a selection covers ``amount``.

    Raises:
        InsufficientFunds: if selection.total < amount
    """
    if selection.total < amount:
        raise InsufficientFunds(requested=amount, available=selection.total)


def select_spendable(ledger: "LedgerService", pub_key_hash: bytes, amount: int) -> Selection:
    """
    Ask the ledger service for outputs covering ``amount``.

    Args:
        ledger: Ledger service to query
        pub_key_hash: Owner of the outputs
        amount: Target amount (strictly positive)

    Returns:
        Validated Selection with total >= amount

    Raises:
        ValueError: amount is not a positive integer
        InsufficientFunds: the service could not cover the amount
        RemoteError / NetworkError: from the ledger service
    """
    valid, err = validate_amount(amount)
    if not valid:
        raise ValueError(err)

    total, spendable = ledger.get_spendable(pub_key_hash, amount)
    selection = parse_spendable(total, spendable)
    logger.debug(
        f"Ledger selected {len(selection)} outputs totalling {selection.total} "
        f"for amount {amount}"
    )

    require_sufficient(selection, amount)
    return selection
