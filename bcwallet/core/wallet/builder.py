"""
TransactionBuilder - assemble and sign a spend from a selection.

Steps:
1. One input per selected output reference, carrying the sender's public
   key and no signature; each is queued for signing.
2. One output of ``amount`` to the destination.
3. A change output of ``total - amount`` back to the sender, only when
   there is something left over. No zero-value outputs are created.
4. Transaction id over the signature-free content.
5. Every queued input signed by the SigningEngine.

Any failure aborts the build; no partial transaction is returned.
"""

from typing import List

from bcwallet.core.state.transaction import Transaction, TxInput, TxOutput
from bcwallet.core.state.utxo import Selection, require_sufficient
from bcwallet.core.wallet.signing import SigningEngine
from bcwallet.utils.logger import get_logger
from bcwallet.utils.validation import validate_amount

logger = get_logger("builder")


def build_transaction(
    selection: Selection,
    from_pub_key: bytes,
    from_address: str,
    to_address: str,
    amount: int,
    signer: SigningEngine,
) -> Transaction:
    """
    Build a signed transaction paying ``amount`` to ``to_address``.

    Args:
        selection: Outputs funding the spend
        from_pub_key: Raw public key of the sender
        from_address: Sender address, receives the change
        to_address: Destination address
        amount: Value to send (strictly positive)
        signer: Engine holding the sender's private key

    Returns:
        Signed Transaction with its id set

    Raises:
        ValueError: amount is not a positive integer
        InsufficientFunds: selection.total < amount
        InvalidAddress: destination or change address does not decode
    """
    valid, err = validate_amount(amount)
    if not valid:
        raise ValueError(err)

    require_sufficient(selection, amount)
    if not selection.references:
        raise ValueError("Selection references no outputs to spend")

    # Outputs first: a bad address must fail before anything is signed
    outputs: List[TxOutput] = [TxOutput.to_address(amount, to_address)]
    change = selection.change_for(amount)
    if change > 0:
        outputs.append(TxOutput.to_address(change, from_address))

    inputs: List[TxInput] = []
    to_sign: List[int] = []
    for ref in selection.references:
        inputs.append(TxInput(
            txid=ref.txid,
            out_index=ref.output_index,
            signature=b"",
            pub_key=from_pub_key,
        ))
        to_sign.append(len(inputs) - 1)

    tx = Transaction(vin=inputs, vout=outputs, is_coinbase=False)
    tx.finalize_id()

    signer.sign_inputs(tx, to_sign)

    logger.debug(
        f"Built {tx!r}: {len(inputs)} inputs, amount {amount}, change {change}"
    )
    return tx
