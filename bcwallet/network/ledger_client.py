"""
Ledger service clients.

The wallet depends on three capabilities of the remote UTXO index:

    GET  /utxos?pubKeyHash=<hex>                     -> [TXOutput, ...]
    GET  /spendable_utxos?pubKeyHash=<hex>&amount=N  -> {"total", "spendable"}
    POST /transaction                                -> 200/201 or error body

Responses are validated with pydantic before they reach the core. Failures
surface as typed errors: NetworkError for transport problems, RemoteError
for bad statuses or payloads, SubmissionError for rejected transactions.

Nothing is retried here; retry policy belongs to the caller.
"""

import base64
import binascii
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from bcwallet.core.errors import NetworkError, RemoteError, SubmissionError
from bcwallet.core.state.transaction import Transaction, TxOutput
from bcwallet.utils.logger import get_logger

logger = get_logger("ledger")

SUBMIT_OK_STATUSES = (200, 201)


# =============================================================================
# Response Schemas
# =============================================================================


class OutputEntry(BaseModel):
    """One unspent output as reported by /utxos."""

    value: int = Field(validation_alias=AliasChoices("Value", "value"))
    pub_key_hash: bytes = Field(
        default=b"",
        validation_alias=AliasChoices("PubKeyHash", "pubKeyHash", "pub_key_hash"),
    )

    @field_validator("pub_key_hash", mode="before")
    @classmethod
    def _decode_b64(cls, value: Any) -> bytes:
        if value is None:
            return b""
        if isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except binascii.Error as exc:
                raise ValueError(f"PubKeyHash is not base64: {exc}") from exc
        return value

    def to_output(self) -> TxOutput:
        return TxOutput(value=self.value, pub_key_hash=self.pub_key_hash)


class SpendableResponse(BaseModel):
    """Body of /spendable_utxos."""

    total: int
    spendable: Dict[str, List[int]] = Field(default_factory=dict)

    @field_validator("spendable", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


# =============================================================================
# Interface
# =============================================================================


class LedgerService(ABC):
    """
    Narrow capability interface onto the ledger's UTXO index.
    """

    @abstractmethod
    def get_utxos(self, pub_key_hash: bytes) -> List[TxOutput]:
        """All unspent outputs owned by ``pub_key_hash``."""

    @abstractmethod
    def get_spendable(self, pub_key_hash: bytes, amount: int) -> Tuple[int, Dict[str, List[int]]]:
        """Outputs covering ``amount``: (total, {txid hex: [index, ...]})."""

    @abstractmethod
    def submit(self, tx: Transaction) -> None:
        """Hand a finished transaction to the ledger."""

    def get_balance(self, pub_key_hash: bytes) -> int:
        """Sum of all unspent outputs; always a fresh read."""
        return sum(out.value for out in self.get_utxos(pub_key_hash))


# =============================================================================
# HTTP Client
# =============================================================================


class HttpLedgerClient(LedgerService):
    """
    LedgerService backed by the node's HTTP API.

    Args:
        base_url: Node RPC endpoint, e.g. http://localhost:8080
        session: Optional requests session (tests pass a stub)
        timeout: Optional per-request timeout in seconds; None blocks
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = self._url(path)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Error contacting ledger at {url}: {exc}") from exc

        logger.debug(f"GET {url} - Status: {response.status_code}")
        if response.status_code != 200:
            raise RemoteError(
                f"Ledger returned HTTP {response.status_code} for {path}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"Ledger returned invalid JSON for {path}: {exc}") from exc

    # =========================================================================
    # Queries
    # =========================================================================

    def get_utxos(self, pub_key_hash: bytes) -> List[TxOutput]:
        data = self._get_json("utxos", {"pubKeyHash": pub_key_hash.hex()})
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteError(f"Expected a list of outputs, got {type(data).__name__}")

        try:
            entries = [OutputEntry.model_validate(item) for item in data]
            return [entry.to_output() for entry in entries]
        except (ValidationError, ValueError) as exc:
            raise RemoteError(f"Malformed output in ledger response: {exc}") from exc

    def get_spendable(self, pub_key_hash: bytes, amount: int) -> Tuple[int, Dict[str, List[int]]]:
        data = self._get_json(
            "spendable_utxos",
            {"pubKeyHash": pub_key_hash.hex(), "amount": str(amount)},
        )
        try:
            parsed = SpendableResponse.model_validate(data)
        except ValidationError as exc:
            raise RemoteError(f"Malformed spendable response: {exc}") from exc
        return parsed.total, parsed.spendable

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self, tx: Transaction) -> None:
        url = self._url("transaction")
        try:
            response = self.session.post(
                url,
                data=tx.to_json(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Error sending transaction to {url}: {exc}") from exc

        logger.debug(f"POST {url} - Status: {response.status_code}")
        if response.status_code not in SUBMIT_OK_STATUSES:
            raise SubmissionError(response.text, status_code=response.status_code)

        logger.info(f"Ledger accepted transaction {tx.id.hex()}")
