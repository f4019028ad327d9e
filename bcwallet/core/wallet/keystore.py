"""
KeyStore - on-disk persistence of wallet private keys.

Each wallet name maps to one JSON file:

    <wallet_dir>/<name>.json  ->  {"privatekey": "<PEM>"}

The directory is created 0700 and files are written 0600. Creating a new
wallet never overwrites an existing one unless the caller asks for it.
"""

import json
import os
from pathlib import Path
from typing import List, Union

from Crypto.PublicKey import ECC

from bcwallet.core.errors import KeyDecodeError, KeyNotFound, WalletExistsError
from bcwallet.crypto import deserialize_private_key, serialize_private_key
from bcwallet.utils.logger import get_logger
from bcwallet.utils.validation import validate_wallet_name

logger = get_logger("keys")

KEY_FIELD = "privatekey"
DIR_MODE = 0o700
FILE_MODE = 0o600


class KeyStore:
    """
    Maps wallet names to private keys stored under ``wallet_dir``.
    """

    def __init__(self, wallet_dir: Union[str, Path]):
        self.wallet_dir = Path(wallet_dir)

    def path_for(self, name: str) -> Path:
        """File holding the key of wallet ``name``."""
        valid, err = validate_wallet_name(name)
        if not valid:
            raise ValueError(err)
        return self.wallet_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list(self) -> List[str]:
        """Names of all stored wallets, sorted."""
        if not self.wallet_dir.is_dir():
            return []
        return sorted(p.stem for p in self.wallet_dir.glob("*.json"))

    # =========================================================================
    # Save / Load
    # =========================================================================

    def save(self, name: str, private_key: ECC.EccKey, overwrite: bool = False) -> Path:
        """
        Persist a private key under ``name``.

        Raises:
            WalletExistsError: a key already exists and overwrite is False
            OSError: the file could not be written
        """
        path = self.path_for(name)
        pem = serialize_private_key(private_key).decode("ascii")
        payload = json.dumps({KEY_FIELD: pem}, indent=2)

        self.wallet_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)

        flags = os.O_WRONLY | os.O_CREAT | (os.O_TRUNC if overwrite else os.O_EXCL)
        try:
            fd = os.open(path, flags, FILE_MODE)
        except FileExistsError:
            raise WalletExistsError(name) from None

        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.chmod(path, FILE_MODE)

        logger.info(f"Saved wallet '{name}' to {path}")
        return path

    def load(self, name: str) -> ECC.EccKey:
        """
        Restore the private key stored under ``name``.

        Raises:
            KeyNotFound: no file for this name
            KeyDecodeError: file is not valid JSON or holds no valid key
        """
        path = self.path_for(name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise KeyNotFound(name, str(path)) from None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise KeyDecodeError(f"Wallet file {path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get(KEY_FIELD), str):
            raise KeyDecodeError(f"Wallet file {path} has no '{KEY_FIELD}' entry")

        key = deserialize_private_key(data[KEY_FIELD])
        logger.debug(f"Loaded wallet '{name}' from {path}")
        return key
