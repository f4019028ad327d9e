"""
Wallet configuration.

Replaces process-wide state (the active wallet, the chosen RPC endpoint)
with an explicit object handed to the CLI and the ledger client.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, find_dotenv

DEFAULT_RPC_ENDPOINT = "http://localhost:8080"

ENV_RPC_ENDPOINT = "BCWALLET_RPC_ENDPOINT"
ENV_WALLET_DIR = "BCWALLET_WALLET_DIR"
ENV_REQUEST_TIMEOUT = "BCWALLET_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "BCWALLET_LOG_LEVEL"
ENV_LOG_DIR = "BCWALLET_LOG_DIR"
ENV_LOG_TO_FILE = "BCWALLET_LOG_TO_FILE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class WalletConfig:
    """Wallet-wide configuration parameters"""

    # Ledger service
    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    request_timeout: Optional[float] = None  # None: block until the server answers

    # Paths
    wallet_dir: Path = field(default_factory=lambda: Path("wallets"))
    log_dir: Path = field(default_factory=lambda: Path("logs"))

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    def __post_init__(self):
        self.wallet_dir = Path(self.wallet_dir).expanduser()
        self.log_dir = Path(self.log_dir).expanduser()
        self.rpc_endpoint = self.rpc_endpoint.strip().rstrip("/")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_REQUEST_TIMEOUT} must be a number, got {raw!r}") from None


def _parse_flag(name: str, raw: Optional[str]) -> bool:
    if raw is None or raw.strip() == "":
        return False
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


def load_config(env_file: Optional[str] = None, **overrides) -> WalletConfig:
    """
    Load configuration from a dotenv file and the environment.

    Values already present in the environment win over the dotenv file;
    explicit keyword overrides that are not None win over both. The
    process environment itself is left untouched.

    Args:
        env_file: Optional path to a dotenv file (defaults to the nearest .env)
        **overrides: WalletConfig field values

    Returns:
        WalletConfig instance
    """
    path = env_file or find_dotenv(usecwd=True)
    file_values = dotenv_values(path) if path else {}

    def setting(name: str, default: Optional[str] = None) -> Optional[str]:
        return os.environ.get(name) or file_values.get(name) or default

    values = {
        "rpc_endpoint": setting(ENV_RPC_ENDPOINT, DEFAULT_RPC_ENDPOINT),
        "wallet_dir": Path(setting(ENV_WALLET_DIR, "wallets")),
        "log_dir": Path(setting(ENV_LOG_DIR, "logs")),
        "request_timeout": _parse_timeout(setting(ENV_REQUEST_TIMEOUT)),
        "log_level": setting(ENV_LOG_LEVEL, "INFO").upper(),
        "log_to_file": _parse_flag(ENV_LOG_TO_FILE, setting(ENV_LOG_TO_FILE)),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    return WalletConfig(**values)
