"""
Unit tests for the interactive CLI.

The HTTP client is swapped for an in-memory ledger so whole sessions can be
driven through click's CliRunner.
"""

import pytest
from click.testing import CliRunner

from bcwallet.cli import main as cli_main
from bcwallet.core.state import address_from_public_key, encode_address, hash_public_key
from bcwallet.core.wallet import KeyStore
from bcwallet.crypto import public_key_bytes
from bcwallet.network import MemoryLedgerService


@pytest.fixture
def ledger(monkeypatch):
    ledger = MemoryLedgerService()
    monkeypatch.setattr(cli_main, "HttpLedgerClient", lambda *args, **kwargs: ledger)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    return ledger


@pytest.fixture
def wallet_dir(tmp_path):
    return tmp_path / "wallets"


def run(wallet_dir, lines, *extra_args):
    runner = CliRunner()
    args = ["--rpc-endpoint", "http://node:8080", "--wallet-dir", str(wallet_dir), *extra_args]
    return runner.invoke(cli_main.cli, args, input="\n".join(lines) + "\n")


class TestWalletSetup:

    def test_new_wallet_saved(self, ledger, wallet_dir):
        result = run(wallet_dir, ["new", "alice", "4"])

        assert result.exit_code == 0, result.output
        assert "Welcome to the wallet CLI!" in result.output
        assert "Using RPC endpoint: http://node:8080" in result.output
        assert "New wallet created and saved" in result.output
        assert "Exiting..." in result.output
        assert KeyStore(wallet_dir).list() == ["alice"]

    def test_existing_wallet_loaded(self, ledger, wallet_dir):
        run(wallet_dir, ["new", "alice", "4"])
        result = run(wallet_dir, ["existing", "alice", "4"])

        assert result.exit_code == 0, result.output
        assert "Wallet loaded successfully." in result.output

    def test_missing_wallet_exits(self, ledger, wallet_dir):
        result = run(wallet_dir, ["existing", "nobody"])

        assert result.exit_code == 1
        assert "Error loading wallet" in result.output

    def test_new_wallet_never_overwrites(self, ledger, wallet_dir):
        run(wallet_dir, ["new", "alice", "4"])
        result = run(wallet_dir, ["new", "alice"])

        assert result.exit_code == 1
        assert "Error creating wallet" in result.output
        assert "already exists" in result.output

    def test_log_file_options(self, ledger, wallet_dir, monkeypatch):
        calls = []
        monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: calls.append(kwargs))
        log_dir = wallet_dir.parent / "logs"

        result = run(wallet_dir, ["new", "alice", "4"], "--log-file", "--log-dir", str(log_dir))

        assert result.exit_code == 0, result.output
        assert calls[0]["log_to_file"] is True
        assert calls[0]["log_dir"] == log_dir

    def test_log_file_off_by_default(self, ledger, wallet_dir, monkeypatch):
        monkeypatch.delenv("BCWALLET_LOG_TO_FILE", raising=False)
        calls = []
        monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: calls.append(kwargs))

        run(wallet_dir, ["new", "alice", "4"])

        assert calls[0]["log_to_file"] is False

    def test_endpoint_prompted_when_absent(self, ledger, wallet_dir, monkeypatch):
        monkeypatch.delenv("BCWALLET_RPC_ENDPOINT", raising=False)
        runner = CliRunner()
        result = runner.invoke(
            cli_main.cli,
            ["--wallet-dir", str(wallet_dir), "--env-file", str(wallet_dir.parent / "none.env")],
            input="http://other:9000/\nnew\nalice\n4\n",
        )

        assert result.exit_code == 0, result.output
        assert "Using RPC endpoint: http://other:9000" in result.output


class TestMenu:

    def test_address_and_balance(self, ledger, wallet_dir):
        run(wallet_dir, ["new", "alice", "4"])
        pub = public_key_bytes(KeyStore(wallet_dir).load("alice"))
        ledger.fund(b"\x01" * 32, 0, 200, hash_public_key(pub))

        result = run(wallet_dir, ["existing", "alice", "1", "2", "4"])

        assert result.exit_code == 0, result.output
        assert f"Your address: {address_from_public_key(pub)}" in result.output
        assert "Your current balance: 200" in result.output

    def test_invalid_choice(self, ledger, wallet_dir):
        result = run(wallet_dir, ["new", "alice", "9", "4"])

        assert result.exit_code == 0
        assert "Invalid choice, please try again." in result.output

    def test_send(self, ledger, wallet_dir):
        run(wallet_dir, ["new", "alice", "4"])
        pub = public_key_bytes(KeyStore(wallet_dir).load("alice"))
        ledger.fund(b"\x01" * 32, 0, 200, hash_public_key(pub))
        destination = encode_address(b"\x42" * 20)

        result = run(wallet_dir, ["existing", "alice", "3", destination, "120", "2", "4"])

        assert result.exit_code == 0, result.output
        assert f"Sent 120 to {destination}" in result.output
        assert f"TX ID: {ledger.submitted[0].id.hex()}" in result.output
        assert "Your current balance: 80" in result.output

    def test_send_errors_keep_menu_running(self, ledger, wallet_dir):
        destination = encode_address(b"\x42" * 20)
        result = run(wallet_dir, ["new", "alice", "3", destination, "50", "3", "not-an-address", "5", "4"])

        assert result.exit_code == 0, result.output
        assert "Not enough funds" in result.output
        assert "Exiting..." in result.output
        assert ledger.submitted == []

    def test_oversized_amount_reprompts(self, ledger, wallet_dir):
        destination = encode_address(b"\x42" * 20)
        too_big = str(2**63)
        result = run(wallet_dir, ["new", "alice", "3", destination, too_big, "50", "4"])

        assert result.exit_code == 0, result.output
        assert result.exception is None
        assert too_big in result.output
        assert "Not enough funds" in result.output
        assert "Exiting..." in result.output
