"""
bcwallet CLI - interactive wallet menu

Asks for the ledger endpoint and the wallet to use, then loops over:
show address, show balance, send, exit.
"""

import logging

import click

from bcwallet.core.config import load_config
from bcwallet.core.errors import WalletError
from bcwallet.core.wallet import KeyStore, Wallet
from bcwallet.network import HttpLedgerClient
from bcwallet.utils.logger import get_logger, setup_logging
from bcwallet.utils.validation import MAX_AMOUNT

logger = get_logger("cli")

MENU = """
Choose an option:
1. Address
2. Balance
3. Send
4. Exit"""


def open_wallet(keystore: KeyStore, ledger, mode: str, name: str) -> Wallet:
    """Create or load the wallet the user picked."""
    if mode == "new":
        return Wallet.create(name, keystore, ledger)
    return Wallet.open(name, keystore, ledger)


# =============================================================================
# Menu Actions
# =============================================================================


def show_address(wallet: Wallet):
    click.echo(f"Your address: {wallet.address}")


def show_balance(wallet: Wallet):
    click.echo(f"Your current balance: {wallet.get_balance()}")


def send_coins(wallet: Wallet):
    to_address = click.prompt("Enter the address to send to").strip()
    amount = click.prompt("Enter the amount to send", type=click.IntRange(min=1, max=MAX_AMOUNT))

    tx = wallet.send(to_address, amount)
    click.echo(f"✓ Sent {amount} to {to_address}")
    click.echo(f"  TX ID: {tx.id.hex()}")


ACTIONS = {
    1: show_address,
    2: show_balance,
    3: send_coins,
}


def run_menu(wallet: Wallet):
    """Loop until the user exits; wallet errors are reported, not fatal."""
    while True:
        click.echo(MENU)
        choice = click.prompt("Enter your choice", type=int)

        if choice == 4:
            click.echo("Exiting...")
            return

        action = ACTIONS.get(choice)
        if action is None:
            click.echo("Invalid choice, please try again.")
            continue

        try:
            action(wallet)
        except WalletError as exc:
            logger.debug(f"{action.__name__} failed: {exc!r}")
            click.echo(f"❌ {exc}")


# =============================================================================
# Entry Point
# =============================================================================


@click.command()
@click.option("--rpc-endpoint", default=None, help="Ledger node RPC endpoint")
@click.option("--wallet-dir", default=None, help="Directory holding wallet key files")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="dotenv file with settings")
@click.option("--log-file", is_flag=True, help="Also write logs to bcwallet.log in the log directory")
@click.option("--log-dir", default=None, help="Directory for the log file")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version="0.1.0")
def cli(rpc_endpoint, wallet_dir, env_file, log_file, log_dir, debug):
    """Custodial-key wallet for a UTXO ledger node"""
    config = load_config(
        env_file,
        wallet_dir=wallet_dir,
        log_dir=log_dir,
        log_to_file=True if log_file else None,
    )

    level = logging.DEBUG if debug else config.log_level
    setup_logging(level=level, log_dir=config.log_dir, log_to_file=config.log_to_file)

    click.echo("Welcome to the wallet CLI!")
    if rpc_endpoint is None:
        rpc_endpoint = click.prompt("Enter the RPC endpoint", default=config.rpc_endpoint)
    rpc_endpoint = rpc_endpoint.strip().rstrip("/")
    click.echo(f"Using RPC endpoint: {rpc_endpoint}")

    ledger = HttpLedgerClient(rpc_endpoint, timeout=config.request_timeout)
    keystore = KeyStore(config.wallet_dir)

    mode = click.prompt(
        "Do you want to create a new wallet or use an existing one?",
        type=click.Choice(["new", "existing"]),
    )
    if mode == "new":
        name = click.prompt("Enter a name for your new wallet").strip()
    else:
        name = click.prompt("Enter the name of your existing wallet").strip()

    try:
        wallet = open_wallet(keystore, ledger, mode, name)
    except (WalletError, ValueError) as exc:
        click.echo(f"❌ Error {'creating' if mode == 'new' else 'loading'} wallet: {exc}")
        raise SystemExit(1)

    if mode == "new":
        click.echo(f"✓ New wallet created and saved to {keystore.path_for(name)}")
    else:
        click.echo("✓ Wallet loaded successfully.")

    run_menu(wallet)


if __name__ == "__main__":
    cli()
