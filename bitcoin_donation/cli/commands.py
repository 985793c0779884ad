"""CLI commands for bitcoin-donation.

Single entry point: resolves config and credentials, runs the donation
workflow or a single RPC command, and maps every error kind to an exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from bitcoin_donation import __logo__, __version__
from bitcoin_donation.cli.shared.logging_utils import configure_logging
from bitcoin_donation.utils.exceptions import (
    BitcoinDonationError,
    RpcAuthenticationError,
    RpcDecodeError,
    RpcError,
    RpcTransportError,
    sanitize_error_message,
)

T = TypeVar("T")

app = typer.Typer(
    name="bitcoin-donation",
    help=f"{__logo__} bitcoin-donation - Generate a Bitcoin address for donations",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

EXIT_CONFIG = 2
EXIT_TRANSPORT = 3
EXIT_AUTH = 4
EXIT_DECODE = 5
EXIT_RPC = 6


def exit_code_for(exc: BaseException) -> int:
    if isinstance(exc, RpcAuthenticationError):
        return EXIT_AUTH
    if isinstance(exc, RpcTransportError):
        return EXIT_TRANSPORT
    if isinstance(exc, RpcDecodeError):
        return EXIT_DECODE
    if isinstance(exc, RpcError):
        return EXIT_RPC
    return EXIT_CONFIG


def format_rpc_exception(exc: Exception) -> tuple[str, str]:
    """Return (rich color, one-line message) for an error."""
    if isinstance(exc, RpcAuthenticationError):
        return "red", f"{exc.code}: credentials rejected; check rpcuser/rpcpassword"
    if isinstance(exc, RpcTransportError):
        status_suffix = f", status={exc.status_code}" if exc.status_code is not None else ""
        return "yellow", f"{exc.code}{status_suffix}: {sanitize_error_message(exc.message)}"
    if isinstance(exc, RpcDecodeError):
        diagnostic = f" ({exc.diagnostic.splitlines()[0]})" if exc.diagnostic else ""
        return "red", f"{exc.code}: {exc.message}{diagnostic}"
    if isinstance(exc, RpcError):
        return "red", f"{exc.code} {exc.rpc_code}: {exc.detail.message}"
    if isinstance(exc, BitcoinDonationError):
        return "red", f"{exc.code}: {sanitize_error_message(exc.message)}"
    return "red", sanitize_error_message(str(exc))


def _run(action: Callable[[], T]) -> T:
    try:
        return action()
    except (BitcoinDonationError, ValueError) as exc:
        level, detail = format_rpc_exception(exc)
        err_console.print(f"[{level}]Error:[/{level}] {detail}")
        raise typer.Exit(exit_code_for(exc)) from exc


def _open_session(
    *,
    url: str | None,
    user: str | None,
    password: str | None,
    conf: Path | None,
    config_path: Path | None,
    timeout: float | None,
    verbose: bool,
):
    from bitcoin_donation.config.access import get_config, get_rpc_config
    from bitcoin_donation.donation import DaemonSession
    from bitcoin_donation.rpc.client import RpcClient
    from bitcoin_donation.rpc.credentials import network_for_endpoint, parse_endpoint, resolve_credentials

    config = get_config(config_path=config_path)
    configure_logging(verbose=verbose, level=config.logging.level, log_file=config.logging.file)
    rpc = get_rpc_config(
        config_path=config_path,
        url=url,
        username=user,
        password=password,
        conf_file=str(conf) if conf else None,
        timeout=timeout,
    )
    endpoint = parse_endpoint(rpc.url)
    credentials = resolve_credentials(
        username=rpc.username,
        password=rpc.password,
        conf_file=rpc.conf_path,
        network=network_for_endpoint(endpoint),
    )
    return DaemonSession(endpoint=endpoint, credentials=credentials, client=RpcClient(timeout=rpc.timeout))


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} bitcoin-donation v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """bitcoin-donation - Generate a Bitcoin address for donations."""
    pass


URL_OPTION = typer.Option(None, "--url", "-u", help="RPC endpoint, e.g. http://127.0.0.1:18332/")
USER_OPTION = typer.Option(None, "--user", help="RPC username (rpcuser)")
PASSWORD_OPTION = typer.Option(
    None, "--password", hidden=True, help="RPC password (or set BITCOIN_DONATION_RPC__PASSWORD)"
)
CONF_OPTION = typer.Option(None, "--conf", "-c", help="bitcoin.conf to read rpcuser/rpcpassword from")
CONFIG_OPTION = typer.Option(None, "--config", help="bitcoin-donation config.json")
TIMEOUT_OPTION = typer.Option(None, "--timeout", help="Connection timeout in seconds")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Print RPC debug logs to stderr")


@app.command()
def address(
    url: str = URL_OPTION,
    user: str = USER_OPTION,
    password: str = PASSWORD_OPTION,
    conf: Path = CONF_OPTION,
    config_path: Path = CONFIG_OPTION,
    timeout: float = TIMEOUT_OPTION,
    legacy: bool = typer.Option(False, "--legacy", help="Skip the witness upgrade"),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Create a new receiving address and print it."""
    from bitcoin_donation.donation import generate_donation_address

    def action() -> str:
        session = _open_session(
            url=url, user=user, password=password, conf=conf,
            config_path=config_path, timeout=timeout, verbose=verbose,
        )
        return generate_donation_address(session, witness=not legacy)

    typer.echo(_run(action))


@app.command()
def validate(
    target: str = typer.Argument(..., help="Address to validate"),
    url: str = URL_OPTION,
    user: str = USER_OPTION,
    password: str = PASSWORD_OPTION,
    conf: Path = CONF_OPTION,
    config_path: Path = CONFIG_OPTION,
    timeout: float = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Validate an address and show what the wallet knows about it."""

    def action():
        session = _open_session(
            url=url, user=user, password=password, conf=conf,
            config_path=config_path, timeout=timeout, verbose=verbose,
        )
        return session.validate_address(target)

    info = _run(action)
    table = Table(title=f"validateaddress {target}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in info.present_fields().items():
        table.add_row(key, str(value).lower() if isinstance(value, bool) else str(value))
    console.print(table)


@app.command("commands")
def list_rpc_commands() -> None:
    """List the RPC commands this client supports."""
    from bitcoin_donation.rpc.commands import list_commands

    table = Table(title="RPC commands")
    table.add_column("Method", style="cyan")
    table.add_column("Result")
    for command in list_commands():
        table.add_row(command.wire_name, command.result_shape.__name__)
    console.print(table)


if __name__ == "__main__":
    app()
