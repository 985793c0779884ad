"""RPC credentials and endpoint resolution."""

from __future__ import annotations

import getpass
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import httpx
from loguru import logger

from bitcoin_donation.utils.exceptions import ConfigError

DEFAULT_RPC_PORT = 18332

NETWORKS = ("main", "test", "signet", "regtest")
NETWORK_PORTS = {8332: "main", 18332: "test", 38332: "signet", 18443: "regtest"}


@dataclass(frozen=True)
class Credentials:
    """Basic-auth pair attached to every request."""
    password: str
    username: str = ""

    def as_auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.username, self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def get_default_conf_path() -> Path:
    """Default bitcoind configuration file."""
    return Path.home() / ".bitcoin" / "bitcoin.conf"


def network_for_endpoint(endpoint: str) -> str | None:
    """bitcoind network served on the endpoint's default RPC port, if any."""
    return NETWORK_PORTS.get(httpx.URL(endpoint).port)


def _conf_network(values: dict[str, str]) -> str:
    chain = values.get("chain")
    if chain in NETWORKS:
        return chain
    for flag, network in (("regtest", "regtest"), ("signet", "signet"), ("testnet", "test")):
        if values.get(flag) == "1":
            return network
    return "main"


def read_bitcoin_conf(path: Path, network: str | None = None) -> dict[str, str]:
    """
    Parse ``key=value`` lines of a bitcoin.conf file for one network.

    Top-level keys apply to every network. Keys under a ``[main]``, ``[test]``,
    ``[signet]`` or ``[regtest]`` header, or written as ``test.key=value``,
    apply only to that network and override the top-level value. When
    ``network`` is not given it is taken from the file's own ``chain=`` or
    ``testnet=1`` style settings. Within one scope the first occurrence of a
    key wins, matching how bitcoind reads its own file.
    """
    if not path.exists():
        raise ConfigError(f"bitcoin.conf not found: {path}", field="conf_file")
    top: dict[str, str] = {}
    sections: dict[str, dict[str, str]] = {}
    scope = top
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            scope = sections.setdefault(line[1:-1].strip(), {})
            continue
        if "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        prefix, dot, name = key.partition(".")
        if dot and prefix in NETWORKS:
            sections.setdefault(prefix, {}).setdefault(name, value)
        else:
            scope.setdefault(key, value)

    selected = network or _conf_network(top)
    values = dict(top)
    values.update(sections.get(selected, {}))
    return values


def resolve_credentials(
    *,
    username: str | None = None,
    password: str | None = None,
    conf_file: Path | None = None,
    network: str | None = None,
    prompt: Callable[[str], str] | None = getpass.getpass,
) -> Credentials:
    """
    Resolve RPC credentials.

    Order: explicit password, then ``rpcpassword`` from ``conf_file`` (or
    ``~/.bitcoin/bitcoin.conf`` when it exists), then an interactive prompt.
    Pass ``prompt=None`` to fail instead of prompting.
    """
    if conf_file is None and get_default_conf_path().exists():
        conf_file = get_default_conf_path()
    conf: dict[str, str] = {}
    if conf_file is not None:
        conf = read_bitcoin_conf(Path(conf_file).expanduser(), network=network)

    user = username if username is not None else conf.get("rpcuser", "")

    if password:
        logger.debug("Using RPC password from configuration")
        return Credentials(password=password, username=user)
    if conf.get("rpcpassword"):
        logger.debug("Using rpcpassword from {}", conf_file)
        return Credentials(password=conf["rpcpassword"], username=user)
    if prompt is None:
        raise ConfigError("No RPC password configured", field="password")

    entered = prompt("RPC password: ")
    if not entered:
        raise ConfigError("RPC password cannot be empty", field="password")
    return Credentials(password=entered, username=user)


def parse_endpoint(url: str) -> str:
    """
    Validate an RPC endpoint and return it normalized.

    A bare ``host`` or ``host:port`` is treated as plain HTTP; the testnet
    RPC port is used when none is given.
    """
    text = (url or "").strip()
    if not text:
        raise ConfigError("RPC URL is empty", field="url")
    try:
        if "://" in text:
            parsed = httpx.URL(text)
        else:
            parsed = httpx.URL(f"http://{text}")
            if parsed.port is None:
                parsed = parsed.copy_with(port=DEFAULT_RPC_PORT)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid RPC URL {url!r}: {exc}", field="url") from exc
    if parsed.scheme not in {"http", "https"}:
        raise ConfigError(f"Unsupported RPC URL scheme: {parsed.scheme}", field="url")
    if not parsed.host:
        raise ConfigError(f"RPC URL has no host: {url}", field="url")
    if parsed.userinfo:
        raise ConfigError("Pass credentials separately, not in the RPC URL", field="url")
    return str(parsed)
