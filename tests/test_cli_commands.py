import base64
import json

import pytest
from typer.testing import CliRunner

import bitcoin_donation.rpc.client as rpc_client
from conftest import FakeDaemon
from bitcoin_donation import __version__
from bitcoin_donation.cli.commands import (
    EXIT_AUTH,
    EXIT_CONFIG,
    EXIT_DECODE,
    EXIT_RPC,
    EXIT_TRANSPORT,
    app,
    exit_code_for,
    format_rpc_exception,
)
from bitcoin_donation.rpc.protocol import RpcErrorDetail
from bitcoin_donation.utils.exceptions import (
    ConfigError,
    RpcAuthenticationError,
    RpcDaemonError,
    RpcDecodeError,
    RpcIntegrityError,
    RpcMalformedResponseError,
    RpcTransportError,
)

runner = CliRunner()
URL = "http://127.0.0.1:18332/"


@pytest.fixture
def use_daemon(monkeypatch):
    """Route every RpcClient the CLI builds through a FakeDaemon."""
    real_client = rpc_client.RpcClient

    def install(reply) -> FakeDaemon:
        daemon = FakeDaemon(reply)
        monkeypatch.setattr(
            rpc_client,
            "RpcClient",
            lambda timeout=30.0: real_client(timeout=timeout, transport=daemon.transport),
        )
        return daemon

    return install


def _ok(results):
    return lambda p: (200, {"result": results[p["method"]], "error": None, "id": p["id"]})


def test_address_prints_witness_address(use_daemon) -> None:
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X", "addwitnessaddress": "2N8hwP"}))
    result = runner.invoke(app, ["address", "--url", URL, "--password", "pw"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2N8hwP"
    assert [p["method"] for p in daemon.payloads] == ["getnewaddress", "addwitnessaddress"]


def test_address_legacy_flag(use_daemon) -> None:
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X"}))
    result = runner.invoke(app, ["address", "--url", URL, "--password", "pw", "--legacy"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "mzBc4X"
    assert len(daemon.requests) == 1


def test_address_reads_password_from_bitcoin_conf(use_daemon, tmp_path) -> None:
    conf = tmp_path / "bitcoin.conf"
    conf.write_text("rpcuser=alice\nrpcpassword=secret\n", encoding="utf-8")
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X"}))
    result = runner.invoke(app, ["address", "--url", URL, "--conf", str(conf), "--legacy"])
    assert result.exit_code == 0, result.output
    expected = "Basic " + base64.b64encode(b"alice:secret").decode("ascii")
    assert daemon.requests[0].headers["Authorization"] == expected


def test_address_reads_password_from_environment(use_daemon, monkeypatch) -> None:
    monkeypatch.setenv("BITCOIN_DONATION_RPC__PASSWORD", "from-env")
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X"}))
    result = runner.invoke(app, ["address", "--url", URL, "--legacy"])
    assert result.exit_code == 0, result.output
    expected = "Basic " + base64.b64encode(b":from-env").decode("ascii")
    assert daemon.requests[0].headers["Authorization"] == expected


def test_conf_section_matches_endpoint_network(use_daemon, tmp_path) -> None:
    conf = tmp_path / "bitcoin.conf"
    conf.write_text(
        "rpcuser=alice\nrpcpassword=top\n[main]\nrpcpassword=mainnet\n[test]\nrpcpassword=testnet\n",
        encoding="utf-8",
    )
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X"}))
    result = runner.invoke(app, ["address", "--url", "http://127.0.0.1:8332/", "--conf", str(conf), "--legacy"])
    assert result.exit_code == 0, result.output
    expected = "Basic " + base64.b64encode(b"alice:mainnet").decode("ascii")
    assert daemon.requests[0].headers["Authorization"] == expected


def test_address_uses_config_file(use_daemon, tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"rpc": {"url": "http://10.1.1.1:8332/", "password": "pw"}}), encoding="utf-8")
    daemon = use_daemon(_ok({"getnewaddress": "mzBc4X"}))
    result = runner.invoke(app, ["address", "--config", str(config_path), "--legacy"])
    assert result.exit_code == 0, result.output
    assert str(daemon.requests[0].url) == "http://10.1.1.1:8332/"


def test_unauthorized_exits_with_auth_code(use_daemon) -> None:
    use_daemon(lambda p: (401, b""))
    result = runner.invoke(app, ["address", "--url", URL, "--password", "wrong"])
    assert result.exit_code == EXIT_AUTH
    assert "RPC_UNAUTHORIZED" in result.output
    assert "wrong" not in result.output


def test_daemon_error_exits_with_rpc_code(use_daemon) -> None:
    use_daemon(lambda p: (200, {"result": None, "error": {"code": -5, "message": "Invalid address"}, "id": p["id"]}))
    result = runner.invoke(app, ["validate", "nope", "--url", URL, "--password", "pw"])
    assert result.exit_code == EXIT_RPC
    assert "Invalid address" in result.output


def test_bad_url_exits_with_config_code() -> None:
    result = runner.invoke(app, ["address", "--url", "ftp://127.0.0.1/", "--password", "pw"])
    assert result.exit_code == EXIT_CONFIG
    assert "CONFIG_ERROR" in result.output


def test_broken_config_file_exits_with_config_code(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{", encoding="utf-8")
    result = runner.invoke(app, ["address", "--config", str(config_path), "--password", "pw"])
    assert result.exit_code == EXIT_CONFIG


def test_validate_prints_present_fields(use_daemon) -> None:
    use_daemon(
        _ok({"validateaddress": {"isvalid": True, "address": "2N8hwP", "ismine": False, "iswatchonly": None}})
    )
    result = runner.invoke(app, ["validate", "2N8hwP", "--url", URL, "--password", "pw"])
    assert result.exit_code == 0, result.output
    assert "isvalid" in result.stdout
    assert "ismine" in result.stdout
    assert "false" in result.stdout
    assert "iswatchonly" not in result.stdout


def test_commands_lists_registry() -> None:
    result = runner.invoke(app, ["commands"])
    assert result.exit_code == 0
    for name in ("getnewaddress", "addwitnessaddress", "validateaddress"):
        assert name in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_exit_code_for_each_error_kind() -> None:
    detail = RpcErrorDetail(code=-32603, message="x")
    assert exit_code_for(RpcTransportError("down", status_code=503)) == EXIT_TRANSPORT
    assert exit_code_for(RpcAuthenticationError()) == EXIT_AUTH
    assert exit_code_for(RpcDecodeError("bad", "diag")) == EXIT_DECODE
    assert exit_code_for(RpcDaemonError(detail)) == EXIT_RPC
    assert exit_code_for(RpcIntegrityError(detail)) == EXIT_RPC
    assert exit_code_for(RpcMalformedResponseError(detail)) == EXIT_RPC
    assert exit_code_for(ConfigError("no url")) == EXIT_CONFIG
    assert exit_code_for(ValueError("broken config")) == EXIT_CONFIG


def test_format_transport_error_includes_status() -> None:
    level, detail = format_rpc_exception(RpcTransportError("RPC http error 503: down", status_code=503))
    assert level == "yellow"
    assert "RPC_TRANSPORT_ERROR" in detail
    assert "status=503" in detail


def test_format_rpc_error_shows_daemon_code() -> None:
    level, detail = format_rpc_exception(RpcDaemonError(RpcErrorDetail(code=-5, message="Invalid address")))
    assert level == "red"
    assert detail == "RPC_DAEMON_ERROR -5: Invalid address"


def test_format_decode_error_keeps_first_diagnostic_line() -> None:
    _, detail = format_rpc_exception(RpcDecodeError("Invalid getnewaddress response", "line one\nline two"))
    assert detail == "RPC_DECODE_ERROR: Invalid getnewaddress response (line one)"


def test_format_generic_error_is_sanitized() -> None:
    _, detail = format_rpc_exception(ValueError("rpcpassword=hunter2 rejected"))
    assert "hunter2" not in detail
