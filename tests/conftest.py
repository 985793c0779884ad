"""Pytest hooks and fixtures."""

import json
import os
from typing import Any, Callable

import httpx
import pytest

from bitcoin_donation.config.access import clear_config_cache
from bitcoin_donation.rpc.client import RpcClient
from bitcoin_donation.rpc.credentials import Credentials

ENDPOINT = "http://127.0.0.1:18332/"


def pytest_collection_modifyitems(config, items):
    """Skip requires_daemon tests unless a live bitcoind URL is configured."""
    if os.environ.get("BITCOIN_DONATION_LIVE_URL"):
        return
    skip = pytest.mark.skip(reason="Set BITCOIN_DONATION_LIVE_URL to run against a live bitcoind")
    for item in items:
        if "requires_daemon" in item.keywords:
            item.add_marker(skip)


class FakeDaemon:
    """httpx transport that records requests and answers via ``reply(payload)``."""

    def __init__(self, reply: Callable[[dict[str, Any]], tuple[int, Any]]):
        self.reply = reply
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.reply(json.loads(request.content))
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


def echo(result: Any = None, error: Any = None, **extra: Any) -> Callable[[dict[str, Any]], tuple[int, Any]]:
    """Reply with a well-formed envelope that round-trips the request id."""
    return lambda payload: (200, {"result": result, "error": error, "id": payload["id"], **extra})


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(password="hunter2", username="alice")


@pytest.fixture
def make_client() -> Callable[[FakeDaemon], RpcClient]:
    return lambda daemon, **kwargs: RpcClient(transport=daemon.transport, **kwargs)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.bitcoin-donation and env overrides."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("BITCOIN_DONATION_") and not key.startswith("BITCOIN_DONATION_LIVE_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()
