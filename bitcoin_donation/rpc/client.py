"""HTTP JSON-RPC client for the bitcoind control interface."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Sequence, TypeVar

import httpx
from loguru import logger
from pydantic import ValidationError

from bitcoin_donation.rpc.commands import CommandDescriptor
from bitcoin_donation.rpc.credentials import Credentials
from bitcoin_donation.rpc.protocol import RpcErrorDetail, RpcRequest, RpcResponse
from bitcoin_donation.utils.exceptions import (
    INTERNAL_ERROR_CODE,
    RpcAuthenticationError,
    RpcDaemonError,
    RpcDecodeError,
    RpcIntegrityError,
    RpcMalformedResponseError,
    RpcTransportError,
)

T = TypeVar("T")

CONTENT_TYPE = "application/json"
WRONG_ID_MESSAGE = "Wrong ID returned."
MISSING_ERROR_MESSAGE = "RPC error could not be retrieved."


class RpcClient:
    """
    Issue typed one-shot calls against a bitcoind RPC endpoint.

    Each call is a single blocking POST. The only state kept between calls
    is the correlation id counter, which is advanced under a lock so ids stay
    unique even when one client is shared across threads.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        first_id: int = 0,
    ):
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(first_id)
        self._id_lock = threading.Lock()

    def next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    @staticmethod
    def build_request(command: CommandDescriptor, request_id: int, params: Sequence[str]) -> RpcRequest:
        return RpcRequest(id=request_id, method=command.wire_name, params=list(params))

    def execute(
        self,
        command: CommandDescriptor[T],
        endpoint: str,
        credentials: Credentials,
        params: Sequence[str] = (),
    ) -> T:
        """
        Call ``command`` on ``endpoint`` and return its decoded result.

        Raises:
            RpcTransportError: connection failure or non-200 status other than 401.
            RpcAuthenticationError: the daemon answered 401.
            RpcDecodeError: the request could not be encoded or the body did not
                match the command's result shape.
            RpcIntegrityError: the response id differs from the request id.
            RpcDaemonError: the daemon returned an error object.
            RpcMalformedResponseError: the body had neither result nor error.
        """
        request_id = self.next_id()
        try:
            request = self.build_request(command, request_id, params)
            body = request.encode()
        except (ValueError, TypeError) as exc:
            raise RpcDecodeError(f"Could not encode {command.wire_name} request", str(exc)) from exc

        logger.debug("RPC call method={} id={} params={}", command.wire_name, request_id, len(request.params))
        raw = self._post(endpoint, credentials, body, command.wire_name)
        result = self.decode_response(command, raw, request_id)
        logger.debug("RPC call method={} id={} succeeded", command.wire_name, request_id)
        return result

    def _post(self, endpoint: str, credentials: Credentials, body: bytes, method: str) -> bytes:
        headers = {
            "Content-Type": CONTENT_TYPE,
            "Content-Length": str(len(body)),
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(endpoint, content=body, headers=headers, auth=credentials.as_auth())
        except httpx.TimeoutException as exc:
            raise RpcTransportError(f"RPC timeout: {method}") from exc
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"RPC network error: {method}: {exc}") from exc

        status_code = int(resp.status_code)
        logger.debug("RPC call method={} status={}", method, status_code)
        if status_code == httpx.codes.UNAUTHORIZED:
            raise RpcAuthenticationError()
        if status_code != httpx.codes.OK:
            raise RpcTransportError(
                f"RPC http error {status_code}: {self._reason(resp)}",
                status_code=status_code,
            )
        return resp.content

    @staticmethod
    def _reason(resp: httpx.Response) -> str:
        try:
            payload: Any = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            message = payload["error"].get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
        return resp.reason_phrase or "request failed"

    @staticmethod
    def decode_response(command: CommandDescriptor[T], raw: bytes | str, request_id: int) -> T:
        """Decode a 200 body against ``command``'s result shape."""
        try:
            response = RpcResponse[command.result_shape].model_validate_json(raw)
        except ValidationError as exc:
            raise RpcDecodeError(f"Invalid {command.wire_name} response", str(exc)) from exc

        if response.id != request_id:
            raise RpcIntegrityError(
                RpcErrorDetail(
                    code=INTERNAL_ERROR_CODE,
                    message=WRONG_ID_MESSAGE,
                    data={"expected": request_id, "received": response.id},
                )
            )
        if response.result is not None:
            return response.result
        if response.error is not None:
            raise RpcDaemonError(response.error)
        raise RpcMalformedResponseError(RpcErrorDetail(code=INTERNAL_ERROR_CODE, message=MISSING_ERROR_MESSAGE))
