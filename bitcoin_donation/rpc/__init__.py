"""Typed JSON-RPC client for the bitcoind control interface."""

from bitcoin_donation.rpc.client import RpcClient
from bitcoin_donation.rpc.commands import (
    ADD_WITNESS_ADDRESS,
    COMMANDS,
    GET_NEW_ADDRESS,
    VALIDATE_ADDRESS,
    CommandDescriptor,
    ValidateAddressResult,
    get_command,
    list_commands,
)
from bitcoin_donation.rpc.credentials import Credentials, parse_endpoint, resolve_credentials
from bitcoin_donation.rpc.protocol import RpcErrorDetail, RpcRequest, RpcResponse

__all__ = [
    "RpcClient",
    "CommandDescriptor",
    "ValidateAddressResult",
    "GET_NEW_ADDRESS",
    "ADD_WITNESS_ADDRESS",
    "VALIDATE_ADDRESS",
    "COMMANDS",
    "get_command",
    "list_commands",
    "Credentials",
    "parse_endpoint",
    "resolve_credentials",
    "RpcErrorDetail",
    "RpcRequest",
    "RpcResponse",
]
