"""Utility functions for bitcoin-donation."""

from bitcoin_donation.utils.exceptions import (
    INTERNAL_ERROR_CODE,
    BitcoinDonationError,
    ConfigError,
    ErrorCategory,
    RpcAuthenticationError,
    RpcDaemonError,
    RpcDecodeError,
    RpcError,
    RpcIntegrityError,
    RpcMalformedResponseError,
    RpcTransportError,
    sanitize_error_message,
)

__all__ = [
    "INTERNAL_ERROR_CODE",
    "BitcoinDonationError",
    "ConfigError",
    "ErrorCategory",
    "RpcAuthenticationError",
    "RpcDaemonError",
    "RpcDecodeError",
    "RpcError",
    "RpcIntegrityError",
    "RpcMalformedResponseError",
    "RpcTransportError",
    "sanitize_error_message",
]
