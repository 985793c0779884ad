"""
Exception hierarchy for bitcoin-donation.

Provides:
- A base exception with error codes and categories
- One exception per RPC failure kind (transport, auth, decode, daemon)
- Safe error message formatting (no credential leak)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bitcoin_donation.rpc.protocol import RpcErrorDetail

# Reserved for client-side protocol failures; daemons use their own codes.
INTERNAL_ERROR_CODE = -32_603


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    PERMISSION = "permission"


class BitcoinDonationError(Exception):
    """Base exception for all bitcoin-donation errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(BitcoinDonationError):
    """Invalid endpoint, credentials source, or config file."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFIG_ERROR", category=ErrorCategory.VALIDATION, details=details)


class RpcTransportError(BitcoinDonationError):
    """HTTP-layer failure: connection error or unexpected status."""

    def __init__(self, message: str, status_code: int | None = None):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, code="RPC_TRANSPORT_ERROR", category=ErrorCategory.RETRYABLE, details=details)
        self.status_code = status_code


class RpcAuthenticationError(BitcoinDonationError):
    """The daemon answered 401 Unauthorized."""

    def __init__(self, message: str = "RPC credentials were rejected (HTTP 401)"):
        super().__init__(message, code="RPC_UNAUTHORIZED", category=ErrorCategory.PERMISSION)


class RpcDecodeError(BitcoinDonationError):
    """Request could not be encoded or response body did not match its schema."""

    def __init__(self, message: str, diagnostic: str | None = None):
        details = {"diagnostic": diagnostic} if diagnostic else {}
        super().__init__(message, code="RPC_DECODE_ERROR", category=ErrorCategory.VALIDATION, details=details)
        self.diagnostic = diagnostic


class RpcError(BitcoinDonationError):
    """RPC-class failure carrying a JSON-RPC error object."""

    error_code = "RPC_ERROR"

    def __init__(self, detail: RpcErrorDetail):
        super().__init__(
            detail.message,
            code=self.error_code,
            category=ErrorCategory.FATAL,
            details={"rpc_code": detail.code, "data": detail.data},
        )
        self.detail = detail

    @property
    def rpc_code(self) -> int:
        return self.detail.code

    def __str__(self) -> str:
        return f"[{self.code}] {self.detail.code}: {self.detail.message}"


class RpcDaemonError(RpcError):
    """The daemon returned an explicit error object."""

    error_code = "RPC_DAEMON_ERROR"


class RpcIntegrityError(RpcError):
    """Response id does not match the request id."""

    error_code = "RPC_ID_MISMATCH"


class RpcMalformedResponseError(RpcError):
    """Response carried neither a result nor an error."""

    error_code = "RPC_MALFORMED_RESPONSE"


_SENSITIVE_PATTERNS = [
    re.compile(r"(rpcpassword|password|auth|token|secret)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"basic\s+[a-zA-Z0-9+/]+=*", re.IGNORECASE),
    re.compile(r"(https?://)[^/\s:@]*:[^/\s@]*@", re.IGNORECASE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove credentials from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        if pattern.groups == 1:
            sanitized = pattern.sub(lambda m: f"{m.group(1)}{replacement}@", sanitized)
        else:
            sanitized = pattern.sub(replacement, sanitized)
    return sanitized
