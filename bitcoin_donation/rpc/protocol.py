"""JSON-RPC wire models for the bitcoind control interface."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RpcRequest(BaseModel):
    """Outgoing call. Serialized once, then discarded."""
    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = "2.0"
    id: int
    method: str
    params: list[str] = Field(default_factory=list)

    def encode(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class RpcErrorDetail(BaseModel):
    """Error object reported by the daemon."""
    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    code: int
    message: str
    data: Any | None = None


class RpcResponse(BaseModel, Generic[T]):
    """Reply envelope; unknown top-level fields and coerced types are rejected."""
    model_config = ConfigDict(extra="forbid", strict=True)

    jsonrpc: str | None = None  # echoed by daemons that speak 2.0
    result: T | None = None
    error: RpcErrorDetail | None = None
    id: int | None = None
