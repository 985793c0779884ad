"""
Command registry for the bitcoind RPC calls this client knows how to make.

Each command binds the wire method name to the type its result decodes into.
The set is closed: new daemon methods are added here, never at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass(frozen=True)
class CommandDescriptor(Generic[T]):
    """Wire method name plus the shape its result decodes into."""
    wire_name: str
    result_shape: type[T]


class ValidateAddressResult(BaseModel):
    """
    Result of ``validateaddress``.

    Only ``is_valid`` is always present. The daemon omits the other fields
    when the address is invalid or not owned by the wallet, so they stay
    ``None`` instead of defaulting to ``False``.
    """
    # Unknown members vary between daemon versions; known ones keep their JSON types.
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True, strict=True)

    is_valid: bool = Field(alias="isvalid")
    address: str | None = None
    script_pub_key: str | None = Field(default=None, alias="scriptPubKey")
    is_mine: bool | None = Field(default=None, alias="ismine")
    is_watch_only: bool | None = Field(default=None, alias="iswatchonly")
    is_script: bool | None = Field(default=None, alias="isscript")
    is_witness: bool | None = Field(default=None, alias="iswitness")
    witness_version: int | None = None
    witness_program: str | None = None
    pubkey: str | None = None
    is_compressed: bool | None = Field(default=None, alias="iscompressed")
    account: str | None = None
    timestamp: int | None = None
    hd_key_path: str | None = Field(default=None, alias="hdkeypath")
    hd_seed_id: str | None = Field(default=None, alias="hdseedid")
    hd_master_key_id: str | None = Field(default=None, alias="hdmasterkeyid")

    def present_fields(self) -> dict[str, object]:
        """Fields the daemon actually reported, keyed by wire name."""
        return self.model_dump(by_alias=True, exclude_none=True)


GET_NEW_ADDRESS: CommandDescriptor[str] = CommandDescriptor("getnewaddress", str)
ADD_WITNESS_ADDRESS: CommandDescriptor[str] = CommandDescriptor("addwitnessaddress", str)
VALIDATE_ADDRESS: CommandDescriptor[ValidateAddressResult] = CommandDescriptor(
    "validateaddress", ValidateAddressResult
)

COMMANDS: tuple[CommandDescriptor, ...] = (
    GET_NEW_ADDRESS,
    ADD_WITNESS_ADDRESS,
    VALIDATE_ADDRESS,
)

_BY_WIRE_NAME: dict[str, CommandDescriptor] = {c.wire_name: c for c in COMMANDS}


def get_command(wire_name: str) -> CommandDescriptor:
    """Look up a registered command by wire name."""
    try:
        return _BY_WIRE_NAME[wire_name]
    except KeyError:
        raise KeyError(f"Unknown RPC command: {wire_name}") from None


def list_commands() -> list[CommandDescriptor]:
    return list(COMMANDS)
