"""Donation address workflow on top of the RPC client."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from bitcoin_donation.rpc.client import RpcClient
from bitcoin_donation.rpc.commands import (
    ADD_WITNESS_ADDRESS,
    GET_NEW_ADDRESS,
    VALIDATE_ADDRESS,
    ValidateAddressResult,
)
from bitcoin_donation.rpc.credentials import Credentials


@dataclass
class DaemonSession:
    """RPC client bound to one endpoint and one set of credentials."""
    endpoint: str
    credentials: Credentials
    client: RpcClient = field(default_factory=RpcClient)

    def get_new_address(self) -> str:
        return self.client.execute(GET_NEW_ADDRESS, self.endpoint, self.credentials)

    def add_witness_address(self, address: str) -> str:
        return self.client.execute(ADD_WITNESS_ADDRESS, self.endpoint, self.credentials, [address])

    def validate_address(self, address: str) -> ValidateAddressResult:
        return self.client.execute(VALIDATE_ADDRESS, self.endpoint, self.credentials, [address])


def generate_donation_address(session: DaemonSession, *, witness: bool = True) -> str:
    """
    Fetch a fresh receiving address and, by default, upgrade it to its
    P2SH-wrapped segwit form.
    """
    address = session.get_new_address()
    logger.debug("New legacy address {}", address)
    if not witness:
        return address
    witness_address = session.add_witness_address(address)
    logger.debug("Witness address {}", witness_address)
    return witness_address
