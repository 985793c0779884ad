"""Configuration schema using Pydantic.

Persisted to ~/.bitcoin-donation/config.json; every field can also be set via
BITCOIN_DONATION_* environment variables (nested with ``__``).
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class RpcConfig(BaseModel):
    """bitcoind RPC connection settings."""
    url: str = "http://127.0.0.1:18332/"  # testnet RPC port
    username: str | None = None  # None: take rpcuser from conf_file, else empty
    password: str = ""  # Empty: read rpcpassword from conf_file, else prompt
    conf_file: str | None = None  # Path to bitcoin.conf
    timeout: float = 30.0  # Connection-level timeout in seconds

    @property
    def conf_path(self) -> Path | None:
        return Path(self.conf_file).expanduser() if self.conf_file else None


class LoggingConfig(BaseModel):
    """Log sinks used by the CLI."""
    level: str = "INFO"
    file: bool = False  # Also write a rotating log under ~/.bitcoin-donation/logs


class Config(BaseSettings):
    """Root configuration for bitcoin-donation."""
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="BITCOIN_DONATION_",
        env_nested_delimiter="__",
    )
