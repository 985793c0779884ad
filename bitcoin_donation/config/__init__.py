"""Configuration module for bitcoin-donation."""

from bitcoin_donation.config.loader import load_config, get_config_path, save_config
from bitcoin_donation.config.schema import Config, LoggingConfig, RpcConfig
from bitcoin_donation.config.access import get_config, get_rpc_config, clear_config_cache

__all__ = [
    "Config",
    "RpcConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_config",
    "get_rpc_config",
    "clear_config_cache",
]
