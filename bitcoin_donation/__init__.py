"""
bitcoin-donation - Generate a Bitcoin address for donations.
"""

from loguru import logger

__version__ = "0.2.0"
__logo__ = "₿"

# Library logging stays silent until the CLI (or a caller) enables it.
logger.disable("bitcoin_donation")
