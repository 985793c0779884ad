"""CLI module for bitcoin-donation."""
