"""Entry point for ``python -m bitcoin_donation``."""

from bitcoin_donation.cli.commands import app

if __name__ == "__main__":
    app()
