"""promoDesk: contact and campaign management for independent music promotion."""

__version__ = "0.1.0"
