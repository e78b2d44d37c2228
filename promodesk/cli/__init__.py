"""Command-line tools for promoDesk."""
