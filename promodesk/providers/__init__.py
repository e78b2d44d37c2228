"""Concrete provider implementations (storage, spreadsheet sync)."""
