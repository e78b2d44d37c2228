"""Abstract provider interfaces.

Concrete implementations live under ``promodesk.providers``; the store and
services depend only on these ABCs so tests can swap in fakes.
"""

from promodesk.interfaces.sheets_provider import ISheetsProvider
from promodesk.interfaces.storage_provider import IStorageProvider

__all__ = ["ISheetsProvider", "IStorageProvider"]
