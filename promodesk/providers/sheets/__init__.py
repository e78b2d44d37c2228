"""Spreadsheet web-app client backing the public radio intake form."""

from promodesk.providers.sheets.apps_script_provider import AppsScriptSheetsProvider

__all__ = ["AppsScriptSheetsProvider"]
