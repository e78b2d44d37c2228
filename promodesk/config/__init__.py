"""Configuration module: exports Settings and load_config."""

from promodesk.config.loader import load_config
from promodesk.config.settings import Settings

__all__ = ["Settings", "load_config"]
