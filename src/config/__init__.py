"""Configuration module — exports Settings and load_config."""

from src.config.loader import load_config
from src.config.settings import SUPPORTED_DB_BACKENDS, Settings

__all__ = ["SUPPORTED_DB_BACKENDS", "Settings", "load_config"]
