"""Persistence layer - stored settings."""
from .settings import JsonSettingsStore

__all__ = ["JsonSettingsStore"]
