"""Configuration module."""

from mycontacts.config.manager import ConfigManager

__all__ = ["ConfigManager"]
