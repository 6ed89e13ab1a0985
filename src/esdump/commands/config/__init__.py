"""
Configuration management module.

- config_manager: typer commands for connection profiles and settings
- settings: credential prompting and profile display helpers

Usage:
    from esdump.commands.config import app
"""

from .config_manager import app
from .settings import get_credential_value, display_config

__all__ = [
    "app",
    "get_credential_value",
    "display_config",
]
