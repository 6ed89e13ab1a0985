"""
Credential collection and profile display.
"""

from typing import Dict, Optional

from rich.markup import escape
from rich.prompt import Prompt

from esdump.logging.utils import sanitize_string
from esdump.utils.console import display_panel, warning


def get_credential_value(
    arg_value: Optional[str],
    config_key: str,
    existing_config: dict,
    prompt_text: str,
    required: bool = True,
    password: bool = False,
) -> Optional[str]:
    """Get a value with priority: argument > saved profile > prompt"""
    if arg_value:
        return arg_value

    if existing_config and existing_config.get(config_key):
        return existing_config[config_key]

    if required:
        return Prompt.ask(prompt_text, password=password)
    return Prompt.ask(prompt_text, default="", password=password) or None


def display_config(profile_name: str, config: Dict) -> None:
    """Display a profile; secrets only show as stored/not stored"""
    if not config:
        warning(f"No configuration found for profile '{profile_name}'")
        return

    safe_config = {}
    for key, value in config.items():
        if key.startswith("has_"):
            safe_config[key[4:]] = "stored in keyring" if value else "not set"
        elif key == "url":
            safe_config[key] = sanitize_string(str(value))
        else:
            safe_config[key] = value

    config_text = "\n".join(
        f"{escape(str(key))}: {escape(str(value))}" for key, value in safe_config.items()
    )
    display_panel(config_text, f"Profile '{profile_name}'", "blue")
