"""
Configuration management commands.

Connection profiles hold a cluster URL, optional credentials and
defaults; one of them is the active profile used when ``dump`` gets no
``--url``.
"""

from typing import Optional

import typer

from esdump.constants import DEFAULT_REQUEST_TIMEOUT
from esdump.errors import ConfigurationError
from esdump.logging import LogLevel, get_logger, setup_logging
from esdump.utils.config_store import ConfigStore
from esdump.utils.console import create_table, console, error, info, success, warning
from esdump.utils.settings import ConnectionSettings
from .settings import display_config, get_credential_value

app = typer.Typer(help="Manage connection profiles and settings")


def _store() -> ConfigStore:
    return ConfigStore()


@app.command("set")
def set_profile(
    profile: str = typer.Argument("default", help="Profile name"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Cluster URL"),
    username: Optional[str] = typer.Option(None, "--username", help="Basic auth username"),
    password: Optional[str] = typer.Option(
        None, "--password", help="Basic auth password (stored in the OS keyring)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Base64 encoded API key (stored in the OS keyring)"
    ),
    insecure: bool = typer.Option(
        False, "--insecure", help="Disable TLS certificate validation"
    ),
    timeout: float = typer.Option(
        DEFAULT_REQUEST_TIMEOUT, "--timeout", "-t", min=0.001, help="Request timeout in seconds"
    ),
    activate: bool = typer.Option(
        True, "--activate/--no-activate", help="Make this the active profile"
    ),
):
    """Create or update a connection profile"""
    logger = get_logger("esdump.commands.config")
    config_store = _store()
    existing = config_store.get_profile_config(profile) or {}

    url_value = get_credential_value(url, "url", existing, "Cluster URL")

    if username and not password:
        password = get_credential_value(
            None, "password", {}, f"Password for {username}", password=True
        )

    try:
        # validates URL and credential combination before anything is stored
        connection = ConnectionSettings(
            url=url_value,
            username=username,
            password=password,
            api_key=api_key,
            insecure=insecure,
            timeout=timeout,
        )
    except ConfigurationError as e:
        error(str(e))
        raise typer.Exit(1)

    config = {
        "url": connection.url,
        "insecure": connection.insecure,
        "timeout": connection.timeout,
    }
    if username or api_key:
        # new credentials replace whatever auth the profile had
        config.update({"username": username, "password": password, "api_key": api_key})
    elif existing.get("username"):
        config["username"] = existing["username"]

    config_store.save_profile(profile, config)
    if activate:
        config_store.set_current_profile(profile)

    logger.info(f"Saved profile '{profile}' for {connection.url} (auth={connection.auth_method})")
    success(f"Profile '{profile}' saved")


@app.command("show")
def show_profile(
    profile: Optional[str] = typer.Argument(None, help="Profile name (default: active)"),
):
    """Show a profile's configuration"""
    config_store = _store()
    profile = profile or config_store.get_current_profile()
    if not profile:
        warning("No active profile. Run 'esdump config set --url <url>' first")
        raise typer.Exit(1)
    display_config(profile, config_store.get_profile_config(profile))


@app.command("list")
def list_profiles():
    """List saved profiles"""
    config_store = _store()
    profiles = config_store.get_profiles()
    if not profiles:
        info("No profiles saved yet")
        return

    current = config_store.get_current_profile()
    table = create_table("Profiles", ["", "Name", "URL", "Auth"])
    for name, config in sorted(profiles.items()):
        if config.get("has_api_key"):
            auth = "api-key"
        elif config.get("username"):
            auth = f"basic ({config['username']})"
        else:
            auth = "none"
        table.add_row("*" if name == current else "", name, config.get("url", ""), auth)
    console.print(table)


@app.command("use")
def use_profile(profile: str = typer.Argument(..., help="Profile name")):
    """Switch the active profile"""
    config_store = _store()
    if config_store.get_profile_config(profile) is None:
        error(f"Profile '{profile}' does not exist")
        raise typer.Exit(1)
    config_store.set_current_profile(profile)
    success(f"Active profile: {profile}")


@app.command("delete")
def delete_profile(
    profile: str = typer.Argument(..., help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a profile and its stored secrets"""
    config_store = _store()
    if config_store.get_profile_config(profile) is None:
        error(f"Profile '{profile}' does not exist")
        raise typer.Exit(1)
    if not yes and not typer.confirm(f"Delete profile '{profile}'?"):
        raise typer.Abort()
    config_store.delete_profile(profile)
    success(f"Profile '{profile}' deleted")


@app.command("log-level")
def set_log_level(
    level: str = typer.Argument(..., help="DEBUG, INFO, WARNING or ERROR"),
):
    """Set the file log level"""
    parsed = LogLevel.parse(level)
    if parsed is None:
        error(f"Invalid log level '{level}'")
        raise typer.Exit(1)

    level_upper = parsed.value
    _store().update_settings(log_level=level_upper)
    setup_logging(force_reconfigure=True)
    get_logger("esdump.commands.config").info(f"Log level set to {level_upper}")
    success(f"Log level set to {level_upper}")
