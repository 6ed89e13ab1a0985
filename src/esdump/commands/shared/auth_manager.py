"""
Connection resolution for commands.

A connection value comes from the first of: command-line option,
environment variable (typer fills both), the selected profile, the
active profile.
"""

from typing import Optional

from esdump.errors import ConfigurationError
from esdump.logging import get_logger
from esdump.utils.config_store import ConfigStore
from esdump.utils.settings import ConnectionSettings


class AuthManager:
    """Builds ``ConnectionSettings`` from arguments and saved profiles"""

    def __init__(self, config_store: ConfigStore):
        self.config_store = config_store
        self.logger = get_logger("esdump.commands.shared.auth_manager")

    def resolve_profile(self, profile_name: Optional[str] = None) -> Optional[str]:
        if profile_name:
            if self.config_store.get_profile_config(profile_name) is None:
                raise ConfigurationError(f"Profile '{profile_name}' does not exist")
            return profile_name
        return self.config_store.get_current_profile()

    def resolve_connection(
        self,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        api_key: Optional[str] = None,
        insecure: Optional[bool] = None,
        timeout: Optional[float] = None,
        profile_name: Optional[str] = None,
    ) -> ConnectionSettings:
        """
        Merge explicit values with the profile.

        Profile credentials are only used when no credentials were given
        explicitly, so an explicit API key never mixes with a profile's
        basic auth.

        Raises:
            ConfigurationError: No URL anywhere, or inconsistent credentials
        """
        profile = self.resolve_profile(profile_name)
        config = (self.config_store.get_profile_config(profile) or {}) if profile else {}

        explicit_credentials = any([username, password, api_key])
        if not explicit_credentials and profile:
            username = config.get("username")
            if config.get("has_password"):
                password = self.config_store.get_profile_secret(profile, "password")
            if config.get("has_api_key"):
                api_key = self.config_store.get_profile_secret(profile, "api_key")

        url = url or config.get("url")
        if not url:
            raise ConfigurationError(
                "No cluster URL. Pass --url, set ESDUMP_URL or run "
                "'esdump config set --url <url>'."
            )

        if insecure is None:
            insecure = bool(config.get("insecure"))
        if timeout is None:
            timeout = config.get("timeout")

        settings = ConnectionSettings(
            url=url,
            username=username,
            password=password,
            api_key=api_key,
            insecure=bool(insecure),
            **({"timeout": float(timeout)} if timeout else {}),
        )
        self.logger.debug(
            f"Resolved connection {settings.url} "
            f"(profile={profile or '-'}, auth={settings.auth_method})"
        )
        return settings
