"""
Base command class providing common functionality.

Holds the pieces every command needs: the config store, connection
resolution, a transport factory and a module-scoped logger.
"""

from abc import ABC, abstractmethod
from typing import Optional

import typer

from esdump.errors import ConfigurationError
from esdump.logging import get_logger
from esdump.utils.config_store import ConfigStore
from esdump.utils.console import error
from esdump.utils.settings import ConnectionSettings
from esdump.utils.transport import SearchTransport
from .auth_manager import AuthManager


class BaseCommand(ABC):
    """Base class for commands that talk to the search backend"""

    def __init__(self, config_store: Optional[ConfigStore] = None):
        self.config_store = config_store or ConfigStore()
        self.auth_manager = AuthManager(self.config_store)
        self.logger = get_logger(
            f"esdump.{self.__class__.__module__}.{self.__class__.__name__}"
        )

    def initialize_connection(
        self,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        api_key: Optional[str] = None,
        insecure: Optional[bool] = None,
        timeout: Optional[float] = None,
        profile_name: Optional[str] = None,
    ) -> ConnectionSettings:
        """Resolve connection settings or exit with a readable message"""
        try:
            return self.auth_manager.resolve_connection(
                url=url,
                username=username,
                password=password,
                api_key=api_key,
                insecure=insecure,
                timeout=timeout,
                profile_name=profile_name,
            )
        except ConfigurationError as e:
            self.logger.error(f"Connection setup failed: {e}")
            error(str(e))
            raise typer.Exit(1)

    def create_transport(self, connection: ConnectionSettings) -> SearchTransport:
        auth, headers = connection.build_auth()
        if connection.insecure:
            self.logger.warning(f"TLS certificate validation disabled for {connection.url}")
        return SearchTransport(
            base_url=connection.url,
            auth=auth,
            headers=headers,
            verify=not connection.insecure,
            timeout=connection.timeout,
        )

    @abstractmethod
    def get_item_type(self) -> str:
        """Return the type of items being processed (for logging)"""
        pass
