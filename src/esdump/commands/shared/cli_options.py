"""
Common CLI options.

Connection options are shared by every command that talks to the cluster;
each one can also be supplied through its ``ESDUMP_*`` environment
variable (or a ``.env`` file).
"""

import typer

from esdump.constants import (
    ENV_API_KEY,
    ENV_INSECURE,
    ENV_PASSWORD,
    ENV_TIMEOUT,
    ENV_URL,
    ENV_USERNAME,
)


class CommonOptions:
    """Typer option definitions reused across commands"""

    @staticmethod
    def connection_options():
        """Return connection-related CLI options"""
        return {
            "url": typer.Option(
                None,
                "--url",
                "-u",
                envvar=ENV_URL,
                help="Cluster URL, e.g. https://localhost:9200",
            ),
            "username": typer.Option(
                None, "--username", envvar=ENV_USERNAME, help="Username for basic auth"
            ),
            "password": typer.Option(
                None,
                "--password",
                envvar=ENV_PASSWORD,
                help="Password for basic auth",
                show_default=False,
            ),
            "api_key": typer.Option(
                None,
                "--api-key",
                envvar=ENV_API_KEY,
                help="Base64 encoded API key",
                show_default=False,
            ),
            "insecure": typer.Option(
                None,
                "--insecure/--secure",
                envvar=ENV_INSECURE,
                help="Disable TLS certificate validation",
            ),
            "timeout": typer.Option(
                None,
                "--timeout",
                "-t",
                envvar=ENV_TIMEOUT,
                min=0.001,
                help="Per-request timeout in seconds [default: 60]",
            ),
            "profile_name": typer.Option(
                None, "--profile", "-p", help="Saved connection profile to use"
            ),
        }
