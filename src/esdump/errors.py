"""
Exception types for esdump.

Only the transport, the sinks and the export loop raise these; the
snapshot session and page fetcher return result variants instead (see
``esdump.utils.export.results``).
"""

from typing import Optional


class EsdumpError(Exception):
    """Base class for esdump errors"""


class ConfigurationError(EsdumpError):
    """Invalid or incomplete connection/export settings"""


class TransportFailure(EsdumpError):
    """The backend could not be reached or did not answer in time"""

    def __init__(self, message: str, method: str = "", url: str = ""):
        super().__init__(message)
        self.method = method
        self.url = url


class SinkError(EsdumpError):
    """Writing exported data to the output failed"""


class FatalExportError(EsdumpError):
    """The export run cannot continue"""

    def __init__(self, message: str, index: Optional[str] = None):
        super().__init__(message)
        self.index = index
