"""
Export commands module.

``dump`` streams whole indices as NDJSON bulk records.
"""

from .dump import create_dump_command
from .dump_exporter import DumpExporter

__all__ = ["create_dump_command", "DumpExporter"]
