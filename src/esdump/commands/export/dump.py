"""
Dump command.

    esdump dump index1,index2 --size 1000 --keep-alive 5m -o backup.ndjson

Every document is written as a bulk ``index`` action line followed by its
source, so the output can be replayed with the ``_bulk`` API. Documents
come in ``_shard_doc`` order from a point-in-time snapshot, which keeps
the view consistent while other clients write to the index.
"""

from typing import Optional

import typer

from esdump.constants import DEFAULT_BATCH_SIZE, DEFAULT_KEEP_ALIVE
from esdump.errors import ConfigurationError
from esdump.utils.console import error, is_interactive
from esdump.utils.settings import ExportSettings, parse_indices
from ..shared.cli_options import CommonOptions
from .dump_exporter import DumpExporter


def create_dump_command():
    """Create the dump command function"""
    connection = CommonOptions.connection_options()

    def dump(
        indices: str = typer.Argument(..., help="Indices to dump, comma separated"),
        size: int = typer.Option(
            DEFAULT_BATCH_SIZE, "--size", "-s", min=1, help="Documents per page"
        ),
        keep_alive: str = typer.Option(
            DEFAULT_KEEP_ALIVE,
            "--keep-alive",
            "-k",
            help="How long each snapshot is kept alive between pages",
        ),
        output: Optional[str] = typer.Option(
            None, "--output", "-o", help="Output file (default: standard output)"
        ),
        strict: bool = typer.Option(
            False, "--strict", help="Exit with code 2 if any index failed"
        ),
        progress: Optional[bool] = typer.Option(
            None,
            "--progress/--no-progress",
            help="Show a progress bar on stderr (default: when stderr is a terminal)",
        ),
        keep_pits: bool = typer.Option(
            False,
            "--keep-pits",
            help="Let snapshots expire on their own instead of closing them",
        ),
        url: Optional[str] = connection["url"],
        username: Optional[str] = connection["username"],
        password: Optional[str] = connection["password"],
        api_key: Optional[str] = connection["api_key"],
        insecure: Optional[bool] = connection["insecure"],
        timeout: Optional[float] = connection["timeout"],
        profile_name: Optional[str] = connection["profile_name"],
    ):
        """Dump one or more indices as NDJSON bulk records"""
        try:
            settings = ExportSettings(
                indices=parse_indices(indices),
                batch_size=size,
                keep_alive=keep_alive,
                output=output,
                release_snapshots=not keep_pits,
                strict=strict,
                show_progress=is_interactive() if progress is None else progress,
                request_timeout=timeout,
            )
        except ConfigurationError as e:
            error(str(e))
            raise typer.Exit(1)

        exporter = DumpExporter(settings)
        exporter.export_data(
            url=url,
            username=username,
            password=password,
            api_key=api_key,
            insecure=insecure,
            timeout=timeout,
            profile_name=profile_name,
        )

    return dump
