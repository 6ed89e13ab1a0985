"""
Log management commands for esdump.
"""

import time
from datetime import datetime
from typing import Optional

import typer
from rich.syntax import Syntax
from rich.table import Table

from esdump.constants import LOG_APP_NAME, LOG_FILE_NAME, LOG_LINES_TO_SHOW
from esdump.logging import get_logger, setup_logging
from esdump.logging.config import get_log_directory, get_log_file_path
from esdump.logging.logger import get_log_config
from esdump.logging.utils import format_size
from esdump.utils.console import console, error, info, warning

app = typer.Typer(help="Inspect esdump logs")


@app.command("show")
def show_logs(
    lines: int = typer.Option(
        LOG_LINES_TO_SHOW, "--lines", "-n", help="Number of lines to show"
    ),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
    level: Optional[str] = typer.Option(
        None, "--level", help="Filter by log level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Show recent log entries"""
    setup_logging()
    logger = get_logger("esdump.commands.logs")

    try:
        log_file = get_log_file_path()

        if not log_file.exists():
            warning(f"No log file found. Run some {LOG_APP_NAME} commands to generate logs.")
            return

        with open(log_file, "r", encoding="utf-8") as f:
            all_lines = f.readlines()

        if level:
            level_upper = level.upper()
            all_lines = [line for line in all_lines if level_upper in line]
        display_lines = all_lines[-lines:] if all_lines else []

        if not display_lines:
            info("No log entries found matching the criteria.")
            return

        console.print(
            Syntax("".join(display_lines), "log", theme="monokai", line_numbers=False)
        )

        if follow:
            info("Following log file... (Press Ctrl+C to stop)")
            try:
                with open(log_file, "r", encoding="utf-8") as f:
                    f.seek(0, 2)
                    while True:
                        line = f.readline()
                        if not line:
                            time.sleep(0.1)
                        elif not level or level.upper() in line:
                            console.print(line.rstrip(), markup=False)
            except KeyboardInterrupt:
                info("\nStopped following logs.")

    except OSError as e:
        logger.error(f"Failed to show logs: {e}")
        error(f"Failed to show logs: {e}")
        raise typer.Exit(1)


@app.command("info")
def log_info() -> None:
    """Show log configuration and file information"""
    setup_logging()

    config = get_log_config()
    log_file = get_log_file_path(config)
    log_dir = get_log_directory()

    table = Table(
        title=f"{LOG_APP_NAME} Log Information",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Log Directory", str(log_dir))
    table.add_row("Log File", str(log_file))
    table.add_row("Log Level", config.default_level.value)
    table.add_row("Rotation", "Daily at midnight")
    table.add_row("Retention Days", str(config.log_retention_days))

    if log_file.exists():
        stat = log_file.stat()
        table.add_row("Current Size", format_size(stat.st_size))
        modified = datetime.fromtimestamp(stat.st_mtime)
        table.add_row("Last Modified", modified.strftime("%Y-%m-%d %H:%M:%S"))
    else:
        table.add_row("Current Size", "File not found")
        table.add_row("Last Modified", "N/A")

    table.add_row("Rotated Files", str(len(list(log_dir.glob(f"{LOG_FILE_NAME}.log.*")))))
    console.print(table)


@app.command("path")
def log_path() -> None:
    """Print the log file path (to stdout, for scripting)"""
    typer.echo(str(get_log_file_path()))
