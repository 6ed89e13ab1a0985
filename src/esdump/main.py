import typer
from dotenv import load_dotenv

from esdump.commands import logs
from esdump.commands.config import app as config_app
from esdump.commands.export import create_dump_command
from esdump.logging import setup_logging, get_logger

app = typer.Typer(
    help="[bold blue]esdump[/bold blue] - consistent NDJSON dumps of search indices",
    rich_markup_mode="rich",
)

app.add_typer(config_app, name="config")
app.add_typer(logs.app, name="logs")

app.command("dump")(create_dump_command())


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """
    [bold blue]esdump[/bold blue] - consistent NDJSON dumps of search indices

    Streams whole indices through point-in-time snapshots into bulk-format
    NDJSON, ready to be replayed with the _bulk API.
    """
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help(), err=True)


def main():
    # ESDUMP_* variables may come from a .env file in the working directory
    load_dotenv()
    setup_logging()
    logger = get_logger("esdump.main")
    logger.info("esdump started")

    try:
        app()
    except Exception as e:
        logger.error(f"Unhandled exception in main: {e}")
        raise
    finally:
        logger.info("esdump finished")


if __name__ == "__main__":
    main()
