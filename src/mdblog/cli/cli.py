"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdblog.cli.commands import build_cmd, list_cmd
from mdblog.logs import LOG_LEVELS, setup_logging


app = typer.Typer(name="mdblog", no_args_is_help=True, help="Markdown blog build pipeline")


@app.callback()
def main(
    log_level: Annotated[str, typer.Option("--log-level", help=f"One of {', '.join(LOG_LEVELS)}")] = "INFO",
    ):
    """Configure logging before any command runs."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


app.command(name="build")(build_cmd)
app.command(name="list")(list_cmd)
