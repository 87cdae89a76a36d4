"""Console logging setup shared by the CLI entry points"""

import logging

from rich.console import Console
from rich.logging import RichHandler


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger through a rich handler on stderr."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level}', expected one of {', '.join(LOG_LEVELS)}")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
                log_time_format="[%Y-%m-%d %H:%M:%S]",
            )
        ],
        force=True,
    )
