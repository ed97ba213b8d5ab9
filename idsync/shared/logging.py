"""
Logging setup shared by the CLI and the API server.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger through a rich handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
