"""Rich-handler logging preset."""
import logging
from rich.logging import RichHandler
from .config import settings


def configure(level=None):
    """Install a RichHandler on the root logger. `level` overrides SDM630_LOG_LEVEL."""
    level = level or settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(name)-28s │ %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
    )
