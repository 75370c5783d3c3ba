"""
Logging setup for the installer.

Called once at startup by the CLI. Modules log through
``logging.getLogger(__name__)``; user-facing progress is printed by the
CLI itself.
"""

import logging


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Setup logging for the installer.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("mcpify.installer")
