import logging
import sys

ROOT_LOGGER = "statusrotator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the project logger once at startup."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    # discord.py is chatty at INFO
    logging.getLogger("discord").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a child logger such as ``statusrotator.scheduler``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
