import logging
import sys

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)


def configure_logging(log_level: str = "INFO", format_string: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the root logger.

    Calling it again only updates the level, so app reloads do not duplicate output.
    """
    root_logger = logging.getLogger()
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    if any(getattr(handler, "_barbershop_handler", False) for handler in root_logger.handlers):
        return root_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._barbershop_handler = True
    root_logger.addHandler(handler)

    return root_logger
