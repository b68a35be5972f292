import logging

LOGGER_NAME = "cars_anpr"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level="INFO") -> logging.Logger:
    """
    Configures the package logger with a single console handler.
    Calling it again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_cars_anpr", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._cars_anpr = True
        logger.addHandler(handler)

    return logger
