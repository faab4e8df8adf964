import logging

LOGGER_NAME = "iara_relay"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger with a console handler.
    Safe to call more than once; handlers are only attached the first time.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
