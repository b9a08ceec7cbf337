"""Logging setup for the ``bigbatch_sgd`` logger."""

import logging
import logging.handlers

LOGGER_NAME = 'bigbatch_sgd'


def setup_logging(log_file='bigbatch_sgd.log', quiet: bool = False,
                  console_level=logging.INFO):
    """Attach a rotating file handler and a console handler once.

    Later calls return the configured logger unchanged, except that
    ``quiet=True`` drops the console handler. The file receives every
    DEBUG record, including per-iteration curvature and line search
    reports.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        if quiet:
            logger.handlers = [h for h in logger.handlers
                               if type(h) is not logging.StreamHandler]
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = logging.handlers.RotatingFileHandler(log_file,
                                                        maxBytes=5_000_000,
                                                        backupCount=0)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
