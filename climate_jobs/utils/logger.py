import logging, os, sys


_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_NOISY = ("httpx", "httpcore", "hpack", "urllib3")


def get_logger(name: str = "climate-jobs") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def quiet_http_libraries(level: int = logging.WARNING) -> None:
    """httpx logs every request at INFO; supabase and the OCR client both use it."""
    for name in _NOISY:
        logging.getLogger(name).setLevel(level)
