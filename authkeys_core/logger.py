import logging, json, sys, time, os
from .constants import ENV_LOG_FILE, ENV_LOG_LEVEL

_FIELDS = {
    "ts": "%(asctime)s",
    "level": "%(levelname)s",
    "name": "%(name)s",
    "msg": "%(message)s",
}


def _json_formatter() -> logging.Formatter:
    formatter = logging.Formatter(fmt=json.dumps(_FIELDS), datefmt="%Y-%m-%dT%H:%M:%SZ")
    formatter.converter = time.gmtime  # UTC timestamps
    return formatter


def _env_level():
    name = os.getenv(ENV_LOG_LEVEL, "INFO").upper()
    # Unknown names come back as "Level X" strings; fall back to INFO.
    return name if isinstance(logging.getLevelName(name), int) else "INFO"


def get_logger(name="authkeys", level=None, to_file=None):
    """
    Structured JSON-line logger shared by all authkeys components.

    level defaults to $AUTHKEYS_LOG_LEVEL (INFO), to_file to $AUTHKEYS_LOG_FILE.
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or _env_level())

    if logger.handlers:
        return logger

    formatter = _json_formatter()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    to_file = to_file or os.getenv(ENV_LOG_FILE)
    if to_file:
        os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(to_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
