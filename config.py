import logging
import os
from logging.handlers import RotatingFileHandler

from dotenv import load_dotenv

load_dotenv()


def resolve_log_level(name):
    """Level name from the environment, or INFO when logging doesn't know it."""
    level = (name or "").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


DATABASE = os.getenv("COUNTRYMGR_DATABASE", "countries.db")
LOG_FILE = os.getenv("COUNTRYMGR_LOG_FILE", "countrymgr.log")
API_LOG_FILE = os.getenv("COUNTRYMGR_API_LOG_FILE", "api.log")
LOG_LEVEL = resolve_log_level(os.getenv("COUNTRYMGR_LOG_LEVEL", "INFO"))
SEED_FILE = os.getenv("COUNTRYMGR_SEED_FILE", "countries.json")


def setup_logging(logger, log_file=LOG_FILE, level=LOG_LEVEL):
    # Set up a log file that rotates (so it doesn't grow forever)
    for existing in logger.handlers:
        if getattr(existing, 'baseFilename', None) == os.path.abspath(log_file):
            return logger

    level = resolve_log_level(level)
    handler = RotatingFileHandler(log_file, maxBytes=100000, backupCount=1)
    handler.setLevel(level)
    formatter = logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
