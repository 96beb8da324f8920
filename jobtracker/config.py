import os
import json
import logging
from datetime import datetime

import pytz
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# Constants
CONFIG_DIR = os.path.expanduser("~/.jobtracker")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
DEFAULT_DATA_FILE = "jobs.json"
DEFAULT_EXPORT_FILE = "jobs.pdf"
DEFAULT_LOG_LEVEL = "WARNING"
DATE_FORMAT = "%Y-%m-%d"

CONFIG_KEYS = ("data_file", "export_file", "timezone", "font_path", "log_level")


def ensure_config_dir():
    """Ensure the config directory exists"""
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    """Load configuration from .env, the environment and the config file"""
    load_dotenv()

    config = {
        "data_file": os.getenv("JOBTRACKER_DATA_FILE", DEFAULT_DATA_FILE),
        "export_file": os.getenv("JOBTRACKER_EXPORT_FILE", DEFAULT_EXPORT_FILE),
        "timezone": os.getenv("JOBTRACKER_TIMEZONE", ""),
        "font_path": os.getenv("JOBTRACKER_FONT", ""),
        "log_level": os.getenv("JOBTRACKER_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    }

    # Load from config file if it exists
    if os.path.exists(CONFIG_FILE):
        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                saved_config = json.load(f)
            if isinstance(saved_config, dict):
                config.update(
                    {k: v for k, v in saved_config.items() if k in CONFIG_KEYS}
                )
            else:
                logger.warning(f"Ignoring config file {CONFIG_FILE}: not an object")
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading config file: {e}")

    return config


def save_config(config):
    """Save configuration to config file"""
    ensure_config_dir()

    try:
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        logger.info(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Error saving config file: {e}")
        raise


def validate_timezone(name):
    """Return the pytz timezone for ``name``; raises UnknownTimeZoneError."""
    return pytz.timezone(name)


def today(timezone_name=""):
    """Current calendar date as YYYY-MM-DD, local time unless a zone is set"""
    if timezone_name:
        try:
            return datetime.now(validate_timezone(timezone_name)).strftime(DATE_FORMAT)
        except pytz.UnknownTimeZoneError:
            logger.warning(
                f"Unknown timezone {timezone_name!r} in configuration, using local time"
            )
    return datetime.now().strftime(DATE_FORMAT)
