# -*- coding: utf-8 -*-
"""
================================================================================
Common Utility Functions
================================================================================
Purpose:
----------------
Shared helpers used by every module of the store application:

- `get_secret(key_name)`: reads a `KEY=VALUE` line from `secrets.txt` in the
  project root. This is where the database password lives if one is needed.
- `get_setting(key_name, default)`: resolves a setting from `secrets.txt`
  first, then the environment, then the default.
- `load_settings(overrides)`: builds the full settings dictionary used to
  connect to PostgreSQL and configure the order workflow.
- `setup_logging(log_dir)`: configures the root logger with a daily log file
  and a console handler.
----------------
"""

# =====================================================================================
# --- Imports and Configuration ---
# =====================================================================================
import os
import sys
import logging
from datetime import datetime

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# The secrets file is optional. Settings fall back to environment variables.
SECRETS_FILE = os.path.join(PROJECT_ROOT, 'secrets.txt')

LOG_DIR = os.path.join(PROJECT_ROOT, 'logs')

DEFAULT_SETTINGS = {
    'POSTGRES_DB': 'amazon',
    'POSTGRES_PORT': '5432',
    'POSTGRES_USER': 'postgres',
    'POSTGRES_PASSWORD': '',
    'POSTGRES_HOST': 'localhost',
    # There are already 500 orders in the reference data set.
    'ORDER_NUMBER_BASE': '501',
    # 'memory' or 'sequence'
    'ORDER_NUMBER_SOURCE': 'memory',
    'ORDER_NUMBER_SEQUENCE': 'orders_ordernumber_seq',
    'STORE_RADIUS_MILES': '30',
}


# =====================================================================================
# --- Core Functions ---
# =====================================================================================

def get_secret(key_name):
    """
    Reads a specific key from the `secrets.txt` file.

    The file is a simple key-value store with one `KEY_NAME=SECRET_VALUE` per
    line. Unlike API keys, database settings are optional, so a missing file
    or key is not an error.

    Args:
        key_name (str): The name of the key to retrieve (e.g., "POSTGRES_PASSWORD").

    Returns:
        str or None: The value if the key is found, otherwise None.
    """
    try:
        with open(SECRETS_FILE, 'r') as f:
            for line in f:
                if line.startswith(key_name + '='):
                    return line.strip().split('=', 1)[1]
    except FileNotFoundError:
        return None
    return None


def get_setting(key_name, default=None):
    """Resolves a setting from secrets.txt, then the environment, then `default`."""
    value = get_secret(key_name)
    if value is None:
        value = os.getenv(key_name)
    if value is None:
        value = default
    return value


def load_settings(overrides=None):
    """
    Builds the settings dictionary for a session.

    Args:
        overrides (dict, optional): Values taken from the command line. Keys
            whose value is None are ignored.

    Returns:
        dict: Every key of DEFAULT_SETTINGS, resolved to a string.
    """
    settings = {key: get_setting(key, default) for key, default in DEFAULT_SETTINGS.items()}
    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = str(value)
    return settings


def setup_logging(log_dir=LOG_DIR, console_level=logging.WARNING):
    """
    Sets up a daily log file plus a console handler on the root logger.

    The interactive menu prints to stdout, so the console handler writes to
    stderr and only shows warnings and above by default.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_filename = datetime.now().strftime("amazon_store_%Y-%m-%d.log")
    log_path = os.path.join(log_dir, log_filename)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_path),
            console_handler
        ]
    )
    return logging.getLogger()
