import os
import sys
import logging
from dotenv import load_dotenv

# ============================================================================
# CONFIGURATION
# ============================================================================

DEFAULT_DB_NAME = 'restaurantDirectory'
DEFAULT_THEME_COLOR = '#D97706'  # amber-600
DEFAULT_CURRENCY = 'Birr'


class ConfigurationError(RuntimeError):
    """Raised when the environment cannot produce a usable configuration"""


def _int_setting(environ, name, default):
    raw = environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f'{name} must be an integer, got {raw!r}')


def _bool_setting(environ, name, default=False):
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def load_settings(environ=None):
    """Build the Flask config mapping from environment variables.

    A `.env` file in the working directory is loaded first when reading the
    real process environment. MONGODB_URI is not checked here: it is only
    required once a real database client is built.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return {
        'SECRET_KEY': environ.get('SECRET_KEY', 'dev-secret-key-change-in-production'),
        'MONGODB_URI': environ.get('MONGODB_URI') or None,
        'MONGODB_DB_NAME': environ.get('MONGODB_DB_NAME') or DEFAULT_DB_NAME,
        'MONGODB_MAX_POOL_SIZE': _int_setting(environ, 'MONGODB_MAX_POOL_SIZE', 10),
        'MONGODB_CONNECT_TIMEOUT_MS': _int_setting(environ, 'MONGODB_CONNECT_TIMEOUT_MS', 5000),
        'MONGODB_SOCKET_TIMEOUT_MS': _int_setting(environ, 'MONGODB_SOCKET_TIMEOUT_MS', 45000),
        'DEFAULT_THEME_COLOR': environ.get('DEFAULT_THEME_COLOR') or DEFAULT_THEME_COLOR,
        'CURRENCY_LABEL': environ.get('CURRENCY_LABEL') or DEFAULT_CURRENCY,
        'ENABLE_DEBUG_ENDPOINT': _bool_setting(environ, 'ENABLE_DEBUG_ENDPOINT'),
        'LOG_LEVEL': (environ.get('LOG_LEVEL') or 'INFO').upper(),
    }


def configure_logging(level='INFO'):
    """Send application logs to stdout; a no-op if logging is already set up"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        stream=sys.stdout,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
