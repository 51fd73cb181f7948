"""
Configuration settings for Wayback Saver
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / '.env')

# Numeric settings that failed to parse, reported by validate_config()
_PARSE_ERRORS = []


def _env_number(name, default, cast=float):
    """Read a numeric setting, falling back to the default on a bad value"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return cast(default)
    try:
        return cast(raw)
    except ValueError:
        _PARSE_ERRORS.append(f"{name} must be a number, got '{raw}'")
        return cast(default)


# Archive endpoints
ARCHIVE_LOGIN_URL = os.getenv('ARCHIVE_LOGIN_URL', 'https://archive.org/account/login')
WAYBACK_SAVE_URL = os.getenv('WAYBACK_SAVE_URL', 'https://web.archive.org/save')

# Default credentials file (overridden by --login-file)
ARCHIVE_LOGIN_FILE = os.getenv('ARCHIVE_LOGIN_FILE')

# Pacing
SAVE_DELAY_SECONDS = _env_number('SAVE_DELAY_SECONDS', 5)
LOGIN_SETTLE_SECONDS = _env_number('LOGIN_SETTLE_SECONDS', 3)
SAVING_TIMEOUT_SECONDS = _env_number('SAVING_TIMEOUT_SECONDS', 60)
MAX_SAVING_TIMEOUT_SECONDS = 60

# Browser
SELENIUM_HEADLESS = os.getenv('SELENIUM_HEADLESS', 'false').lower() == 'true'
SELENIUM_TIMEOUT = _env_number('SELENIUM_TIMEOUT', 30, int)
CHROMIUM_BINARY = os.getenv('CHROMIUM_BINARY', '/usr/bin/chromium')

# Logging Configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = Path(os.getenv('LOG_DIR', 'logs'))
LOG_FILENAME = 'wayback_saver.log'
LOG_RETENTION_DAYS = _env_number('LOG_RETENTION_DAYS', 14, int)


# Validation
def validate_config():
    """Validate that all settings are usable"""
    from common.errors import ConfigError

    errors = list(_PARSE_ERRORS)

    if SAVE_DELAY_SECONDS < 0:
        errors.append("SAVE_DELAY_SECONDS cannot be negative")

    if LOGIN_SETTLE_SECONDS < 0:
        errors.append("LOGIN_SETTLE_SECONDS cannot be negative")

    if not 0 < SAVING_TIMEOUT_SECONDS <= MAX_SAVING_TIMEOUT_SECONDS:
        errors.append(
            f"SAVING_TIMEOUT_SECONDS must be between 0 and {MAX_SAVING_TIMEOUT_SECONDS} seconds"
        )

    if SELENIUM_TIMEOUT <= 0:
        errors.append("SELENIUM_TIMEOUT must be positive")

    if LOG_LEVEL.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        errors.append(f"LOG_LEVEL '{LOG_LEVEL}' is not a valid logging level")

    if errors:
        raise ConfigError("Configuration errors:\n" + "\n".join(f"- {e}" for e in errors))

    return True


if __name__ == '__main__':
    try:
        validate_config()
        print("✓ Configuration is valid")
        print(f"✓ Login URL: {ARCHIVE_LOGIN_URL}")
        print(f"✓ Save URL: {WAYBACK_SAVE_URL}")
        print(f"✓ Log directory: {LOG_DIR}")
    except ValueError as e:
        print(f"✗ {e}")
