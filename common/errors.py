"""
Startup error types.

Everything that must stop the run before a single URL is submitted raises
one of these. Only the CLI entry point decides the process exit code.
"""


class StartupError(ValueError):
    """Base class for fatal startup failures."""


class ConfigError(StartupError):
    """Invalid settings from the environment or .env file."""


class CredentialsError(StartupError):
    """Missing, unreadable or invalid login file."""


class UrlSourceError(StartupError):
    """URL sources that cannot be used (strict URL-file mode, no sources at all)."""


class BrowserError(StartupError):
    """Unknown browser name, or a browser/driver that cannot be started."""


class LoginError(StartupError):
    """The login page or its form could not be reached."""
