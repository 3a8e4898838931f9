class SnakeError(Exception):
    """Base class for errors raised by the snake package."""


class ConfigError(SnakeError):
    """Invalid configuration value."""
