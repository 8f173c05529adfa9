"""Settings, config discovery and logging setup."""
