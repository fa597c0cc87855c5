"""Kracker Core: registration, login and bearer-token authentication."""

__version__ = "0.1.0"
