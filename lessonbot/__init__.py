"""Telegram bot for publishing and booking lesson slots, backed by SQLite."""

__version__ = "0.1.0"