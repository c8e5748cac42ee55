"""Command-line entry point that starts the bot."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
from pathlib import Path

import requests
from dotenv import load_dotenv

from .db import open_database
from .handlers import Handler
from .telegram import TelegramBot, TelegramError

log = logging.getLogger(__name__)

ADMIN_ID = 288848928


def main(argv=None):
    """Start the lesson booking bot; return an exit status."""
    parser = argparse.ArgumentParser(
        prog="lessonbot",
        description="Telegram bot for booking lessons. "
        "Reads TELEGRAM_TOKEN and DB_FILE from the environment or .env.",
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(message)s")

    load_dotenv(Path.cwd() / ".env")

    try:
        db = open_database(os.environ.get("DB_FILE") or None)
    except (sqlite3.Error, OSError) as err:
        log.critical("Ошибка инициализации БД: %s", err)
        return 1

    with db:
        token = os.environ.get("TELEGRAM_TOKEN", "")
        if not token:
            log.critical("TELEGRAM_TOKEN не найден в .env")
            return 1

        bot = TelegramBot(token)
        try:
            me = bot.get_me()
        except (TelegramError, requests.RequestException) as err:
            log.critical("Ошибка запуска бота: %s", err)
            return 1
        log.info("✅ Бот авторизован как @%s", (me or {}).get("username", ""))

        try:
            Handler(bot, db, ADMIN_ID).run()
        except KeyboardInterrupt:
            pass
    return 0