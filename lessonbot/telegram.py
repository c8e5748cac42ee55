"""Minimal client for the Telegram Bot HTTP API."""

from __future__ import annotations

import logging
import time

import requests

log = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"


class TelegramError(Exception):
    """An error reported by the Bot API or an unusable response."""

    def __init__(self, description, error_code=None):
        super().__init__(description)
        self.description = description
        self.error_code = error_code


class TelegramBot:
    """Calls Bot API methods with a bot token."""

    retry_delay = 3.0

    def __init__(self, token, session=None):
        self.token = token
        self.session = session if session is not None else requests.Session()

    def _call(self, method, payload=None, timeout=30):
        url = f"{API_URL}/bot{self.token}/{method}"
        log.debug("%s %s", method, payload)
        response = self.session.post(url, json=payload or {}, timeout=timeout)
        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise TelegramError(f"invalid response to {method}") from None
        if not data.get("ok"):
            raise TelegramError(
                data.get("description", f"{method} failed"), data.get("error_code")
            )
        return data.get("result")

    def get_me(self):
        """Return the bot's own user record."""
        return self._call("getMe")

    def get_updates(self, offset=0, timeout=60):
        """Long-poll for updates starting at the given offset."""
        return self._call(
            "getUpdates", {"offset": offset, "timeout": timeout}, timeout=timeout + 10
        )

    def updates(self, timeout=60):
        """Yield incoming updates forever, retrying after failures."""
        offset = 0
        while True:
            try:
                batch = self.get_updates(offset, timeout)
            except (TelegramError, requests.RequestException) as err:
                log.warning("Failed to get updates, retrying: %s", err)
                time.sleep(self.retry_delay)
                continue
            for update in batch:
                offset = max(offset, update["update_id"] + 1)
                yield update

    def send_message(self, chat_id, text, reply_markup=None):
        """Send a text message, optionally with a keyboard."""
        payload = {"chat_id": chat_id, "text": text}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload)

    def edit_message_reply_markup(self, chat_id, message_id, reply_markup):
        """Replace the inline keyboard of a sent message."""
        return self._call(
            "editMessageReplyMarkup",
            {"chat_id": chat_id, "message_id": message_id, "reply_markup": reply_markup},
        )

    def answer_callback_query(self, callback_query_id, text=""):
        """Acknowledge a callback query."""
        return self._call(
            "answerCallbackQuery", {"callback_query_id": callback_query_id, "text": text}
        )