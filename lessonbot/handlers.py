"""Dispatch of chat messages and inline-button callbacks."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

import requests

from .menus import (
    ADD_LESSON,
    CANCEL,
    DELETE_LESSON,
    FREE_LESSONS,
    MY_LESSONS,
    REGISTER,
    lessons_list_message,
    main_menu,
    my_lessons_message,
)
from .telegram import TelegramError

log = logging.getLogger(__name__)

MONTHS = (
    "января", "февраля", "марта", "апреля", "мая", "июня",
    "июля", "августа", "сентября", "октября", "ноября", "декабря",
)
TIME_HOURS = range(10, 22)
LESSON_TYPES = ("Онлайн показ", "Взвод", "Любое")
LESSON_NAME = "Занятие"

ADMIN_ONLY = "⛔️ Только для администратора."
NO_RECORDS = "У вас нет записей."
FETCH_ERROR = "Ошибка при получении занятий."
BAD_ID = "❌ Неверный ID."
CHOOSE_FOR_DELETE = "Выберите занятие для удаления:"


def format_date(day):
    """Format a date as day and genitive month name, e.g. "09 июля"."""
    return f"{day.day:02d} {MONTHS[day.month - 1]}"


def inline_button(text, data):
    """Return an inline keyboard button carrying callback data."""
    return {"text": text, "callback_data": data}


def inline_markup(rows):
    """Return an inline keyboard markup from rows of buttons."""
    return {"inline_keyboard": [list(row) for row in rows]}


def date_keyboard_for_registration(db, prefix):
    """Return a keyboard with one button per day that has free lessons."""
    try:
        days = db.get_dates_with_available_lessons()
    except sqlite3.Error as err:
        log.error("Ошибка получения доступных дат: %s", err)
        return inline_markup([])
    rows = []
    for day in days:
        try:
            label = datetime.strptime(day, "%Y-%m-%d").strftime("%d.%m")
        except (TypeError, ValueError):
            label = "01.01"
        rows.append([inline_button(label, f"{prefix}:{day}")])
    return inline_markup(rows)


def date_keyboard_for_add(prefix, today=None):
    """Return a keyboard of the next seven days; data holds the day offset."""
    start = today if today is not None else datetime.now()
    return inline_markup(
        [inline_button(format_date(start + timedelta(days=offset)), f"{prefix}:{offset}")]
        for offset in range(7)
    )


def time_keyboard(selected=()):
    """Return the hour picker, marking the selected times."""
    chosen = set(selected)
    rows = []
    for hour in TIME_HOURS:
        label = f"{hour:02d}:00"
        text = f"✅ {label}" if label in chosen else label
        if hour % 3 == 1:
            rows.append([])
        rows[-1].append(inline_button(text, "add_time_multi:" + label))
    rows.append([inline_button("✅ Готово", "add_time_done")])
    return inline_markup(rows)


def _type_keyboard():
    return inline_markup([[inline_button(kind, f"add_type:{kind}") for kind in LESSON_TYPES]])


def _lesson_keyboard(lessons, action):
    return inline_markup(
        [inline_button(f"{lesson.title} — {lesson.date[11:]}", f"{action}:{lesson.id}")]
        for lesson in lessons
    )


def _atoi(text):
    try:
        return int(text)
    except ValueError:
        return 0


@dataclass
class _Draft:
    day: date | None = None
    times: list = field(default_factory=list)
    time: str | None = None


class Handler:
    """Reacts to updates from the bot using the lesson database."""

    def __init__(self, bot, db, admin_id, clock=None):
        self.bot = bot
        self.db = db
        self.admin_id = admin_id
        self.clock = clock if clock is not None else datetime.now
        self._drafts = {}
        self._callback_actions = {
            "add_date": self._on_add_date,
            "add_time_multi": self._on_add_time_multi,
            "add_time": self._on_add_time,
            "add_type": self._on_add_type,
            "register_date": self._on_register_date,
            "register": self._on_register,
            "delete_lesson": self._on_delete_lesson,
            "cancel_lesson": self._on_cancel_lesson,
        }

    def run(self, timeout=60):
        """Process updates from the bot until the stream ends."""
        for update in self.bot.updates(timeout):
            try:
                self.handle_update(update)
            except (TelegramError, requests.RequestException) as err:
                log.error("Failed to handle update %s: %s", update.get("update_id"), err)

    def handle_update(self, update):
        """Route one update to the callback or message handler."""
        if update.get("callback_query"):
            self.handle_callback(update["callback_query"])
        elif update.get("message"):
            self.handle_message(update["message"])

    def _send(self, chat_id, text, reply_markup=None):
        self.bot.send_message(chat_id, text, reply_markup)

    def _registered_lessons(self, user_id):
        if user_id == self.admin_id:
            return self.db.get_admin_lessons()
        return self.db.get_user_lessons(user_id)

    def handle_message(self, message):
        """Answer a text message from the reply keyboard."""
        user_id = message.get("from", {}).get("id")
        chat_id = message["chat"]["id"]
        text = message.get("text", "")

        if text == "/start":
            self._send(chat_id, "Добро пожаловать!", main_menu(user_id, self.admin_id))
        elif text == ADD_LESSON:
            if user_id != self.admin_id:
                self._send(chat_id, ADMIN_ONLY)
                return
            self._drafts.pop(user_id, None)
            self._send(chat_id, "Выберите дату:", date_keyboard_for_add("add_date", self.clock()))
        elif text == DELETE_LESSON:
            if user_id != self.admin_id:
                self._send(chat_id, ADMIN_ONLY)
                return
            try:
                lessons = self.db.get_available_lessons()
            except sqlite3.Error:
                lessons = []
            if not lessons:
                self._send(chat_id, NO_RECORDS)
                return
            self._send(chat_id, CHOOSE_FOR_DELETE, _lesson_keyboard(lessons, "delete_lesson"))
        elif text == FREE_LESSONS:
            try:
                reply = lessons_list_message(self.db)
            except sqlite3.Error:
                reply = FETCH_ERROR
            self._send(chat_id, reply)
        elif text == REGISTER:
            self._send(
                chat_id,
                "Выберите день:",
                date_keyboard_for_registration(self.db, "register_date"),
            )
        elif text == MY_LESSONS:
            try:
                reply = my_lessons_message(self.db, user_id, self.admin_id)
            except sqlite3.Error:
                reply = FETCH_ERROR
            self._send(chat_id, reply)
        elif text == CANCEL:
            try:
                lessons = self._registered_lessons(user_id)
            except sqlite3.Error:
                lessons = []
            if not lessons:
                self._send(chat_id, NO_RECORDS)
                return
            self._send(chat_id, CHOOSE_FOR_DELETE, _lesson_keyboard(lessons, "cancel_lesson"))
        else:
            self._send(chat_id, "Выберите действие из меню.")

    def handle_callback(self, callback):
        """Answer an inline-button press."""
        data = callback.get("data", "")
        user_id = callback["from"]["id"]
        chat_id = callback["message"]["chat"]["id"]

        if data == "add_time_done":
            answer = self._on_add_time_done(callback, user_id, chat_id, "")
        else:
            action, sep, arg = data.partition(":")
            handler = self._callback_actions.get(action) if sep else None
            answer = handler(callback, user_id, chat_id, arg) if handler else True
        if answer:
            self.bot.answer_callback_query(callback["id"], "")

    def _on_add_date(self, callback, user_id, chat_id, arg):
        selected = self.clock().date() + timedelta(days=_atoi(arg))
        self._drafts[user_id] = _Draft(day=selected)
        self._send(chat_id, "Выберите одно или несколько времен:", time_keyboard([]))
        return True

    def _on_add_time_multi(self, callback, user_id, chat_id, arg):
        draft = self._drafts.get(user_id)
        if draft is None or draft.day is None:
            self._send(chat_id, "⚠️ Начните с выбора даты.")
            return False
        if arg in draft.times:
            draft.times.remove(arg)
        else:
            draft.times.append(arg)
        self.bot.edit_message_reply_markup(
            chat_id, callback["message"]["message_id"], time_keyboard(draft.times)
        )
        return True

    def _on_add_time_done(self, callback, user_id, chat_id, arg):
        draft = self._drafts.get(user_id)
        if draft is None or not draft.times:
            self._send(chat_id, "❗ Сначала выберите хотя бы одно время.")
            return False
        self._send(chat_id, "Выберите тип занятия:", _type_keyboard())
        return True

    def _on_add_time(self, callback, user_id, chat_id, arg):
        self._drafts.setdefault(user_id, _Draft()).time = arg
        self._send(chat_id, "Выберите тип занятия:", _type_keyboard())
        return True

    def _on_add_type(self, callback, user_id, chat_id, arg):
        draft = self._drafts.get(user_id)
        if draft is None or draft.day is None:
            self._send(chat_id, "⚠️ Данные не найдены, начните сначала.")
            return False
        results = []
        for slot in draft.times:
            try:
                moment = datetime.strptime(f"{draft.day:%Y-%m-%d} {slot}", "%Y-%m-%d %H:%M")
            except ValueError:
                results.append(f"❌ {slot} — неверный формат даты")
                continue
            try:
                self.db.add_lesson(LESSON_NAME, arg, moment.strftime("%Y-%m-%d %H:%M:%S"))
            except sqlite3.Error as err:
                results.append(f"❌ {slot} — ошибка: {err}")
            else:
                results.append(f"✅ {slot}")
        summary = f"Добавлены занятия на {draft.day:%d.%m.%Y} в :\n" + "\n".join(results)
        self._send(chat_id, summary)
        del self._drafts[user_id]
        return True

    def _on_register_date(self, callback, user_id, chat_id, arg):
        try:
            lessons = self.db.get_lessons_by_date(arg)
        except sqlite3.Error:
            lessons = []
        if not lessons:
            self._send(chat_id, "Нет доступных занятий на эту дату.")
            return True
        self._send(chat_id, f"Занятия на {arg}:", _lesson_keyboard(lessons, "register"))
        return True

    def _on_register(self, callback, user_id, chat_id, arg):
        try:
            self.db.register_user_to_lesson(user_id, _atoi(arg))
        except sqlite3.Error as err:
            text = f"⚠️ Не удалось записаться: {err}"
        else:
            text = "✅ Вы успешно записаны!"
        self._send(chat_id, text)
        return True

    def _on_delete_lesson(self, callback, user_id, chat_id, arg):
        try:
            lesson_id = int(arg)
        except ValueError:
            self._send(chat_id, BAD_ID)
            return False
        try:
            self.db.delete_lesson(lesson_id)
        except sqlite3.Error as err:
            self._send(chat_id, f"❌ Ошибка при удалении: {err}")
        else:
            self._send(chat_id, "✅ Урок успешно удалён.")
        return True

    def _on_cancel_lesson(self, callback, user_id, chat_id, arg):
        try:
            lesson_id = int(arg)
        except ValueError:
            self._send(chat_id, BAD_ID)
            return False
        try:
            self.db.cancel_user_registration(user_id, lesson_id)
        except sqlite3.Error as err:
            self._send(chat_id, f"❌ Ошибка при отмене: {err}")
        else:
            self._send(chat_id, "✅ Урок успешно отменён.")
        return True