"""Reply keyboards and text summaries shown to users."""

from __future__ import annotations

FREE_LESSONS = "📅 Свободные занятия"
REGISTER = "✅ Записаться"
CANCEL = "❌ Отменить запись"
MY_LESSONS = "👤 Мои занятия"
ADD_LESSON = "Добавить занятие"
DELETE_LESSON = "Удалить доступное занятие"


def _button(text):
    return {"text": text}


def main_menu(user_id, admin_id):
    """Return the main reply keyboard, with admin actions for the admin."""
    rows = [
        [_button(FREE_LESSONS), _button(REGISTER)],
        [_button(CANCEL), _button(MY_LESSONS)],
    ]
    if user_id == admin_id:
        rows.append([_button(ADD_LESSON), _button(DELETE_LESSON)])
    return {"keyboard": rows}


def lessons_list_message(db):
    """Return the list of free lessons as text."""
    lessons = db.get_available_lessons()
    if not lessons:
        return "Нет доступных занятий."
    lines = "".join(f"🔹 {lesson.name} — {lesson.date}\n" for lesson in lessons)
    return "📅 Доступные занятия:\n" + lines


def my_lessons_message(db, user_id, admin_id):
    """Return the user's registrations as text; the admin sees all of them."""
    if user_id == admin_id:
        lessons = db.get_admin_lessons()
    else:
        lessons = db.get_user_lessons(user_id)
    if not lessons:
        return "У вас нет записей."
    lines = "".join(f"🔸 {lesson.name} — {lesson.date}\n" for lesson in lessons)
    return "👤 Ваши записи:\n" + lines