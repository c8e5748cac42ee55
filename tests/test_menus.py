from lessonbot.db import Database
from lessonbot.menus import (
    ADD_LESSON,
    DELETE_LESSON,
    lessons_list_message,
    main_menu,
    my_lessons_message,
)

import pytest

ADMIN = 288848928


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "menus.db")
    yield database
    database.close()


def _texts(markup):
    return [[button["text"] for button in row] for row in markup["keyboard"]]


def test_main_menu_for_regular_user():
    rows = _texts(main_menu(1, ADMIN))
    assert rows == [
        ["📅 Свободные занятия", "✅ Записаться"],
        ["❌ Отменить запись", "👤 Мои занятия"],
    ]


def test_main_menu_for_admin_has_extra_row():
    rows = _texts(main_menu(ADMIN, ADMIN))
    assert len(rows) == 3
    assert rows[2] == [ADD_LESSON, DELETE_LESSON]


def test_lessons_list_empty(db):
    assert lessons_list_message(db) == "Нет доступных занятий."


def test_lessons_list_contents(db):
    db.add_lesson("Занятие", "Взвод", "2024-05-01 10:00:00")
    assert lessons_list_message(db) == (
        "📅 Доступные занятия:\n🔹 Занятие — 2024-05-01 10:00:00\n"
    )


def test_my_lessons_empty(db):
    assert my_lessons_message(db, 5, ADMIN) == "У вас нет записей."


def test_my_lessons_for_user(db):
    lesson_id = db.add_lesson("Занятие", "Взвод", "2024-05-01 10:00:00")
    db.add_lesson("Занятие", "Любое", "2024-05-02 10:00:00")
    db.register_user_to_lesson(5, lesson_id)
    assert my_lessons_message(db, 5, ADMIN) == (
        "👤 Ваши записи:\n🔸 Занятие — 2024-05-01 10:00:00\n"
    )


def test_admin_sees_all_registrations(db):
    first = db.add_lesson("Занятие", "A", "2024-05-01 10:00:00")
    second = db.add_lesson("Занятие", "B", "2024-05-02 10:00:00")
    db.register_user_to_lesson(5, first)
    db.register_user_to_lesson(6, second)
    text = my_lessons_message(db, ADMIN, ADMIN)
    assert text.count("🔸") == 2
    assert my_lessons_message(db, 5, ADMIN).count("🔸") == 1