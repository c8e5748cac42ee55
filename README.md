# lessonbot

A Telegram bot for booking lessons. An administrator publishes lesson
slots. Students browse the free ones, book a slot and cancel their
bookings. All data is kept in a local SQLite database.

## Installation

```
pip install .
```

## Configuration

The bot reads its settings from the environment. It also loads a `.env`
file from the current directory if one is there.

| Variable         | Meaning                                                                |
|------------------|------------------------------------------------------------------------|
| `TELEGRAM_TOKEN` | Bot token issued by BotFather (required)                               |
| `DB_FILE`        | Directory that holds `scheduler.db`; defaults to the working directory |

Example `.env`:

```
TELEGRAM_TOKEN=token
DB_FILE=/var/lib/lessonbot
```

The administrator is a fixed Telegram user id (`ADMIN_ID` in
`lessonbot.cli`). It cannot be set from the environment.

## Running

```
lessonbot
```

The command opens the database and creates its tables if the file is new.
It then checks the token with `getMe` and long-polls Telegram for updates
until it is interrupted. Logging is written at debug level. The command
returns exit status 1 if the database cannot be opened, the token is
missing, or the token is rejected.

## Using the bot

Send `/start` to get the main menu:

- **📅 Свободные занятия**: lists the lessons nobody has booked.
- **✅ Записаться**: pick a day that has free lessons, then a lesson on that
  day. A lesson holds one booking. If someone else has booked it already,
  the request is ignored.
- **❌ Отменить запись**: pick one of your bookings to cancel it.
- **👤 Мои занятия**: lists your bookings. The administrator sees every
  booked lesson.

The administrator gets two more buttons:

- **Добавить занятие**: pick one of the next seven days. Toggle one or more
  hours from 10:00 to 21:00, press **✅ Готово**, then choose the lesson
  type (`Онлайн показ`, `Взвод` or `Любое`). One lesson named `Занятие` is
  added for each chosen hour.
- **Удалить доступное занятие**: delete a lesson that nobody has booked.

Other users who press these buttons are told the actions are for the
administrator only.

## Using it as a library

```python
from lessonbot.db import open_database
from lessonbot.menus import lessons_list_message

with open_database(".") as db:
    db.add_lesson("Занятие", "Взвод", "2025-07-09 18:00:00")
    print(lessons_list_message(db))
```

- `lessonbot.db.Database(path)` opens or creates the SQLite file. Its
  methods add, delete and list lessons and register or cancel bookings.
  Rows come back as frozen `Lesson` dataclasses with `id`, `name`, `title`
  and `date`. `open_database(directory=None)` opens `scheduler.db` in a
  directory.
- `lessonbot.menus` builds the main reply keyboard and the text summaries.
- `lessonbot.telegram.TelegramBot(token, session=None)` is a small Bot API
  client built on `requests`. Failed calls raise `TelegramError`.
- `lessonbot.handlers.Handler(bot, db, admin_id, clock=None)` handles
  messages and button callbacks. Call `run()` to poll for updates and
  handle them, or pass single update dicts to `handle_update()`.

The state of lessons being added is kept in memory, so it is lost when the
bot restarts.

## Tests

```
pip install .[test]
pytest
```