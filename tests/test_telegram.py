from itertools import islice

import pytest

from lessonbot.telegram import TelegramBot, TelegramError


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def json(self):
        return self.payload

    def raise_for_status(self):
        pass


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return FakeResponse(item)


def ok(result):
    return {"ok": True, "result": result}


def test_send_message_posts_payload():
    session = FakeSession([ok({"message_id": 5})])
    bot = TelegramBot("token", session)
    result = bot.send_message(42, "hello", {"keyboard": []})
    assert result == {"message_id": 5}
    url, payload, _ = session.calls[0]
    assert url.endswith("/bottoken/sendMessage")
    assert payload == {"chat_id": 42, "text": "hello", "reply_markup": {"keyboard": []}}


def test_send_message_without_markup_omits_key():
    session = FakeSession([ok({})])
    TelegramBot("token", session).send_message(1, "x")
    assert "reply_markup" not in session.calls[0][1]


def test_error_response_raises():
    session = FakeSession([{"ok": False, "description": "Unauthorized", "error_code": 401}])
    bot = TelegramBot("token", session)
    with pytest.raises(TelegramError) as info:
        bot.get_me()
    assert info.value.error_code == 401
    assert info.value.description == "Unauthorized"


def test_get_me_returns_result():
    session = FakeSession([ok({"username": "lessons"})])
    assert TelegramBot("token", session).get_me() == {"username": "lessons"}
    assert session.calls[0][0].endswith("/getMe")


def test_updates_advance_offset():
    session = FakeSession(
        [
            ok([{"update_id": 7}, {"update_id": 8}]),
            ok([{"update_id": 9}]),
        ]
    )
    bot = TelegramBot("token", session)
    got = list(islice(bot.updates(timeout=5), 3))
    assert [u["update_id"] for u in got] == [7, 8, 9]
    assert session.calls[0][1] == {"offset": 0, "timeout": 5}
    assert session.calls[1][1] == {"offset": 9, "timeout": 5}


def test_updates_retry_after_error():
    session = FakeSession(
        [{"ok": False, "description": "Conflict", "error_code": 409}, ok([{"update_id": 1}])]
    )
    bot = TelegramBot("token", session)
    bot.retry_delay = 0
    got = list(islice(bot.updates(), 1))
    assert got == [{"update_id": 1}]
    assert len(session.calls) == 2


def test_edit_and_answer_payloads():
    session = FakeSession([ok(True), ok(True)])
    bot = TelegramBot("token", session)
    bot.edit_message_reply_markup(3, 11, {"inline_keyboard": []})
    bot.answer_callback_query("cb1")
    assert session.calls[0][0].endswith("/editMessageReplyMarkup")
    assert session.calls[0][1] == {
        "chat_id": 3,
        "message_id": 11,
        "reply_markup": {"inline_keyboard": []},
    }
    assert session.calls[1][1] == {"callback_query_id": "cb1", "text": ""}