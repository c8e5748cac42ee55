from unittest.mock import patch

import pytest

from lessonbot.cli import main


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("DB_FILE", "TELEGRAM_TOKEN"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_missing_token_fails_after_creating_db(clean_env, tmp_path):
    clean_env.setenv("DB_FILE", str(tmp_path))
    assert main([]) == 1
    assert (tmp_path / "scheduler.db").exists()


def test_db_in_working_directory_by_default(clean_env, tmp_path):
    assert main([]) == 1
    assert (tmp_path / "scheduler.db").exists()


def test_env_file_is_loaded(clean_env, tmp_path):
    target = tmp_path / "data"
    target.mkdir()
    (tmp_path / ".env").write_text(f"DB_FILE={target}\n", encoding="utf-8")
    assert main([]) == 1
    assert (target / "scheduler.db").exists()


def test_bad_db_directory_fails(clean_env, tmp_path):
    clean_env.setenv("DB_FILE", str(tmp_path / "missing" / "dir"))
    assert main([]) == 1
    assert not (tmp_path / "missing").exists()


def test_rejected_token_fails(clean_env, tmp_path):
    clean_env.setenv("TELEGRAM_TOKEN", "token")
    with patch("requests.Session.post") as post:
        post.return_value.json.return_value = {
            "ok": False,
            "description": "Unauthorized",
            "error_code": 401,
        }
        assert main([]) == 1
    assert post.call_args[0][0].endswith("/getMe")


def test_help_exits_cleanly():
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0