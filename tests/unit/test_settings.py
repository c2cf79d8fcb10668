import logging

import pytest

import ara_config.settings as settings_mod
from ara_config.settings import DEFAULT_API_SERVER, AraSettings, parse_args, resolve_settings


def test_parse_args_empty():
    assert parse_args([]) == {}


def test_parse_args_all_flags_any_order():
    cfg = parse_args(["--password", "pass123", "--api-server", "http://example.com", "--username", "user1"])
    assert cfg == {"api_server": "http://example.com", "username": "user1", "password": "pass123"}


def test_parse_args_flag_without_value_exits():
    with pytest.raises(SystemExit):
        parse_args(["--api-server"])


def test_help_exits_zero(capsys):
    with pytest.raises(SystemExit) as ei:
        parse_args(["--help"])
    assert ei.value.code == 0
    assert "--api-server" in capsys.readouterr().out


def test_defaults_when_nothing_configured():
    s = resolve_settings({}, env={})
    assert s == AraSettings()
    assert s.api_server == DEFAULT_API_SERVER == "http://localhost:8000"
    assert s.username is None and s.password is None
    assert not s.has_credentials


def test_env_used_when_no_cli():
    env = {"ARA_API_SERVER": "https://ara.example.com", "ARA_USERNAME": "admin", "ARA_PASSWORD": "secret"}
    s = resolve_settings({}, env=env)
    assert s.api_server == "https://ara.example.com"
    assert s.username == "admin"
    assert s.password == "secret"
    assert s.has_credentials


def test_cli_beats_env():
    env = {"ARA_API_SERVER": "https://env.example.com", "ARA_USERNAME": "env-user", "ARA_PASSWORD": "env-pass"}
    s = resolve_settings({"api_server": "http://cli.example.com", "username": "cli-user"}, env=env)
    assert s.api_server == "http://cli.example.com"
    assert s.username == "cli-user"
    assert s.password == "env-pass"


def test_empty_env_values_count_as_unset():
    s = resolve_settings({}, env={"ARA_API_SERVER": "", "ARA_USERNAME": ""})
    assert s.api_server == DEFAULT_API_SERVER
    assert s.username is None


@pytest.mark.parametrize("raw,expected", [("5", 5.0), ("0", None), ("abc", None), ("", None)])
def test_http_timeout_from_env(raw, expected):
    assert resolve_settings({}, env={"ARA_HTTP_TIMEOUT": raw}).http_timeout == expected


def test_resolve_reads_process_env(monkeypatch):
    monkeypatch.setenv("ARA_API_SERVER", "http://from-env:8000")
    monkeypatch.delenv("ARA_USERNAME", raising=False)
    assert resolve_settings().api_server == "http://from-env:8000"


def test_load_env_once_does_not_override(tmp_path, monkeypatch):
    env_file = tmp_path / "ara.env"
    env_file.write_text("ARA_USERNAME=from-file\nARA_PASSWORD=file-pass\n", encoding="utf-8")
    monkeypatch.setenv("ARA_ENV_FILE", str(env_file))
    monkeypatch.setenv("ARA_USERNAME", "already-set")
    monkeypatch.delenv("ARA_PASSWORD", raising=False)
    settings_mod.load_env_once.cache_clear()

    try:
        assert settings_mod.load_env_once() == env_file.resolve()
        s = resolve_settings({})
        assert s.username == "already-set"
        assert s.password == "file-pass"
    finally:
        settings_mod.load_env_once.cache_clear()
        monkeypatch.delenv("ARA_PASSWORD", raising=False)


def test_configure_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setenv("ARA_LOG_LEVEL", "DEBUG")
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

    settings_mod.configure_logging()
    assert calls and calls[0]["level"] == logging.DEBUG

    monkeypatch.setattr(root, "handlers", [logging.NullHandler()])
    settings_mod.configure_logging()
    assert len(calls) == 1
