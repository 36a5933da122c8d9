from config import AppConfig, LlmRoute, SpeechRoute, default_config, load_config
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.PAUSE_THRESHOLD_SECONDS == 0.5
    assert settings.DEFAULT_LANGUAGE == "en"
    assert settings.LIST_LIMIT_DEFAULT == 10


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PAUSE_THRESHOLD_SECONDS", "0.8")
    monkeypatch.setenv("LIST_LIMIT_MAX", "25")

    settings = Settings(_env_file=None)

    assert settings.PAUSE_THRESHOLD_SECONDS == 0.8
    assert settings.LIST_LIMIT_MAX == 25


def test_route_urls():
    assert LlmRoute(model="gemini-x").url.endswith("/v1beta/models/gemini-x:generateContent")
    assert SpeechRoute(base_url="http://stt.local/").url == "http://stt.local/v1/listen"


def test_load_config_from_file(tmp_path):
    path = tmp_path / "app_config.json"
    path.write_text(
        '{"llm": {"model": "gemini-2.5-flash", "timeout_s": 20}, "speech": {"model": "nova-3"}}',
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.llm.model == "gemini-2.5-flash"
    assert cfg.llm.timeout_s == 20
    assert cfg.speech.model == "nova-3"
    assert default_config(str(path)) == cfg


def test_default_config_without_file():
    assert default_config(None) == AppConfig()
