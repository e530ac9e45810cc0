import pytest
from pydantic import ValidationError

from mediavault.config.settings import Config
from mediavault.utils.urls import is_youtube_url, safe_url_for_log


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    cfg = Config()

    assert cfg.port == 3000
    assert cfg.host == "0.0.0.0"
    assert cfg.api.version == "2.0.0"
    assert cfg.ytdlp.binary == "yt-dlp"
    assert cfg.ytdlp.info_timeout_seconds is None


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Config().port == 8080


def test_nested_sections_from_environment(monkeypatch):
    monkeypatch.setenv("YTDLP__BINARY", "/opt/bin/yt-dlp")
    monkeypatch.setenv("LOGGING__LEVEL", "debug")

    cfg = Config()

    assert cfg.ytdlp.binary == "/opt/bin/yt-dlp"
    assert cfg.logging.level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOGGING__LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Config()


@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=abc", True),
    ("https://youtu.be/abc", True),
    ("https://music.youtube.com/watch?v=abc", True),
    ("https://vimeo.com/1", False),
    (None, False),
    (42, False),
])
def test_is_youtube_url(url, expected):
    assert is_youtube_url(url) is expected


def test_safe_url_for_log_hides_query():
    assert safe_url_for_log("https://youtube.com/watch?v=abc&list=x") == "https://youtube.com/watch?..."
    assert safe_url_for_log("https://youtu.be/abc") == "https://youtu.be/abc"
