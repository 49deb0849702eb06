from pricematch.config import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.pause_between_searches_ms == 4000
    assert s.pause_jitter_ms == 2000
    assert s.max_candidates == 10
    assert s.query_token_limit == 4
    assert s.match_threshold == 0.35
    assert s.port == 3030


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PLAYWRIGHT_HEADLESS", "false")
    monkeypatch.setenv("PAUSE_BETWEEN_SEARCHES_MS", "1500")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:5500, http://127.0.0.1:5500")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings(_env_file=None)
    assert s.playwright_headless is False
    assert s.pause_between_searches_ms == 1500
    assert s.allowed_origins == ["http://localhost:5500", "http://127.0.0.1:5500"]
    assert s.log_level == "DEBUG"
