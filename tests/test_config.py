from video_agent.config import Settings


def test_defaults_without_token_run_in_mock_mode(monkeypatch):
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)

    settings = Settings(_env_file=None)

    assert settings.mock_mode
    assert settings.cors_allow_origins == ["http://localhost:8000", "http://127.0.0.1:8000"]


def test_values_read_from_environment(monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_secret")
    monkeypatch.setenv("REPLICATE_API_BASE_URL", "https://proxy.example/v1/")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://studio.example"]')
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert not settings.mock_mode
    assert settings.replicate_api_base_url == "https://proxy.example/v1"
    assert settings.cors_allow_origins == ["https://studio.example"]
    assert settings.log_level == "DEBUG"
