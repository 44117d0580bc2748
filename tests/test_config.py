"""Settings loading."""

from payform.config import Settings, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "missing.json") == Settings()


def test_invalid_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert load_settings(path).log_level == "WARNING"


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_settings(Settings(form_specs_path="/tmp/specs.json", log_level="DEBUG"), path)
    settings = load_settings(path)
    assert settings.form_specs_path == "/tmp/specs.json"
    assert settings.log_level == "DEBUG"
    assert settings.base_url is None


def test_env_override(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text('{"address_specs_path": "/data/addresses.json"}')
    monkeypatch.setenv("PAYFORM_CONFIG", str(path))
    assert load_settings().address_specs_path == "/data/addresses.json"


def test_log_level_is_normalized(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"log_level": "debug", "api_key": "sk_test_123"}')
    settings = load_settings(path)
    assert settings.log_level == "DEBUG"
    assert settings.api_key == "sk_test_123"


def test_unknown_log_level_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"log_level": "LOUD", "base_url": "https://example.test"}')
    assert load_settings(path) == Settings()
