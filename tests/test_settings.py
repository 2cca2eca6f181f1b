import pytest

from marinerkit.config.settings import get_logging_config, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_load():
    settings = get_settings()
    assert settings.sync.throttle_window_seconds == 10
    assert settings.route.average_speed_knots > 0
    assert settings.route.intermediate_interval_minutes == 30


def test_env_overrides_take_effect(monkeypatch):
    monkeypatch.setenv("MARINERKIT_SYNC_THROTTLE_SECONDS", "42")
    monkeypatch.setenv("MARINERKIT_AVERAGE_SPEED_KNOTS", "7.5")
    monkeypatch.setenv("MARINERKIT_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.sync.throttle_window_seconds == 42.0
    assert settings.route.average_speed_knots == 7.5
    assert settings.app.log_level == "debug"


def test_external_config_file_replaces_defaults(monkeypatch, tmp_path):
    path = tmp_path / "marinerkit.yaml"
    path.write_text("sync:\n  throttle_window_seconds: 3\nroute:\n  average_speed_knots: 12\n", encoding="utf-8")
    monkeypatch.setenv("MARINERKIT_CONFIG_PATH", str(path))

    settings = get_settings()

    assert settings.sync.throttle_window_seconds == 3
    assert settings.route.average_speed_knots == 12
    assert settings.app.name == "MarinerKit"


def test_invalid_yaml_root_is_rejected(monkeypatch, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("MARINERKIT_CONFIG_PATH", str(path))

    with pytest.raises(ValueError, match="expected a mapping"):
        get_settings()


def test_logging_config_has_console_handler():
    config = get_logging_config()
    assert "console" in config["handlers"]
