import pytest

from tzaugment.config import Settings, loadSettings


def test_defaults_when_nothing_configured(monkeypatch):
    for name in Settings.__dataclass_fields__:
        monkeypatch.delenv(f"TZAUGMENT_{name.upper()}", raising=False)

    loaded = loadSettings(config_path=None, cli_overrides={})

    assert loaded.settings == Settings()
    assert loaded.sources_used == []


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'delimiter: ";"',
            "log_level: DEBUG",
            "report_items_limit: 10",
            "drop_ocean_zones: false",
            'input_encoding: "cp1252"',
        ]),
        encoding="utf-8",
    )

    # ENV overrides config
    monkeypatch.setenv("TZAUGMENT_DELIMITER", "|")
    monkeypatch.setenv("TZAUGMENT_REPORT_ITEMS_LIMIT", "20")
    monkeypatch.setenv("TZAUGMENT_DROP_OCEAN_ZONES", "yes")

    # CLI overrides env
    loaded = loadSettings(
        config_path=str(cfg),
        cli_overrides={"delimiter": ",", "report_items_limit": None, "log_level": None},
    )

    settings = loaded.settings
    assert settings.delimiter == ","
    assert settings.report_items_limit == 20
    assert settings.drop_ocean_zones is True
    assert settings.log_level == "DEBUG"
    assert settings.input_encoding == "cp1252"
    assert loaded.sources_used == ["config", "env", "cli"]


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.delenv("TZAUGMENT_DELIMITER", raising=False)
    with pytest.raises(ValueError):
        loadSettings(config_path=None, cli_overrides={"delimiter": ";;"})
    with pytest.raises(ValueError):
        loadSettings(config_path=None, cli_overrides={"log_level": "LOUD"})

    monkeypatch.setenv("TZAUGMENT_FAIL_ON_DEGRADED", "maybe")
    with pytest.raises(ValueError):
        loadSettings(config_path=None, cli_overrides={})
