"""
Tests for configuration and encrypted credentials.
"""

import json

from clinic_inventory.config import ConfigManager, get_config_manager, reset_config_manager


def test_defaults_written_on_first_run(tmp_path):
    config = ConfigManager(config_dir=str(tmp_path))

    assert config.get("restock.usage_window_days") == 30
    assert config.get("api.port") == 3000
    assert config.get("llm.provider") == "ollama"
    assert (tmp_path / "app_config.json").exists()


def test_get_missing_key_returns_default(config):
    assert config.get("restock.nonexistent", "fallback") == "fallback"
    assert config.get("api.port.deeper", 1) == 1


def test_set_persists(tmp_path):
    config = ConfigManager(config_dir=str(tmp_path))
    config.set("restock.supply_days", 45)
    config.set("custom.section.value", "x")

    reloaded = ConfigManager(config_dir=str(tmp_path))

    assert reloaded.get("restock.supply_days") == 45
    assert reloaded.get("custom.section.value") == "x"


def test_missing_defaults_are_filled_in(tmp_path):
    (tmp_path / "app_config.json").write_text(json.dumps({"restock": {"supply_days": 14}}))

    config = ConfigManager(config_dir=str(tmp_path))

    assert config.get("restock.supply_days") == 14
    assert config.get("restock.usage_window_days") == 30
    assert config.get("alerts.expiry_warning_days") == 7


def test_credentials_are_encrypted(tmp_path):
    config = ConfigManager(config_dir=str(tmp_path))
    config.set_llm_api_key("gemini", "secret-key")

    assert b"secret-key" not in (tmp_path / "credentials.enc").read_bytes()
    reloaded = ConfigManager(config_dir=str(tmp_path))
    assert reloaded.get_llm_api_key("gemini") == "secret-key"
    assert reloaded.has_credential("gemini_api_key")

    assert reloaded.remove_credential("gemini_api_key") is True
    assert reloaded.remove_credential("gemini_api_key") is False


def test_api_key_falls_back_to_environment(config, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    assert config.get_llm_api_key("gemini") == "from-env"

    config.set_llm_api_key("gemini", "stored")
    assert config.get_llm_api_key("gemini") == "stored"


def test_reset_to_defaults(config):
    config.set("api.port", 8080)
    config.reset_to_defaults()
    assert config.get("api.port") == 3000


def test_global_instance_is_shared():
    reset_config_manager()
    first = get_config_manager()
    assert get_config_manager() is first
    reset_config_manager()
    assert get_config_manager() is not first
