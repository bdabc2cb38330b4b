"""Tests for settings.json loading"""
import json

from settings import Setting, SettingsManager


def write_settings(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path):
    manager = SettingsManager(tmp_path / "missing.json")
    assert manager.get("sync.hide_delay_ms") == 30000
    assert manager.get("server.port") == 9012
    assert manager.get("unknown.key", "fallback") == "fallback"


def test_nested_and_flat_keys(tmp_path):
    path = write_settings(tmp_path, {
        "sync": {"hide_delay_ms": 15000, "terminal": "true"},
        "sync.offset_step_ms": "500",
    })
    manager = SettingsManager(path)
    assert manager.get("sync.hide_delay_ms") == 15000
    assert manager.get("sync.terminal") is True
    assert manager.get("sync.offset_step_ms") == 500


def test_values_clamped_to_range(tmp_path):
    path = write_settings(tmp_path, {"sync": {"poll_interval": 0.01, "latency_window_size": 1000}})
    manager = SettingsManager(path)
    assert manager.get("sync.poll_interval") == 0.1
    assert manager.get("sync.latency_window_size") == 200


def test_invalid_json_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    manager = SettingsManager(path)
    assert manager.get("sync.offset_step_ms") == 250


def test_non_object_falls_back_to_defaults(tmp_path):
    manager = SettingsManager(write_settings(tmp_path, ["a", "b"]))
    assert manager.get("sync.hide_delay_ms") == 30000


def test_bad_value_uses_default():
    setting = Setting("Port", int, 9012, min_val=1, max_val=65535)
    assert setting.validate_and_convert("not a number") == 9012
    assert setting.validate_and_convert("70000") == 65535


def test_get_all_grouped_by_category(tmp_path):
    manager = SettingsManager(tmp_path / "missing.json")
    grouped = manager.get_all()
    entry = grouped["Sync"]["sync.offset_step_ms"]
    assert entry["value"] == 250
    assert entry["type"] == "int"
    assert entry["requires_restart"] is False
