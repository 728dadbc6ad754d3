import json

from gofast.settings_models import SettingsPaths, default_editor_settings
from gofast.settings_store import JsonSettingsStore, deep_merge_defaults, dot_get


def test_missing_file_loads_defaults(tmp_path):
    store = JsonSettingsStore(SettingsPaths(tmp_path).settings_file, default_editor_settings())
    store.load()

    assert store.get("symbols.refresh_interval_ms") == 10_000
    assert store.get("backend.kind") == "local"
    assert store.get("navigation.result_pump_interval_ms") == 40
    assert store.dirty is False


def test_file_values_override_defaults_and_keep_missing_keys(tmp_path):
    paths = SettingsPaths(tmp_path)
    paths.settings_file.parent.mkdir(parents=True)
    paths.settings_file.write_text(json.dumps({"symbols": {"refresh_interval_ms": 2500}}), encoding="utf-8")
    store = JsonSettingsStore(paths.settings_file, default_editor_settings())
    store.load()

    assert store.get("symbols.refresh_interval_ms") == 2500
    assert store.get("symbols.skip_dirs") == ["node_modules", "vendor"]


def test_invalid_file_falls_back_to_defaults(tmp_path):
    target = tmp_path / "settings.json"
    target.write_text("[1, 2]", encoding="utf-8")
    store = JsonSettingsStore(target, default_editor_settings())
    store.load()

    assert store.last_error and "JSON object" in store.last_error
    assert store.get("logging.level") == "INFO"


def test_set_and_save_round_trip(tmp_path):
    target = tmp_path / "nested" / "settings.json"
    store = JsonSettingsStore(target, default_editor_settings())
    store.load()

    assert store.set("workspace.last_work_dir", "/work/proj")
    assert not store.set("workspace.last_work_dir", "/work/proj")
    store.save()

    saved = json.loads(target.read_text(encoding="utf-8"))
    assert saved["workspace"]["last_work_dir"] == "/work/proj"
    assert store.dirty is False


def test_dot_helpers():
    merged = deep_merge_defaults({"a": {"b": 1}}, {"a": {"b": 2, "c": 3}, "d": 4})
    assert merged == {"a": {"b": 1, "c": 3}, "d": 4}
    assert dot_get(merged, "a.c") == 3
    assert dot_get(merged, "a.x", "fallback") == "fallback"
