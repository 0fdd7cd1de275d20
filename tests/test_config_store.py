"""Tests for ConfigStore orchestration across both storage engines."""

from __future__ import annotations

import pytest

from configstore.constants.schema import DEFAULT_SCHEMA
from configstore.errors import StorageReadError, StorageWriteError
from configstore.infra.storage import open_storage
from configstore.models.setting import Setting, SettingInfo
from configstore.services.config_store import ConfigStore


class TestLookups:
    def test_default_when_not_overridden(self, open_adapter):
        schema = [SettingInfo("k", Setting.int_(5), "d")]
        store = ConfigStore(open_adapter(), autosave=True, schema=schema)

        assert store.get("k") == Setting.int_(5)
        assert store.get("k", None) == Setting.int_(5)

    def test_override_takes_precedence(self, open_adapter):
        schema = [SettingInfo("k", Setting.int_(5), "d")]
        store = ConfigStore(open_adapter(), autosave=True, schema=schema)

        store.set("k", Setting.int_(9))

        assert store.get("k") == Setting.int_(9)
        assert store.get_info("k").default == Setting.int_(5)

    def test_unknown_key_uses_fallback_then_sentinel(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)

        assert store.get("missing", Setting.string("fb")) == Setting.string("fb")
        assert store.get("missing").is_none
        assert not store.has("missing")
        assert store.get_info("missing") is None

    def test_fallback_ignored_for_registered_key(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)

        assert store.get("ui.theme", Setting.string("light")) == Setting.string("dark")

    def test_persisted_values_are_typed(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory({"network.timeout": "45", "ui.theme": "true"})
        store = ConfigStore(adapter, schema=network_schema)

        assert store.get("network.timeout") == Setting.int_(45)
        assert store.get("ui.theme") == Setting.bool_(True)

    def test_default_schema_is_used_when_none_given(self, memory_adapter_factory):
        store = ConfigStore(memory_adapter_factory())

        assert list(store.find("*")) == [info.key for info in DEFAULT_SCHEMA]


class TestOrphans:
    def test_orphan_override_is_preserved(self, open_adapter, network_schema):
        seed = open_adapter()
        seed.save("orphan", "kept")
        seed.close()

        store = ConfigStore(open_adapter(), schema=network_schema)

        assert store.has("orphan")
        assert store.get("orphan") == Setting.string("kept")
        assert store.get_info("orphan") is None
        assert "orphan" in list(store.find("*"))

    def test_set_accepts_unknown_key(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        store = ConfigStore(adapter, schema=network_schema)

        store.set("brand.new", Setting.float_(0.5))

        assert store.get("brand.new") == Setting.float_(0.5)
        assert store.get_info("brand.new") is None
        assert adapter.data == {"brand.new": "0.5"}


class TestFind:
    def test_wildcard_lists_every_key_once(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory({"network.timeout": "10", "zz.orphan": "1", "aa.orphan": "2"})
        store = ConfigStore(adapter, schema=network_schema)
        store.set("ui.theme", Setting.string("light"))
        store.set("new.orphan", Setting.bool_(False))

        keys = list(store.find("*"))

        assert keys == [
            "network.timeout",
            "network.retries",
            "ui.theme",
            "zz.orphan",
            "aa.orphan",
            "new.orphan",
        ]
        assert len(keys) == len(set(keys))

    def test_substring_in_registration_order(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)

        assert list(store.find("network")) == ["network.timeout", "network.retries"]

    def test_substring_is_unanchored_and_case_sensitive(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)

        assert list(store.find("work.ret")) == ["network.retries"]
        assert list(store.find("Network")) == []
        assert list(store.find("network.*")) == []

    def test_result_is_restartable(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)
        matches = store.find("network")

        assert list(matches) == list(matches)

    def test_result_is_lazy(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)
        matches = store.find("new")

        store.set("new.key", Setting.int_(1))

        assert list(matches) == ["new.key"]

    def test_can_read_while_iterating(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory({"orphan": "x"}), schema=network_schema)

        values = {key: store.get(key).to_string() for key in store.find("*")}

        assert values["orphan"] == "x"
        assert values["network.retries"] == "3"


class TestAutosave:
    def test_autosave_persists_immediately(self, open_adapter, network_schema):
        store = ConfigStore(open_adapter(), autosave=True, schema=network_schema)
        store.set("network.timeout", Setting.int_(99))

        reopened = ConfigStore(open_adapter(), schema=network_schema)

        assert reopened.get("network.timeout") == Setting.int_(99)
        assert store.dirty_keys == frozenset()

    def test_without_autosave_nothing_persists_until_flush(self, open_adapter, network_schema):
        store = ConfigStore(open_adapter(), autosave=False, schema=network_schema)
        store.set("network.timeout", Setting.int_(99))

        assert store.dirty_keys == {"network.timeout"}
        assert ConfigStore(open_adapter(), schema=network_schema).get("network.timeout") == Setting.int_(30)

        store.flush()

        assert store.dirty_keys == frozenset()
        assert ConfigStore(open_adapter(), schema=network_schema).get("network.timeout") == Setting.int_(99)

    def test_flush_writes_pending_keys_in_one_call(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        store = ConfigStore(adapter, autosave=False, schema=network_schema)
        store.set("ui.theme", Setting.string("light"))
        store.set("network.retries", Setting.int_(5))

        store.flush()
        store.flush()

        assert adapter.writes == [{"network.retries": "5", "ui.theme": "light"}]

    def test_unchanged_value_is_not_rewritten(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        store = ConfigStore(adapter, autosave=True, schema=network_schema)

        store.set("ui.theme", Setting.string("light"))
        store.set("ui.theme", Setting.string("light"))

        assert adapter.writes == [{"ui.theme": "light"}]

    def test_negative_zero_is_not_treated_as_unchanged(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        store = ConfigStore(adapter, autosave=True, schema=network_schema)

        store.set("z", Setting.float_(0.0))
        store.set("z", Setting.float_(-0.0))

        assert store.get("z").to_string() == "-0.0"
        assert adapter.data["z"] == "-0.0"
        assert adapter.writes == [{"z": "0.0"}, {"z": "-0.0"}]


class TestWriteFailures:
    def test_override_survives_failed_autosave(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        adapter.fail_writes = True
        store = ConfigStore(adapter, autosave=True, schema=network_schema)

        with pytest.raises(StorageWriteError):
            store.set("network.timeout", Setting.int_(1))

        assert store.get("network.timeout") == Setting.int_(1)
        assert store.dirty_keys == {"network.timeout"}
        assert store.get("network.retries") == Setting.int_(3)

    def test_flush_retries_after_failure(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        adapter.fail_writes = True
        store = ConfigStore(adapter, autosave=True, schema=network_schema)
        with pytest.raises(StorageWriteError):
            store.set("network.timeout", Setting.int_(1))

        with pytest.raises(StorageWriteError):
            store.flush()
        assert store.dirty_keys == {"network.timeout"}

        adapter.fail_writes = False
        store.flush()

        assert adapter.data == {"network.timeout": "1"}
        assert store.dirty_keys == frozenset()

    def test_same_value_after_failure_is_retried(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        adapter.fail_writes = True
        store = ConfigStore(adapter, autosave=True, schema=network_schema)
        with pytest.raises(StorageWriteError):
            store.set("ui.theme", Setting.string("light"))

        adapter.fail_writes = False
        store.set("ui.theme", Setting.string("light"))

        assert adapter.data == {"ui.theme": "light"}


class TestConstruction:
    def test_load_failure_aborts_construction(self, network_schema):
        class BrokenAdapter:
            def load_all(self):
                raise StorageReadError("corrupt", path="broken")

        with pytest.raises(StorageReadError):
            ConfigStore(BrokenAdapter(), schema=network_schema)

    def test_duplicate_schema_keys_are_rejected(self, memory_adapter_factory):
        schema = [SettingInfo("k", Setting.int_(1)), SettingInfo("k", Setting.int_(2))]

        with pytest.raises(ValueError):
            ConfigStore(memory_adapter_factory(), schema=schema)

    def test_set_requires_setting(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)

        with pytest.raises(TypeError):
            store.set("ui.theme", "light")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            store.set("ui.theme", Setting.none())


class TestLifecycle:
    def test_close_releases_adapter(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        with ConfigStore(adapter, schema=network_schema) as store:
            store.get("ui.theme")

        assert adapter.closed
        assert store.closed
        with pytest.raises(RuntimeError):
            store.get("ui.theme")
        with pytest.raises(RuntimeError):
            store.set("ui.theme", Setting.string("x"))

    def test_close_does_not_flush(self, memory_adapter_factory, network_schema):
        adapter = memory_adapter_factory()
        store = ConfigStore(adapter, autosave=False, schema=network_schema)
        store.set("ui.theme", Setting.string("light"))

        store.close()
        store.close()

        assert adapter.writes == []

    def test_search_result_is_unusable_after_close(self, memory_adapter_factory, network_schema):
        store = ConfigStore(memory_adapter_factory(), schema=network_schema)
        matches = store.find("*")

        store.close()

        with pytest.raises(RuntimeError):
            list(matches)


def test_backends_are_equivalent(tmp_path, network_schema):
    operations = [
        ("network.timeout", Setting.from_string("60")),
        ("network.retries", Setting.from_string("-1")),
        ("ui.theme", Setting.from_string("false")),
        ("ui.zoom", Setting.from_string("1.25")),
        ("ui.label", Setting.from_string("Zoom 1e3 ✓")),
        ("huge", Setting.from_string("1e20")),
        ("network.timeout", Setting.from_string("75")),
    ]
    results = {}
    for engine, filename in (("sqlite", "settings.db"), ("json", "settings.json")):
        path = tmp_path / filename
        with ConfigStore(open_storage(engine, path), autosave=True, schema=network_schema) as store:
            for key, value in operations:
                store.set(key, value)
        with ConfigStore(open_storage(engine, path), schema=network_schema) as reopened:
            results[engine] = {key: reopened.get(key) for key in reopened.find("*")}

    assert results["sqlite"] == results["json"]
    assert results["json"]["network.timeout"] == Setting.int_(75)
    assert results["json"]["huge"] == Setting.float_(1e20)
    assert results["json"]["ui.label"] == Setting.string("Zoom 1e3 ✓")
