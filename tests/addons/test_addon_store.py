"""Tests for addon records and the in-memory store."""

import pytest

from consequences.addons import AddonRecord, InMemoryAddonStore
from consequences.core.inputs import InputValue
from consequences.errors import AddonError


@pytest.fixture
def store():
    return InMemoryAddonStore()


@pytest.fixture
def record():
    return AddonRecord(
        instance_id="hue-1",
        module_name="hue",
        display_name="Living Room Hue",
        user_provided_inputs=[InputValue("bridge_ip", "10.0.0.2")],
    )


class TestAddonRecord:
    """Tests for AddonRecord serialization."""

    def test_to_dict_omits_missing_saved_data(self, record):
        data = record.to_dict()

        assert data["instance_id"] == "hue-1"
        assert data["user_provided_inputs"] == [{"unique_id": "bridge_ip", "value": "10.0.0.2"}]
        assert "saved_data" not in data

    def test_roundtrip_with_saved_data(self, record):
        record.saved_data = {"token": "abc"}

        restored = AddonRecord.from_dict(record.to_dict())

        assert restored == record


class TestInMemoryAddonStore:
    """Tests for InMemoryAddonStore."""

    def test_create_and_get(self, store, record):
        store.create_addon(record)

        assert store.get_addon("hue-1") == record
        assert store.all_addons() == [record]
        assert store.get_addon("missing") is None

    def test_duplicate_instance_rejected(self, store, record):
        store.create_addon(record)

        with pytest.raises(AddonError):
            store.create_addon(record)

    def test_save_addon_data(self, store, record):
        store.create_addon(record)

        store.save_addon_data("hue-1", {"token": "abc"})

        assert store.get_addon("hue-1").saved_data == {"token": "abc"}

    def test_save_data_for_unknown_instance_ignored(self, store):
        store.save_addon_data("missing", {"token": "abc"})

        assert store.all_addons() == []

    def test_records_are_copied(self, store, record):
        """Test that mutating returned records does not change the store."""
        store.create_addon(record)
        data = {"token": "abc"}
        store.save_addon_data("hue-1", data)

        data["token"] = "changed"
        fetched = store.get_addon("hue-1")
        fetched.saved_data["token"] = "also changed"

        assert store.get_addon("hue-1").saved_data == {"token": "abc"}

    def test_remove(self, store, record):
        store.create_addon(record)

        assert store.remove_addon("hue-1") is True
        assert store.remove_addon("hue-1") is False
        assert store.all_addons() == []
