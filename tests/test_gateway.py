"""Tests for the JSON persistence gateway."""

import json
from uuid import uuid4

import pytest

from pantry_tracker.errors import NotFoundError, UpstreamError
from pantry_tracker.gateway import JSONGateway, Table, create_gateway


class TestJSONGatewayInit:
    """Tests for gateway initialization."""

    def test_creates_data_directory(self, tmp_path):
        data_dir = tmp_path / "new" / "data"
        JSONGateway(data_dir=data_dir)
        assert data_dir.exists()

    def test_create_gateway(self, temp_data_dir):
        gateway = create_gateway(temp_data_dir, user_id="asha")
        assert isinstance(gateway, JSONGateway)
        assert gateway.user_id == "asha"

    def test_missing_table_lists_empty(self, gateway):
        assert gateway.list(Table.PANTRY_ITEMS) == []


class TestInsert:
    """Tests for insert."""

    def test_generates_server_fields(self, gateway):
        stored = gateway.insert(Table.SHOPPING_LIST, {"name": "Milk"})
        assert stored["name"] == "Milk"
        assert stored["user_id"] == "local"
        assert stored["id"]
        assert stored["created_at"] == stored["updated_at"]

    def test_ignores_client_supplied_id(self, gateway):
        client_id = str(uuid4())
        stored = gateway.insert(Table.SHOPPING_LIST, {"id": client_id, "name": "Milk"})
        assert stored["id"] != client_id

    def test_writes_one_file_per_table(self, gateway, temp_data_dir):
        gateway.insert(Table.PANTRY_ITEMS, {"name": "Rice"})
        with open(temp_data_dir / "pantry_items.json") as f:
            data = json.load(f)
        assert len(data) == 1
        assert not (temp_data_dir / "shopping_list.json").exists()


class TestList:
    """Tests for list."""

    def test_newest_first(self, gateway):
        gateway.insert(Table.PANTRY_ITEMS, {"name": "First"})
        gateway.insert(Table.PANTRY_ITEMS, {"name": "Second"})
        gateway.insert(Table.PANTRY_ITEMS, {"name": "Third"})
        names = [r["name"] for r in gateway.list(Table.PANTRY_ITEMS)]
        assert names == ["Third", "Second", "First"]

    def test_scoped_to_user(self, temp_data_dir):
        asha = JSONGateway(temp_data_dir, user_id="asha")
        ravi = JSONGateway(temp_data_dir, user_id="ravi")
        asha.insert(Table.PANTRY_ITEMS, {"name": "Rice"})
        ravi.insert(Table.PANTRY_ITEMS, {"name": "Dal"})
        assert [r["name"] for r in asha.list(Table.PANTRY_ITEMS)] == ["Rice"]
        assert [r["name"] for r in ravi.list(Table.PANTRY_ITEMS)] == ["Dal"]

    def test_corrupt_file_is_upstream_error(self, gateway, temp_data_dir):
        (temp_data_dir / "recommendations.json").write_text("{not json")
        with pytest.raises(UpstreamError):
            gateway.list(Table.RECOMMENDATIONS)

    def test_non_list_file_is_upstream_error(self, gateway, temp_data_dir):
        (temp_data_dir / "recommendations.json").write_text('{"a": 1}')
        with pytest.raises(UpstreamError, match="expected a list"):
            gateway.list(Table.RECOMMENDATIONS)


class TestUpdate:
    """Tests for update."""

    def test_partial_update(self, gateway):
        stored = gateway.insert(Table.SHOPPING_LIST, {"name": "Milk", "is_checked": False})
        updated = gateway.update(Table.SHOPPING_LIST, stored["id"], {"is_checked": True})
        assert updated["is_checked"] is True
        assert updated["name"] == "Milk"
        assert gateway.list(Table.SHOPPING_LIST)[0]["is_checked"] is True

    def test_cannot_change_id(self, gateway):
        stored = gateway.insert(Table.SHOPPING_LIST, {"name": "Milk"})
        updated = gateway.update(Table.SHOPPING_LIST, stored["id"], {"id": "other"})
        assert updated["id"] == stored["id"]

    def test_missing_record(self, gateway):
        with pytest.raises(NotFoundError) as exc_info:
            gateway.update(Table.SHOPPING_LIST, uuid4(), {"name": "Eggs"})
        assert exc_info.value.table == "shopping_list"

    def test_other_users_record_not_found(self, temp_data_dir):
        asha = JSONGateway(temp_data_dir, user_id="asha")
        ravi = JSONGateway(temp_data_dir, user_id="ravi")
        stored = asha.insert(Table.SHOPPING_LIST, {"name": "Milk"})
        with pytest.raises(NotFoundError):
            ravi.update(Table.SHOPPING_LIST, stored["id"], {"name": "Eggs"})


class TestDelete:
    """Tests for delete."""

    def test_delete(self, gateway):
        stored = gateway.insert(Table.RECOMMENDATIONS, {"item_name": "Rice"})
        assert gateway.delete(Table.RECOMMENDATIONS, stored["id"]) is True
        assert gateway.list(Table.RECOMMENDATIONS) == []

    def test_delete_twice(self, gateway):
        stored = gateway.insert(Table.RECOMMENDATIONS, {"item_name": "Rice"})
        gateway.delete(Table.RECOMMENDATIONS, stored["id"])
        with pytest.raises(NotFoundError):
            gateway.delete(Table.RECOMMENDATIONS, stored["id"])
