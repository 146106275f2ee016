"""Unit tests for the abstract BaseModel, exercised through APIKey."""

from __future__ import annotations

import uuid

import pytest
from freezegun import freeze_time

from modules.apikeys.models import APIKey

pytestmark = pytest.mark.unit


class TestBaseModel:
    """Tests for UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        obj = APIKey.objects.create(key="k")
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_time_ordered(self):
        """UUIDv7 encodes a timestamp, so sequential creates yield ordered IDs."""
        a = APIKey.objects.create(key="first")
        b = APIKey.objects.create(key="second")
        assert a.id.hex < b.id.hex

    def test_id_is_not_editable(self):
        assert APIKey._meta.get_field("id").editable is False

    def test_created_at_does_not_change_on_save(self):
        with freeze_time("2026-01-01 10:00:00"):
            obj = APIKey.objects.create(key="k")
        with freeze_time("2026-01-02 10:00:00"):
            obj.client_id = "changed"
            obj.save()
        obj.refresh_from_db()
        assert obj.created_at.day == 1
        assert obj.updated_at.day == 2

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        with freeze_time("2026-01-01 10:00:00"):
            obj = APIKey.objects.create(key="k")
        with freeze_time("2026-01-01 11:00:00"):
            obj.revoked = True
            obj.save(update_fields=["revoked"])
        obj.refresh_from_db()
        assert obj.revoked is True
        assert obj.updated_at.hour == 11
