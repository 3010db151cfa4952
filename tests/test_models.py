"""Model parsing and wire-format tests."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from archimedes.api.app import AddTokenAction, PatchWatchlistRequest, RemoveItemAction
from archimedes.models import (
    CreateWatchlistInput,
    MarketItem,
    TokenItem,
    UpdateWatchlistInput,
    Watchlist,
    WatchlistItem,
)
from archimedes.models.base import format_utc, utc_now

_ITEM = TypeAdapter(WatchlistItem)
TS = datetime(2025, 1, 10, 10, 0, tzinfo=timezone.utc)


class TestWatchlistItem:
    def test_token_item_from_camel_case(self):
        item = _ITEM.validate_python(
            {"id": "i1", "kind": "token", "tokenId": "btc", "createdAt": "2025-01-10T10:00:00Z"}
        )
        assert isinstance(item, TokenItem)
        assert item.token_id == "btc"
        assert item.created_at == TS

    def test_market_item(self):
        item = _ITEM.validate_python(
            {"id": "i2", "kind": "market", "marketId": "btc-usdt", "createdAt": TS}
        )
        assert isinstance(item, MarketItem)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            _ITEM.validate_python({"id": "i3", "kind": "nft", "createdAt": TS})

    def test_kind_requires_matching_reference(self):
        with pytest.raises(ValidationError):
            _ITEM.validate_python({"id": "i4", "kind": "token", "marketId": "btc-usdt", "createdAt": TS})

    def test_serializes_camel_case_with_z_timestamp(self):
        item = TokenItem(id="i1", token_id="btc", created_at=TS)
        assert item.to_api() == {
            "id": "i1",
            "kind": "token",
            "tokenId": "btc",
            "createdAt": "2025-01-10T10:00:00.000Z",
        }


class TestWatchlist:
    def test_description_omitted_when_unset(self):
        wl = Watchlist(id="w", name="N", created_at=TS, updated_at=TS)
        out = wl.to_api()
        assert "description" not in out
        assert out["items"] == []
        assert out["updatedAt"] == "2025-01-10T10:00:00.000Z"


class TestInputs:
    @pytest.mark.parametrize("name", ["a", "x" * 100])
    def test_name_bounds_accepted(self, name):
        assert CreateWatchlistInput(name=name).name == name

    @pytest.mark.parametrize("name", ["", "x" * 101])
    def test_name_bounds_rejected(self, name):
        with pytest.raises(ValidationError):
            CreateWatchlistInput(name=name)

    def test_update_fields_optional(self):
        data = UpdateWatchlistInput()
        assert data.name is None
        assert data.description is None

    def test_update_description_limit(self):
        with pytest.raises(ValidationError):
            UpdateWatchlistInput(description="d" * 501)

    def test_create_explicit_null_description_rejected(self):
        with pytest.raises(ValidationError):
            CreateWatchlistInput.model_validate({"name": "ok", "description": None})

    @pytest.mark.parametrize("field", ["name", "description"])
    def test_update_explicit_null_rejected(self, field):
        with pytest.raises(ValidationError):
            UpdateWatchlistInput.model_validate({field: None})

    def test_omitted_fields_stay_unset(self):
        data = UpdateWatchlistInput.model_validate({"name": "Renamed"})
        assert data.description is None


class TestPatchRequest:
    def test_dispatches_on_action(self):
        req = PatchWatchlistRequest.model_validate({"action": "add-token", "data": {"tokenId": "btc"}})
        assert isinstance(req.root, AddTokenAction)
        assert req.root.data.token_id == "btc"

    def test_remove_item(self):
        req = PatchWatchlistRequest.model_validate({"action": "remove-item", "data": {"itemId": "wli-1"}})
        assert isinstance(req.root, RemoveItemAction)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            PatchWatchlistRequest.model_validate({"action": "rename", "data": {}})
        assert exc_info.value.errors()[0]["type"] == "union_tag_invalid"


class TestTimestamps:
    def test_utc_now_truncated_to_milliseconds(self):
        now = utc_now()
        assert now.tzinfo is not None
        assert now.microsecond % 1000 == 0

    @pytest.mark.parametrize("value, expected", [
        (datetime(2025, 1, 10, 10, 0, 0, 123456, tzinfo=timezone.utc), "2025-01-10T10:00:00.123Z"),
        (datetime(2025, 1, 10, 10, 0, 0), "2025-01-10T10:00:00.000Z"),
        (datetime(2025, 1, 10, 12, 0, tzinfo=timezone(timedelta(hours=2))), "2025-01-10T10:00:00.000Z"),
    ])
    def test_format_utc(self, value, expected):
        assert format_utc(value) == expected
