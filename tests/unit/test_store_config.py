"""Unit tests for advertiser ID parsing."""
from src.domain.entities.store_config import StoreConfig, parse_advertiser_ids


class TestParseAdvertiserIds:
    def test_bare_id(self) -> None:
        assert parse_advertiser_ids(" 10012345 ") == ["10012345"]

    def test_json_array(self) -> None:
        assert parse_advertiser_ids('["111", " 222 ", ""]') == ["111", "222"]

    def test_json_string(self) -> None:
        assert parse_advertiser_ids('"333"') == ["333"]

    def test_columns_are_merged_in_order_without_duplicates(self) -> None:
        ids = parse_advertiser_ids("111", None, '["222", "111"]', "", "333")

        assert ids == ["111", "222", "333"]

    def test_malformed_json_is_kept_as_bare_value(self) -> None:
        assert parse_advertiser_ids('["oops') == ['["oops']

    def test_nothing_configured(self) -> None:
        assert parse_advertiser_ids(None, "", "   ") == []


class TestStoreConfig:
    def test_first_advertiser_wins(self) -> None:
        config = StoreConfig("Main St Motors", "owner@example.com", ["111", "222"])

        assert config.advertiser_id == "111"

    def test_no_advertiser(self) -> None:
        assert StoreConfig("Main St Motors", "owner@example.com").advertiser_id is None
