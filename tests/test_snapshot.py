"""
Tests for snapshot file loading.
"""

import json
from decimal import Decimal

import pytest

from ratio_arb.models import InstrumentId
from ratio_arb.snapshot import SnapshotError, load_snapshot, parse_snapshot


@pytest.fixture
def document():
    return {
        "instruments": [
            {"symbol": "AL30", "offers": [["9.9", "1000"]], "last": "9.9"},
            {"symbol": "AL30D", "bids": [["10", "100"]], "last": "10"},
            {"symbol": "GD30", "bids": [["9.5", "50"]], "last": "9.4"},
            {"symbol": "GD30D", "offers": [["9", "1000"]], "last": "9"},
        ],
        "legs": [
            {"buy": "AL30", "sell": "AL30D"},
            {"buy": "GD30", "sell": "GD30D"},
        ],
        "ratio_trades": [
            {"sell_then_buy": "AL30-AL30D", "buy_then_sell": "GD30-GD30D"},
        ],
    }


class TestParseSnapshot:
    """Tests for building trades from a snapshot document."""

    def test_builds_store_legs_and_trades(self, document):
        loaded = parse_snapshot(document)

        assert loaded.store.symbols() == ["AL30", "AL30D", "GD30", "GD30D"]
        assert set(loaded.legs) == {"AL30-AL30D", "GD30-GD30D"}
        assert len(loaded.ratio_trades) == 1

    def test_loaded_trade_is_sized(self, document):
        trade = parse_snapshot(document).ratio_trades[0]

        assert trade.max_tradable_size == Decimal("47")
        assert trade.profit_last == Decimal("9.4") / Decimal("9") / (Decimal("9.9") / Decimal("10")) - 1

    def test_legs_share_the_store(self, document):
        loaded = parse_snapshot(document)
        leg = loaded.legs["AL30-AL30D"]

        assert leg.store is loaded.store
        assert leg.buy.data is loaded.store.get(InstrumentId("AL30"))

    def test_conversion_factor_is_decimal(self, document):
        document["instruments"][0]["price_conversion_factor"] = "0.01"

        leg = parse_snapshot(document).legs["AL30-AL30D"]

        assert leg.buy.instrument.price_conversion_factor == Decimal("0.01")

    def test_named_legs(self, document):
        document["legs"][0]["name"] = "MEP AL30"
        document["ratio_trades"][0]["sell_then_buy"] = "MEP AL30"

        loaded = parse_snapshot(document)

        assert loaded.ratio_trades[0].name == "MEP AL30 / GD30-GD30D"

    def test_json_text(self, document):
        loaded = parse_snapshot(json.dumps(document))

        assert len(loaded.ratio_trades) == 1

    def test_unknown_instrument(self, document):
        document["legs"][0]["sell"] = "AL30C"

        with pytest.raises(SnapshotError, match="Unknown instrument"):
            parse_snapshot(document)

    def test_unknown_leg(self, document):
        document["ratio_trades"][0]["buy_then_sell"] = "GD35-GD35D"

        with pytest.raises(SnapshotError, match="Unknown leg"):
            parse_snapshot(document)

    def test_duplicate_leg(self, document):
        document["legs"].append({"buy": "AL30", "sell": "AL30D"})

        with pytest.raises(SnapshotError, match="Duplicate leg"):
            parse_snapshot(document)

    def test_non_positive_factor_rejected(self, document):
        document["instruments"][0]["price_conversion_factor"] = "0"

        with pytest.raises(SnapshotError):
            parse_snapshot(document)

    def test_invalid_json(self):
        with pytest.raises(SnapshotError):
            parse_snapshot("{not json")


class TestLoadSnapshot:
    """Tests for reading snapshot files."""

    def test_load_file(self, tmp_path, document):
        path = tmp_path / "books.json"
        path.write_text(json.dumps(document))

        loaded = load_snapshot(path)

        assert loaded.ratio_trades[0].get_owned_venta_max_size() == 47

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError, match="Cannot read snapshot"):
            load_snapshot(tmp_path / "missing.json")
