"""Tests for the dividend reference store."""

import threading

import pytest

from divrecon.models.profile import DividendProfile
from divrecon.store import MemoryDividendStore, StoreStats


class TestMemoryDividendStore:
    def test_get_missing(self):
        assert MemoryDividendStore().get("AAPL") is None

    def test_put_get(self):
        store = MemoryDividendStore()
        p = DividendProfile(symbol="MSFT", annual_amount=3.0)
        store.put("MSFT", p)
        assert store.get("MSFT") is p
        assert store.has("MSFT")
        assert "MSFT" in store
        assert len(store) == 1

    def test_zero_dividend_is_present(self):
        store = MemoryDividendStore()
        store.put("TSLA", DividendProfile.no_dividend("TSLA"))
        assert store.has("TSLA")
        assert store.get("TSLA").annual_amount == 0.0

    def test_overwrite(self):
        store = MemoryDividendStore()
        store.put("MSFT", DividendProfile(symbol="MSFT", annual_amount=2.8))
        store.put("MSFT", DividendProfile(symbol="MSFT", annual_amount=3.0))
        assert store.get("MSFT").annual_amount == 3.0
        assert len(store) == 1

    def test_empty_identity_rejected(self):
        with pytest.raises(ValueError):
            MemoryDividendStore().put("", DividendProfile(symbol="", annual_amount=1.0))

    def test_items_is_a_copy(self, store):
        items = store.items()
        store.put("MSFT", DividendProfile(symbol="MSFT", annual_amount=3.0))
        assert len(items) == 1
        assert sorted(store.identities()) == ["AAPL", "MSFT"]

    def test_stats(self):
        store = MemoryDividendStore({
            "AAPL": DividendProfile(symbol="AAPL", annual_amount=0.96),
            "SCHD": DividendProfile(symbol="SCHD", annual_amount=2.6, is_fund=True),
            "TSLA": DividendProfile.no_dividend("TSLA"),
        })
        assert store.stats() == StoreStats(
            total=3, dividend_paying=2, non_dividend_paying=1, fund_count=1,
        )

    def test_stats_empty(self):
        assert MemoryDividendStore().stats() == StoreStats(0, 0, 0, 0)

    def test_concurrent_writers_different_keys(self):
        store = MemoryDividendStore()

        def writer(prefix: str) -> None:
            for i in range(200):
                key = f"{prefix}{i}"
                store.put(key, DividendProfile(symbol=key, annual_amount=1.0))

        threads = [threading.Thread(target=writer, args=(p,)) for p in "ABCD"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 800
