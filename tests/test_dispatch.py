"""Tests for batch and pooled fetch dispatch."""

import time

import pytest

from divrecon.dispatch import BatchDispatcher, FetchOutcome, PooledDispatcher
from divrecon.errors import DividendDataErrorCode, FetchError
from divrecon.models.profile import DividendProfile
from divrecon.providers.mock import MockProvider


def _identities(n: int) -> list[str]:
    return [f"SYM{i:02d}" for i in range(n)]


class TestFetchOutcome:
    def test_ok(self):
        assert FetchOutcome("MSFT", profile=DividendProfile("MSFT", 3.0)).ok
        assert not FetchOutcome("XYZ", error=RuntimeError("x")).ok
        assert not FetchOutcome("XYZ").ok


class TestBatchDispatcher:
    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchDispatcher(batch_size=0)

    def test_batches(self):
        assert [len(b) for b in BatchDispatcher(batch_size=10).batches(_identities(25))] == [10, 10, 5]

    def test_delay_only_between_batches(self, mock_provider, recording_sleep):
        dispatcher = BatchDispatcher(batch_size=10, delay_seconds=0.5, sleep=recording_sleep)
        outcomes = dispatcher.dispatch(_identities(25), mock_provider.fetch_profile)

        assert len(outcomes) == 25
        assert all(o.ok for o in outcomes)
        assert recording_sleep.durations == [0.5, 0.5]
        # each pause happens after a full batch has completed
        assert recording_sleep.calls_seen == [10, 20]
        assert mock_provider.call_count == 25

    def test_single_batch_no_delay(self, mock_provider, recording_sleep):
        dispatcher = BatchDispatcher(batch_size=10, delay_seconds=0.5, sleep=recording_sleep)
        dispatcher.dispatch(_identities(10), mock_provider.fetch_profile)
        assert recording_sleep.durations == []

    def test_zero_delay_never_sleeps(self, mock_provider, recording_sleep):
        dispatcher = BatchDispatcher(batch_size=2, delay_seconds=0, sleep=recording_sleep)
        dispatcher.dispatch(_identities(5), mock_provider.fetch_profile)
        assert recording_sleep.durations == []

    def test_empty(self, mock_provider, recording_sleep):
        dispatcher = BatchDispatcher(sleep=recording_sleep)
        assert dispatcher.dispatch([], mock_provider.fetch_profile) == []
        assert mock_provider.call_count == 0

    def test_concurrency_bounded_by_batch_size(self, recording_sleep):
        provider = MockProvider(latency=0.02)
        dispatcher = BatchDispatcher(batch_size=4, delay_seconds=0.01, sleep=recording_sleep)
        dispatcher.dispatch(_identities(12), provider.fetch_profile)
        assert 1 <= provider.max_in_flight <= 4

    def test_order_preserved(self, mock_provider, recording_sleep):
        ids = _identities(7)
        dispatcher = BatchDispatcher(batch_size=3, delay_seconds=0.01, sleep=recording_sleep)
        outcomes = dispatcher.dispatch(ids, mock_provider.fetch_profile)
        assert [o.identity for o in outcomes] == ids

    def test_failures_captured(self, mock_provider, recording_sleep):
        mock_provider.set_error("SYM01")
        dispatcher = BatchDispatcher(batch_size=10, sleep=recording_sleep)
        outcomes = dispatcher.dispatch(_identities(3), mock_provider.fetch_profile)
        failed = [o for o in outcomes if not o.ok]
        assert [o.identity for o in failed] == ["SYM01"]
        assert failed[0].error is not None

    def test_batch_timeout(self, recording_sleep):
        def slow(identity: str) -> DividendProfile:
            if identity == "SLOW":
                time.sleep(0.5)
            return DividendProfile.no_dividend(identity)

        dispatcher = BatchDispatcher(batch_size=5, batch_timeout=0.05, sleep=recording_sleep)
        outcomes = {o.identity: o for o in dispatcher.dispatch(["FAST", "SLOW"], slow)}

        assert outcomes["FAST"].ok
        assert not outcomes["SLOW"].ok
        assert isinstance(outcomes["SLOW"].error, FetchError)
        assert outcomes["SLOW"].error.code == DividendDataErrorCode.TIMEOUT


class TestPooledDispatcher:
    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            PooledDispatcher(max_workers=0)

    def test_all_identities_dispatched(self, mock_provider):
        outcomes = PooledDispatcher(max_workers=3).dispatch(_identities(9), mock_provider.fetch_profile)
        assert sorted(o.identity for o in outcomes) == _identities(9)
        assert all(o.ok for o in outcomes)

    def test_worker_bound(self):
        provider = MockProvider(latency=0.02)
        PooledDispatcher(max_workers=2).dispatch(_identities(8), provider.fetch_profile)
        assert 1 <= provider.max_in_flight <= 2

    def test_rate_limited(self, mock_provider):
        dispatcher = PooledDispatcher(max_workers=2, calls_per_minute=1000)
        outcomes = dispatcher.dispatch(_identities(5), mock_provider.fetch_profile)
        assert len(outcomes) == 5
        assert mock_provider.call_count == 5

    def test_failures_captured(self, mock_provider):
        mock_provider.set_error("SYM02")
        outcomes = PooledDispatcher().dispatch(_identities(4), mock_provider.fetch_profile)
        assert [o.identity for o in outcomes if not o.ok] == ["SYM02"]

    def test_empty(self, mock_provider):
        assert PooledDispatcher().dispatch([], mock_provider.fetch_profile) == []
