"""Dispatch policies for outbound enrichment fetches.

A dispatcher takes the list of identities to enrich and a task that fetches
(and stores) one identity, runs the tasks under its concurrency and pacing
rules, and reports one ``FetchOutcome`` per identity. Task exceptions are
captured in the outcome, never raised.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass
from typing import Callable

from ratelimit import limits, sleep_and_retry

from divrecon.errors import DividendDataErrorCode, FetchError
from divrecon.logging import get_logger
from divrecon.models.profile import DividendProfile

logger = get_logger(__name__)

FetchTask = Callable[[str], DividendProfile]


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one identity's fetch task."""

    identity: str
    profile: DividendProfile | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.profile is not None


def _outcome_from_future(identity: str, future: Future) -> FetchOutcome:
    exc = future.exception()
    if exc is not None:
        return FetchOutcome(identity, error=exc)
    return FetchOutcome(identity, profile=future.result())


class FetchDispatcher(ABC):
    """Abstract dispatch policy."""

    @abstractmethod
    def dispatch(self, identities: list[str], task: FetchTask) -> list[FetchOutcome]:
        """Run ``task`` for every identity; return one outcome per identity."""
        ...


class BatchDispatcher(FetchDispatcher):
    """Fixed-size batches processed sequentially, concurrent within a batch.

    Peak concurrency is bounded by ``batch_size``. ``delay_seconds`` is slept
    between consecutive batches, never after the last one. With
    ``batch_timeout`` set, tasks still running when it expires are reported
    as TIMEOUT failures and left to finish in the background.
    """

    def __init__(
        self,
        batch_size: int = 10,
        delay_seconds: float = 0.5,
        batch_timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self.batch_timeout = batch_timeout
        self._sleep = sleep

    def batches(self, identities: list[str]) -> list[list[str]]:
        return [
            identities[i:i + self.batch_size]
            for i in range(0, len(identities), self.batch_size)
        ]

    def dispatch(self, identities: list[str], task: FetchTask) -> list[FetchOutcome]:
        batches = self.batches(identities)
        outcomes: list[FetchOutcome] = []
        for index, batch in enumerate(batches):
            batch_outcomes = self._run_batch(batch, task)
            outcomes.extend(batch_outcomes)
            failed = sum(1 for o in batch_outcomes if not o.ok)
            logger.debug(
                "Batch %d/%d done: %d fetched, %d failed",
                index + 1, len(batches), len(batch) - failed, failed,
            )
            if index < len(batches) - 1 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)
        return outcomes

    def _run_batch(self, batch: list[str], task: FetchTask) -> list[FetchOutcome]:
        executor = ThreadPoolExecutor(
            max_workers=len(batch), thread_name_prefix="divrecon-fetch",
        )
        futures = {executor.submit(task, identity): identity for identity in batch}
        done, pending = wait(futures, timeout=self.batch_timeout)

        outcomes: list[FetchOutcome] = []
        for future, identity in futures.items():
            if future in done:
                outcomes.append(_outcome_from_future(identity, future))
            else:
                outcomes.append(FetchOutcome(identity, error=FetchError(
                    identity,
                    f"Fetch for {identity} exceeded batch timeout of {self.batch_timeout}s",
                    code=DividendDataErrorCode.TIMEOUT,
                )))
        executor.shutdown(wait=not pending)
        return outcomes


def _invoke(task: FetchTask, identity: str) -> DividendProfile:
    return task(identity)


class PooledDispatcher(FetchDispatcher):
    """Bounded worker pool over the whole work list.

    ``max_workers`` tasks run at a time; with ``calls_per_minute`` set, task
    starts are throttled across all runs that share this dispatcher.
    """

    def __init__(self, max_workers: int = 5, calls_per_minute: int | None = None) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers
        self.calls_per_minute = calls_per_minute
        self._invoke: Callable[[FetchTask, str], DividendProfile] = _invoke
        if calls_per_minute:
            self._invoke = sleep_and_retry(limits(calls=calls_per_minute, period=60)(_invoke))

    def dispatch(self, identities: list[str], task: FetchTask) -> list[FetchOutcome]:
        if not identities:
            return []
        outcomes: list[FetchOutcome] = []
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="divrecon-pool",
        ) as executor:
            future_to_identity = {
                executor.submit(self._invoke, task, identity): identity
                for identity in identities
            }
            for future in as_completed(future_to_identity):
                outcomes.append(_outcome_from_future(future_to_identity[future], future))
        return outcomes
