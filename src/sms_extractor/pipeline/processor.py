"""Batch and stream processing in front of the extraction orchestrator.

Extraction itself is synchronous and CPU bound, so each message runs in a worker
thread via ``asyncio.to_thread``. Parallelism exists only across messages.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import AsyncIterable, AsyncIterator, Hashable, Iterable
from dataclasses import dataclass
from typing import Protocol

import structlog

from sms_extractor.config import Settings, get_settings
from sms_extractor.models import (
    ExtractionFailure,
    ExtractionResult,
    FailureKind,
    RawMessage,
)
from sms_extractor.pipeline.orchestrator import SCORE_INTERNAL_ERROR, timeout_failure

logger = structlog.get_logger()

_END_OF_STREAM = object()


class MessageExtractor(Protocol):
    """Anything that can turn a message into a result before a deadline."""

    def extract(self, message: RawMessage, deadline: float | None = None) -> ExtractionResult: ...


class ResultCache:
    """Bounded deduplication cache shared by concurrent workers.

    When the cache grows past its limit the oldest half (by insertion order) is
    dropped in one go. This is a coarse approximation of LRU: recently read
    entries are evicted just as readily as unread ones.

    In-flight duplicates are not coalesced: identical messages processed
    concurrently both miss the cache and are both extracted.
    """

    def __init__(self, size_limit: int = 1000) -> None:
        self.size_limit = size_limit
        self._lock = threading.Lock()
        self._entries: dict[Hashable, ExtractionResult] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: Hashable) -> ExtractionResult | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, result: ExtractionResult) -> None:
        with self._lock:
            self._entries[key] = result
            if len(self._entries) > self.size_limit:
                evicted = list(self._entries)[: len(self._entries) // 2]
                for old_key in evicted:
                    del self._entries[old_key]
                logger.debug("result_cache_evicted", evicted=len(evicted))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


@dataclass(frozen=True)
class ProcessingStats:
    """Snapshot of processor counters."""

    messages_processed: int = 0
    batches_processed: int = 0
    total_processing_ms: float = 0.0
    cache_hits: int = 0
    timeouts: int = 0
    errors: int = 0

    @property
    def average_processing_ms(self) -> float:
        if self.messages_processed == 0:
            return 0.0
        return self.total_processing_ms / self.messages_processed


class _StatsRecorder:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = {
            "messages_processed": 0,
            "batches_processed": 0,
            "cache_hits": 0,
            "timeouts": 0,
            "errors": 0,
        }
        self._total_ms = 0.0

    def increment(self, name: str) -> None:
        with self._lock:
            self._counts[name] += 1

    def record_message(self, elapsed_ms: float) -> None:
        with self._lock:
            self._counts["messages_processed"] += 1
            self._total_ms += elapsed_ms

    def snapshot(self) -> ProcessingStats:
        with self._lock:
            return ProcessingStats(total_processing_ms=self._total_ms, **self._counts)


async def _iterate(
    messages: Iterable[RawMessage] | AsyncIterable[RawMessage],
) -> AsyncIterator[RawMessage]:
    if isinstance(messages, AsyncIterable):
        async for message in messages:
            yield message
    else:
        for message in messages:
            yield message


class BatchProcessor:
    """Deduplicating, time-boxed, concurrent front end to an extractor."""

    def __init__(
        self,
        orchestrator: MessageExtractor,
        settings: Settings | None = None,
        cache: ResultCache | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            orchestrator: Extractor run for each uncached message.
            settings: Application settings. If None, uses default settings.
            cache: Result cache. If None, one is created when caching is enabled.
        """
        self.settings = settings or get_settings()
        self.orchestrator = orchestrator
        if cache is None and self.settings.cache_enabled:
            cache = ResultCache(self.settings.cache_size_limit)
        self.cache = cache
        self._stats = _StatsRecorder()

    def stats(self) -> ProcessingStats:
        return self._stats.snapshot()

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()

    async def process_batch(self, messages: Iterable[RawMessage]) -> list[ExtractionResult]:
        """Process messages in fixed-size chunks, preserving input order.

        Messages within a chunk run concurrently (bounded by
        ``max_concurrency``); chunks run one after another.
        """
        batch = list(messages)
        if not batch:
            return []

        started = time.perf_counter()
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)
        chunk_size = self.settings.batch_chunk_size
        results: list[ExtractionResult] = []

        for start in range(0, len(batch), chunk_size):
            chunk = batch[start : start + chunk_size]
            results.extend(
                await asyncio.gather(*(self._process_limited(m, semaphore) for m in chunk))
            )

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self._stats.increment("batches_processed")
        logger.info(
            "batch_processed",
            message_count=len(batch),
            success_count=sum(1 for r in results if r.is_success),
            elapsed_ms=round(elapsed_ms, 2),
        )
        return results

    async def process_stream(
        self,
        messages: Iterable[RawMessage] | AsyncIterable[RawMessage],
    ) -> AsyncIterator[ExtractionResult]:
        """Yield results as they complete for a possibly unbounded source.

        The source is read by a separate task, so a finished result is yielded
        straight away even while the source is idle. At most
        ``stream_buffer_size`` messages are in flight or waiting to be yielded.
        Results come out in completion order. Nothing is kept for replay.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)
        slots = asyncio.Semaphore(self.settings.stream_buffer_size)
        results: asyncio.Queue[object] = asyncio.Queue()
        workers: set[asyncio.Task[None]] = set()

        async def run(message: RawMessage) -> None:
            results.put_nowait(await self._process_limited(message, semaphore))

        async def produce() -> None:
            try:
                async for message in _iterate(messages):
                    await slots.acquire()
                    task = asyncio.create_task(run(message))
                    workers.add(task)
                    task.add_done_callback(workers.discard)
                if workers:
                    await asyncio.gather(*workers)
            finally:
                results.put_nowait(_END_OF_STREAM)

        producer = asyncio.create_task(produce())
        try:
            while True:
                result = await results.get()
                if result is _END_OF_STREAM:
                    break
                slots.release()
                yield result
            # Re-raises a failure from the source, if any.
            await producer
        finally:
            producer.cancel()
            for task in list(workers):
                task.cancel()

    async def process_message(self, message: RawMessage) -> ExtractionResult:
        """Process one message with caching and a timeout."""
        key = message.cache_key()
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                self._stats.increment("cache_hits")
                return cached

        timeout_s = self.settings.processing_timeout_ms / 1000.0
        started = time.perf_counter()
        deadline = time.monotonic() + timeout_s
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(self.orchestrator.extract, message, deadline),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError:
            result = timeout_failure()
        except Exception as exc:  # noqa: BLE001
            self._stats.increment("errors")
            logger.exception("message_processing_failed", sender=message.sender, error=str(exc))
            return ExtractionFailure(
                kind=FailureKind.INTERNAL_ERROR,
                reason=f"Extraction failed: {exc}",
                confidence=SCORE_INTERNAL_ERROR,
            )

        if isinstance(result, ExtractionFailure) and result.kind is FailureKind.TIMEOUT:
            self._stats.increment("timeouts")
            logger.warning(
                "message_processing_timeout",
                sender=message.sender,
                body_length=len(message.body),
                timeout_ms=self.settings.processing_timeout_ms,
            )
            return result

        self._stats.record_message((time.perf_counter() - started) * 1000.0)
        if self.cache is not None:
            self.cache.put(key, result)
        return result

    async def _process_limited(
        self, message: RawMessage, semaphore: asyncio.Semaphore
    ) -> ExtractionResult:
        async with semaphore:
            return await self.process_message(message)
