"""Pipeline stages for producing, throttling and fanning out work."""

from __future__ import annotations

import math
import queue
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

_DONE = object()


def produce(n: int, fn: Callable[[], T], stop: threading.Event | None = None) -> Iterator[T]:
    """Yield fn() n times, ending early once stop is set."""
    for _ in range(n):
        if stop is not None and stop.is_set():
            return
        yield fn()


def throttle(items: Iterable[T], delay: float) -> Iterator[T]:
    """Yield items one per tick of a clock ticking every delay seconds."""
    if delay <= 0:
        raise ValueError("non-positive interval for throttle")
    next_tick = time.monotonic() + delay
    for item in items:
        now = time.monotonic()
        if now < next_tick:
            time.sleep(next_tick - now)
        yield item
        next_tick += delay
        now = time.monotonic()
        if now > next_tick + delay:
            # Ticks missed while the consumer was busy are dropped.
            next_tick += math.floor((now - next_tick) / delay) * delay


def _drain(results: queue.Queue, finishers: int) -> Iterator:
    remaining = finishers
    while remaining:
        message = results.get()
        if message is _DONE:
            remaining -= 1
            continue
        succeeded, value = message
        if not succeeded:
            raise value
        yield value


def split(items: Iterable[T], concurrency: int, fn: Callable[[T], R]) -> Iterator[R]:
    """Run fn on items in concurrency threads and yield results as they finish."""
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    source = iter(items)
    lock = threading.Lock()
    results: queue.Queue = queue.Queue()

    def worker() -> None:
        try:
            while True:
                with lock:
                    try:
                        item = next(source)
                    except StopIteration:
                        return
                results.put((True, fn(item)))
        except BaseException as exc:  # re-raised in the consumer
            results.put((False, exc))
        finally:
            results.put(_DONE)

    for _ in range(concurrency):
        threading.Thread(target=worker, daemon=True).start()
    yield from _drain(results, concurrency)


def split_limit(items: Iterable[T], concurrency: int, fn: Callable[[T], R]) -> Iterator[R]:
    """Like split, but starts a thread per item, at most concurrency at a time."""
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    slots = threading.Semaphore(concurrency)
    results: queue.Queue = queue.Queue()

    def run(item: T) -> None:
        try:
            results.put((True, fn(item)))
        except BaseException as exc:  # re-raised in the consumer
            results.put((False, exc))
        finally:
            slots.release()

    def dispatch() -> None:
        try:
            for item in items:
                slots.acquire()
                threading.Thread(target=run, args=(item,), daemon=True).start()
            for _ in range(concurrency):
                slots.acquire()
        except BaseException as exc:  # re-raised in the consumer
            results.put((False, exc))
        finally:
            results.put(_DONE)

    threading.Thread(target=dispatch, daemon=True).start()
    yield from _drain(results, 1)