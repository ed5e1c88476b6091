"""Concurrent HTTP load client.

Example::

    client = Client(c=10, rps=100, timeout=10.0)
    summary = client.do(httpx.Request("GET", "http://localhost:8080"), 1_000)
    summary.fprint(sys.stdout)
"""

from __future__ import annotations

import functools
import os
import threading
import time
from dataclasses import dataclass

import httpx

from byexample.hit.pipe import produce, split, throttle
from byexample.hit.result import Result


def send(client: httpx.Client, request: httpx.Request) -> Result:
    """Send request and return its performance result; failures land in error."""
    start = time.perf_counter()
    status = 0
    size = 0
    error: BaseException | None = None
    try:
        response = client.send(request, stream=True)
    except httpx.HTTPError as exc:
        error = exc
    else:
        status = response.status_code
        try:
            for chunk in response.iter_bytes():
                size += len(chunk)
        except httpx.HTTPError as exc:
            error = exc
        finally:
            response.close()
    return Result(
        duration=time.perf_counter() - start,
        bytes=size,
        status=status,
        error=error,
    )


@dataclass
class Client:
    """Sends HTTP requests concurrently and aggregates their results.

    c is the concurrency level (0 means the number of CPUs), rps throttles
    requests per second (0 means unthrottled), timeout is per request in
    seconds (None or 0 means none) and transport replaces the default one.
    """

    c: int = 0
    rps: int = 0
    timeout: float | None = None
    transport: httpx.BaseTransport | None = None

    def concurrency(self) -> int:
        """Return the effective concurrency level."""
        if self.c > 0:
            return self.c
        return os.cpu_count() or 1

    def _client(self) -> httpx.Client:
        transport = self.transport
        if transport is None:
            transport = httpx.HTTPTransport(
                limits=httpx.Limits(max_keepalive_connections=self.concurrency())
            )
        return httpx.Client(
            timeout=self.timeout or None,
            follow_redirects=False,
            transport=transport,
        )

    def do(
        self,
        request: httpx.Request,
        n: int,
        stop: threading.Event | None = None,
    ) -> Result:
        """Send request n times and return the aggregated result.

        Setting stop ends sending early.
        """
        start = time.perf_counter()
        body = request.read()

        def clone() -> httpx.Request:
            return httpx.Request(
                request.method, request.url, headers=request.headers, content=body
            )

        concurrency = self.concurrency()
        pipe = produce(n, clone, stop)
        if self.rps > 0:
            pipe = throttle(pipe, 1.0 / (self.rps * concurrency))

        client = self._client()
        try:
            results = split(pipe, concurrency, functools.partial(send, client))
            summary = functools.reduce(Result.merge, results, Result())
        finally:
            if self.transport is None:
                client.close()
        return summary.finalize(time.perf_counter() - start)


def send_n(
    url: str,
    n: int,
    *,
    concurrency: int = 0,
    rps: int = 0,
    timeout: float | None = None,
    stop: threading.Event | None = None,
) -> Result:
    """Send n GET requests to url and return the aggregated result.

    Raises ValueError if url cannot make a request.
    """
    try:
        request = httpx.Request("GET", url)
    except httpx.InvalidURL as exc:
        raise ValueError(f"new http request: {exc}") from exc
    client = Client(c=concurrency, rps=rps, timeout=timeout)
    return client.do(request, n, stop)