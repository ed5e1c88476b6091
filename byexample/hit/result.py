"""Aggregated performance results of HTTP requests."""

from __future__ import annotations

import io
import math
from dataclasses import dataclass, replace
from typing import TextIO

_STATUS_OK = 200


def _format_duration(seconds: float) -> str:
    """Format seconds, rounded to the microsecond, as e.g. 1.5ms or 1m30s."""
    micros = round(seconds * 1_000_000)
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros == 0:
        return "0s"
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        whole, frac = divmod(micros, 1_000)
        tail = f".{frac:03d}".rstrip("0") if frac else ""
        return f"{sign}{whole}{tail}ms"

    minutes_total, sec_micros = divmod(micros, 60_000_000)
    hours, minutes = divmod(minutes_total, 60)
    whole, frac = divmod(sec_micros, 1_000_000)
    tail = f".{frac:06d}".rstrip("0") if frac else ""
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{whole}{tail}s"


@dataclass(frozen=True)
class Result:
    """A request's performance result, or the summary of many.

    Durations are in seconds. The default value is an empty summary.
    """

    rps: float = 0.0
    requests: int = 0
    errors: int = 0
    bytes: int = 0
    duration: float = 0.0
    fastest: float = 0.0
    slowest: float = 0.0
    status: int = 0
    error: BaseException | None = None

    def merge(self, other: Result) -> Result:
        """Return this summary with the single result other added to it."""
        fastest = self.fastest
        if fastest == 0 or other.duration < fastest:
            fastest = other.duration
        failed = other.error is not None or other.status != _STATUS_OK
        return replace(
            self,
            requests=self.requests + 1,
            bytes=self.bytes + other.bytes,
            fastest=fastest,
            slowest=max(self.slowest, other.duration),
            errors=self.errors + (1 if failed else 0),
        )

    def finalize(self, total: float) -> Result:
        """Return this summary with its total duration and RPS set."""
        if total:
            rps = self.requests / total
        elif self.requests:
            rps = math.inf
        else:
            rps = math.nan
        return replace(self, duration=total, rps=rps)

    def success_rate(self) -> float:
        """Return the percentage of requests that succeeded."""
        if self.requests == 0:
            return math.nan
        return (self.requests - self.errors) / self.requests * 100

    def fprint(self, out: TextIO) -> None:
        """Write a human-readable summary to out."""
        out.write("\nSummary:\n")
        out.write(f"\tSuccess    : {self.success_rate():.0f}%\n")
        out.write(f"\tRPS        : {self.rps:.1f}\n")
        out.write(f"\tRequests   : {self.requests}\n")
        out.write(f"\tErrors     : {self.errors}\n")
        out.write(f"\tBytes      : {self.bytes}\n")
        out.write(f"\tDuration   : {_format_duration(self.duration)}\n")
        if self.requests > 1:
            out.write(f"\tFastest    : {_format_duration(self.fastest)}\n")
            out.write(f"\tSlowest    : {_format_duration(self.slowest)}\n")

    def __str__(self) -> str:
        buffer = io.StringIO()
        self.fprint(buffer)
        return buffer.getvalue()