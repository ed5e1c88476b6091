"""The hit command: sends many HTTP requests and prints a summary."""

from __future__ import annotations

import json
import signal
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TextIO
from urllib.parse import urlsplit

import httpx

from byexample.hit.client import Client

LOGO = r"""
 __  __     __     ______
/\ \_\ \   /\ \   /\__  _\
\ \  __ \  \ \ \  \/_/\ \/
 \ \_\ \_\  \ \_\    \ \_\
  \/_/\/_/   \/_/     \/_/"""

TIMEOUT = 3600.0
TIMEOUT_TEXT = "1h0m0s"
TIMEOUT_PER_REQUEST = 30.0

_PROGRAM = "hit"
_URL_ARG = "argument url"
_INT_MIN, _INT_MAX = -(2**63), 2**63 - 1

# (flag name, Config attribute, usage text)
_FLAGS = (
    ("n", "n", "Number of requests"),
    ("c", "c", "Concurrency level"),
    ("rps", "rps", "Requests per second"),
)


class _HelpRequested(ValueError):
    """The user asked for the usage text."""


@dataclass
class Config:
    """The command's configuration."""

    url: str = ""
    n: int = 0
    c: int = 0
    rps: int = 0


@dataclass
class Env:
    """Where the command reads its arguments and writes its output."""

    stdout: TextIO
    stderr: TextIO
    args: list[str] = field(default_factory=list)
    dry: bool = False


def _parse_int(s: str) -> int:
    negative = bool(s) and s[0] == "-"
    body = s[1:] if s and s[0] in "+-" else s
    if not body or not body.isascii() or body != body.strip():
        raise ValueError("parse error")
    try:
        if len(body) > 1 and body[0] == "0" and body[1] not in "xXoObB":
            value = int(body, 8)
        else:
            value = int(body, 0)
    except ValueError:
        raise ValueError("parse error") from None
    if negative:
        value = -value
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError("value out of range")
    return value


def positive_int(s: str) -> int:
    """Parse s as an integer (with optional base prefix) greater than zero."""
    value = _parse_int(s)
    if value <= 0:
        raise ValueError("should be greater than zero")
    return value


def _print_usage(out: TextIO, defaults: dict[str, int]) -> None:
    out.write(f"usage: {_PROGRAM} [options] url\n")
    for name, attr, text in sorted(_FLAGS):
        line = f"  -{name} value\n    \t{text}"
        if defaults[attr] != 0:
            line += f" (default {defaults[attr]})"
        out.write(line + "\n")


def _parse_flags(config: Config, args: list[str]) -> list[str]:
    """Set config from leading flags and return the remaining arguments."""
    setters = {name: attr for name, attr, _ in _FLAGS}
    rest = list(args)
    while rest:
        arg = rest[0]
        if len(arg) < 2 or arg[0] != "-":
            break
        rest.pop(0)
        name = arg[1:]
        if name.startswith("-"):
            name = name[1:]
            if not name:
                break
        if not name or name[0] in "-=":
            raise ValueError(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")
        attr = setters.get(name)
        if attr is None:
            if name in ("h", "help"):
                raise _HelpRequested("flag: help requested")
            raise ValueError(f"flag provided but not defined: -{name}")
        if not has_value:
            if not rest:
                raise ValueError(f"flag needs an argument: -{name}")
            value = rest.pop(0)
        try:
            setattr(config, attr, positive_int(value))
        except ValueError as exc:
            raise ValueError(f'invalid value "{value}" for flag -{name}: {exc}') from exc
    return rest


def parse_args(config: Config, args: list[str], stderr: TextIO) -> None:
    """Update config from command-line flags and the url argument.

    The values already in config are the defaults. Problems are reported on
    stderr with the usage text and raised as ValueError.
    """
    defaults = {attr: getattr(config, attr) for _, attr, _ in _FLAGS}
    try:
        rest = _parse_flags(config, args)
    except _HelpRequested:
        _print_usage(stderr, defaults)
        raise
    except ValueError as exc:
        print(exc, file=stderr)
        _print_usage(stderr, defaults)
        raise
    config.url = rest[0] if rest else ""

    try:
        validate_args(config)
    except ValueError as exc:
        print(exc, file=stderr)
        _print_usage(stderr, defaults)
        raise


def _arg_error(value: object, arg: str, reason: object) -> str:
    return f'invalid value "{value}" for {arg}: {reason}'


def validate_args(config: Config) -> None:
    """Raise ValueError if the url or the flag values are not acceptable."""
    try:
        parts = urlsplit(config.url)
    except ValueError as exc:
        raise ValueError(_arg_error(config.url, _URL_ARG, exc)) from exc
    host = parts.netloc.rpartition("@")[2]
    if not config.url or not host or not parts.scheme:
        raise ValueError(_arg_error(config.url, _URL_ARG, "requires a valid url"))
    if config.n < config.c:
        reason = f'should be greater than -c: "{config.c}"'
        raise ValueError(_arg_error(config.n, "flag -n", reason))


def run(env: Env) -> None:
    """Parse the arguments in env, announce the run and perform it unless dry."""
    config = Config(n=100, c=1)
    parse_args(config, env.args[1:], env.stderr)

    url = json.dumps(config.url, ensure_ascii=False)
    env.stdout.write(
        f"{LOGO}\n\nSending {config.n} requests to {url} (concurrency: {config.c})\n"
    )
    if env.dry:
        return
    run_hit(env, config)


@contextmanager
def _on_interrupt(callback: Callable[[], None]) -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, lambda signum, frame: callback())
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _report(env: Env, err: Exception) -> Exception:
    env.stderr.write(f"\nerror occurred: {err}\n")
    return err


def run_hit(env: Env, config: Config) -> None:
    """Send the requests, print the summary and raise if the run was cut short.

    Errors are also reported on env.stderr.
    """
    stop = threading.Event()
    timed_out = threading.Event()
    interrupted = threading.Event()

    def on_timeout() -> None:
        timed_out.set()
        stop.set()

    def on_interrupt() -> None:
        interrupted.set()
        stop.set()

    timer = threading.Timer(TIMEOUT, on_timeout)
    timer.daemon = True
    with _on_interrupt(on_interrupt):
        timer.start()
        try:
            try:
                request = httpx.Request("GET", config.url)
            except httpx.InvalidURL as exc:
                raise _report(env, ValueError(f"new request: {exc}")) from exc
            client = Client(c=config.c, rps=config.rps, timeout=TIMEOUT_PER_REQUEST)
            summary = client.do(request, config.n, stop)
        finally:
            timer.cancel()

    summary.fprint(env.stdout)

    if timed_out.is_set():
        raise _report(env, TimeoutError(f"timed out in {TIMEOUT_TEXT}"))
    if interrupted.is_set():
        raise _report(env, InterruptedError("context canceled"))


def main(argv: list[str] | None = None) -> int:
    """Run the hit command and return its exit status."""
    args = [_PROGRAM, *(sys.argv[1:] if argv is None else argv)]
    env = Env(stdout=sys.stdout, stderr=sys.stderr, args=args)
    try:
        run(env)
    except (ValueError, TimeoutError, InterruptedError):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())