"""Server monitoring with notifiers, usage levels and colours."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

SLOW_THRESHOLD = 2.0
"""Seconds of response time above which a server is slow."""

HIGH_USAGE = 0.95


def _format_duration(seconds: float) -> str:
    if seconds == 0:
        return "0s"
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    if seconds < 1:
        return f"{sign}{seconds * 1000:g}ms"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{secs:g}s"


@dataclass
class Server:
    """A monitored server and its last response time in seconds."""

    url: str
    response_time: float = 0.0

    def check(self) -> float:
        """Simulate checking the server: wait 1 to 5 seconds and record it."""
        waited = float(random.randint(1, 5))
        time.sleep(waited)
        self.response_time = waited
        return waited

    def slow(self) -> bool:
        """Tell whether the response time exceeds two seconds."""
        return self.response_time > SLOW_THRESHOLD


class Usage(float):
    """A resource usage level between 0 and 1."""

    def high(self) -> bool:
        """Tell whether the usage is at least 95%."""
        return self >= HIGH_USAGE

    def set(self, to: float) -> Usage:
        """Return a new usage of the given level."""
        return Usage(to)


class Notifier(ABC):
    """Sends a server's status somewhere."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Send message."""


@dataclass
class SlackNotifier(Notifier):
    """Notifies via Slack (simulated by printing)."""

    api_key: str = ""
    channel: str = ""
    connected: bool = True

    def notify(self, message: str) -> None:
        print("slack:", message)

    def disconnect(self) -> None:
        """Disconnect from Slack."""
        self.connected = False
        print("slack: disconnecting")


@dataclass
class SmsNotifier(Notifier):
    """Notifies via SMS (simulated by printing)."""

    gateway_ip: str = ""

    def notify(self, message: str) -> None:
        print("sms:", message)


class MultiNotifier(Notifier):
    """Notifies through several notifiers in order."""

    def __init__(self, *notifiers: Notifier) -> None:
        self.notifiers = list(notifiers)

    def notify(self, message: str) -> None:
        for notifier in self.notifiers:
            notifier.notify(message)


def notify(server: Server, notifier: Notifier) -> None:
    """Send a message through notifier if server is slow."""
    if not server.slow():
        return
    notifier.notify(f"{server.url} server is slow: {_format_duration(server.response_time)}")


class Color(int):
    """A 24-bit RGB colour."""

    def r(self) -> int:
        return (self >> 16) & 0xFF

    def g(self) -> int:
        return (self >> 8) & 0xFF

    def b(self) -> int:
        return self & 0xFF

    def invert(self) -> Color:
        """Return the complementary colour."""
        return Color(~self & 0xFFFFFF)


def _bool(value: bool) -> str:
    return str(value).lower()


def main(argv: list[str] | None = None) -> int:
    """Walk through the monitoring examples, printing what they do."""
    file_server = Server(url="file")
    file_server.check()
    print(f"is slow? {_bool(file_server.slow())}")

    cpu = Usage(0.99)
    print("CPU usage:", cpu)
    print("high CPU usage?", _bool(cpu.high()))
    cpu = cpu.set(0.7)
    print("CPU usage:", cpu)
    print("high usage?", _bool(cpu.high()))

    auth_server = Server(url="auth", response_time=60.0)
    slack = SlackNotifier()
    sms = SmsNotifier()
    notify(auth_server, slack)
    notify(auth_server, sms)
    notify(auth_server, MultiNotifier(slack, sms))

    color = Color(0x29BEB0)
    print(color.r(), color.g(), color.b())
    color = color.invert()
    print(color.r(), color.g(), color.b())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())