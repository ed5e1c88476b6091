"""Information about the book."""

from __future__ import annotations

import argparse
import sys

_SUBTITLE = "Programmer's Guide to Idiomatic and Testable Code"


def title() -> str:
    """Return the title of the book."""
    return "Go by Example: " + _SUBTITLE


def main(argv: list[str] | None = None) -> int:
    """Print the book's title."""
    parser = argparse.ArgumentParser(prog="hello", description="Print the book's title.")
    parser.parse_args(argv)
    sys.stdout.write(title() + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())