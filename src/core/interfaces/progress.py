"""Progress reporting contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The core reports progress without knowing whether a Rich bar, a test
  double or nothing at all is listening.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressReporter(Protocol):
    """Minimal progress sink for the per-package fan-out.

    Design rules:
    - Calls happen on the event loop thread only; implementations need no lock.
    - `inc` is called exactly once per completed package.
    """

    def set_length(self, total: int) -> None:
        ...

    def set_message(self, message: str) -> None:
        ...

    def inc(self, delta: int = 1) -> None:
        ...

    def finish(self, message: str) -> None:
        ...


class NullProgress:
    """Progress sink that only counts; used by tests and non-interactive runs."""

    def __init__(self) -> None:
        self.total = 0
        self.completed = 0
        self.message = ""

    def set_length(self, total: int) -> None:
        self.total = total

    def set_message(self, message: str) -> None:
        self.message = message

    def inc(self, delta: int = 1) -> None:
        self.completed += delta

    def finish(self, message: str) -> None:
        self.message = message
