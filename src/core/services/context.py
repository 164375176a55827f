"""Run context shared by every component call.

A single value carries the logger and the progress sink through discovery,
scanning and assembly, so nothing in the core reaches for global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger as _root_logger

from core.interfaces.progress import NullProgress, ProgressReporter

if TYPE_CHECKING:
    from loguru import Logger


@dataclass(frozen=True)
class RunContext:
    """Logger + progress handed to each component."""

    logger: "Logger" = field(default_factory=lambda: _root_logger.bind(source="pypi"))
    progress: ProgressReporter = field(default_factory=NullProgress)
