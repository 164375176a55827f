"""Bounded fan-out of per-package work.

One coroutine per name, at most `max_concurrency` running at once. Results
come back in submission order whatever the completion order; failures are
the worker's business (the package scanner already turns them into `[]`).
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

from core.errors import ConfigurationError
from core.services.context import RunContext

T = TypeVar("T")


async def run_bounded(
    names: Sequence[str],
    worker: Callable[[str], Awaitable[T]],
    *,
    max_concurrency: int,
    context: RunContext,
) -> list[T]:
    if max_concurrency < 1:
        raise ConfigurationError(f"max_concurrency must be >= 1, got {max_concurrency}")

    sem = asyncio.Semaphore(max_concurrency)
    progress = context.progress
    progress.set_length(len(names))

    async def run_one(name: str) -> T:
        async with sem:
            progress.set_message(name)
            try:
                return await worker(name)
            finally:
                progress.inc(1)

    return list(await asyncio.gather(*(run_one(name) for name in names)))
