"""Analytics query contract.

Only the input/output shape of the warehouse matters to discovery: a SQL
string goes in, rows (tuples of column values) come out.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class QueryExecutor(Protocol):
    """Runs one standard-SQL query and returns every row.

    `run` is blocking; callers move it off the event loop.
    """

    def run(self, query: str) -> list[Sequence[Any]]:
        ...
