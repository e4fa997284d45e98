"""Utilities for sequential RPC dispatch pipelines."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable


Envelope = dict[str, Any]
StepResult = Envelope | None
DispatchStep = Callable[[], Awaitable[StepResult] | StepResult]


async def run_handler_pipeline(steps: Iterable[DispatchStep]) -> StepResult:
    """Run steps in order and return the first non-None envelope."""
    for step in steps:
        outcome = step()
        result = await outcome if inspect.isawaitable(outcome) else outcome
        if result is not None:
            return result
    return None
