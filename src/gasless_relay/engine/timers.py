"""
Time source used by the builder (validity window) and the orchestrator
(delayed balance refresh). Tests inject their own ``Clock``.
"""

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Current unix time in whole seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """Wall clock and ``asyncio.sleep``."""

    def now(self) -> int:
        return int(time.time())

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
