"""Cooperative cancellation for a verification run."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """Set once by the caller; awaited by the pipeline alongside its own work."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
