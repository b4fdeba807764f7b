"""Politeness throttle applied after every outbound request."""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class PolitenessThrottle:
    """Fixed delay inserted after each fetch, successful or not.

    Requests are issued strictly one after another, so a plain sleep is
    enough. The throttle is shared by all adapters of a run so the delay
    also separates requests to different sites.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """Initialize throttle.

        Args:
            delay_seconds: Pause after each request (0 disables it)
            sleep: Awaitable sleep function, injectable for tests
        """
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        self.delay_seconds = delay_seconds
        self._sleep = sleep or asyncio.sleep
        self.waits = 0

    async def wait(self) -> None:
        """Pause for the configured delay."""
        self.waits += 1
        if self.delay_seconds <= 0:
            return
        await self._sleep(self.delay_seconds)
        logger.debug("throttle_waited", seconds=self.delay_seconds, waits=self.waits)
