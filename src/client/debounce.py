"""Cancellable debounce timer for the asyncio UI loop."""

import asyncio
import logging
from typing import Any, Callable, Optional, Tuple

# Configure module logger
logger = logging.getLogger(__name__)


class Debouncer:
    """Calls ``callback`` once the input has been quiet for ``delay`` seconds.

    Every trigger() cancels the pending call and starts a new timer, so at
    most one call happens per idle period and none while input keeps coming.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._args: Tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        """Restart the timer with the latest arguments.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self.cancel()
        self._args = args
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        if self._handle is not None:
            self.cancel()
            self._fire()

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        try:
            self.callback(*args)
        except Exception:
            # call_later would otherwise report this only to the loop handler
            logger.error("Debounced callback failed", exc_info=True)
            raise
