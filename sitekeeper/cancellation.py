"""Cooperative cancellation for long-running steps."""

import logging
import signal
from types import FrameType

from sitekeeper.errors import RunCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Flag checked by components at their safe boundaries.

    The token is passed explicitly to each component. Signal handlers only
    flip the flag; the component raises RunCancelled at the next boundary
    so no file is left half-written.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self, boundary: str) -> None:
        """Raise RunCancelled if cancellation was requested.

        Args:
            boundary: Description of the unit of work about to start.
        """
        if self._cancelled:
            logger.warning(f"Cancellation requested, stopping before {boundary}")
            raise RunCancelled(boundary)

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to this token."""

        def _handler(signum: int, frame: FrameType | None) -> None:
            logger.warning(f"Received signal {signum}, finishing current unit of work")
            self.cancel()

        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)
