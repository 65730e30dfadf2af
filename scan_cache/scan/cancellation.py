"""Cooperative cancellation of running scans."""

import threading

from scan_cache.exceptions import ScanCanceledError


class CancellationToken:
    """Cancellation flag shared between a scan and the code that may stop it.

    The scan polls `check` at defined points; `cancel` may be called from any
    thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the scan."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancellation was requested."""
        return self._event.is_set()

    def check(self) -> None:
        """Raise if cancellation was requested.

        Raises:
            ScanCanceledError: If `cancel` was called.
        """
        if self._event.is_set():
            raise ScanCanceledError("Scan was canceled")


def never_canceled() -> None:
    """Cancellation check for scans that cannot be canceled."""
