import time
from typing import Callable, Optional

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.gate_client.domain.gate_client_error import DuplicateScanError


class DuplicateScanGuard:
    """
    Rejects the same identifier presented again within a short window.

    Lives in memory only; a restart forgets the last scan. Server-side
    duplicate detection still applies to whatever gets through.
    """

    def __init__(
        self,
        *,
        window_seconds: float = settings.GATE_DUPLICATE_SCAN_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self.clock = clock
        self._last_scan: Optional[tuple[str, float]] = None

    def check(self, *, identifier: str) -> None:
        key = identifier.strip()
        now = self.clock()

        if self._last_scan is not None:
            last_identifier, last_at = self._last_scan
            if last_identifier == key and now - last_at < self.window_seconds:
                Logger.base.info(f'⏱️ [GUARD] Ignored rescan of {key} after {now - last_at:.2f}s')
                raise DuplicateScanError()

        self._last_scan = (key, now)

    def reset(self) -> None:
        self._last_scan = None
