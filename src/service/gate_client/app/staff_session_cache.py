"""
Staff Session Cache

Keeps a verified staff member signed in on a gate device for one shift
without storing the PIN. The value lives in the first storage tier that
accepts it:

    durable file  ->  session-scoped temp file  ->  process memory

A failing tier is logged and skipped; callers never see storage errors.
"""

from abc import ABC, abstractmethod
import os
from pathlib import Path
import tempfile
import time
from typing import Any, Callable, Optional, Sequence

import orjson

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


_STORAGE_ERRORS = (OSError, ValueError, TypeError)


class SessionStorageTier(ABC):
    name: str

    @abstractmethod
    def write(self, value: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def read(self) -> Optional[dict[str, Any]]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class JsonFileTier(SessionStorageTier):
    def __init__(self, *, path: Path, name: str) -> None:
        self.path = path
        self.name = name

    def write(self, value: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(orjson.dumps(value))

    def read(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        value = orjson.loads(self.path.read_bytes())
        if not isinstance(value, dict):
            raise ValueError(f'{self.path} does not hold a session object')
        return value

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemoryTier(SessionStorageTier):
    name = 'memory'

    def __init__(self) -> None:
        self._value: Optional[dict[str, Any]] = None

    def write(self, value: dict[str, Any]) -> None:
        self._value = dict(value)

    def read(self) -> Optional[dict[str, Any]]:
        return dict(self._value) if self._value is not None else None

    def clear(self) -> None:
        self._value = None


def default_tiers() -> list[SessionStorageTier]:
    session_file = Path(tempfile.gettempdir()) / 'ticket_gate' / f'staff_session_{os.getpid()}.json'
    return [
        JsonFileTier(path=settings.GATE_STAFF_SESSION_FILE, name='durable_file'),
        JsonFileTier(path=session_file, name='session_file'),
        MemoryTier(),
    ]


class StaffSessionCache:
    def __init__(
        self,
        *,
        tiers: Optional[Sequence[SessionStorageTier]] = None,
        session_hours: float = settings.GATE_STAFF_SESSION_HOURS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.tiers = list(tiers) if tiers is not None else default_tiers()
        self.session_seconds = session_hours * 3600
        self.clock = clock

    # Storage chain

    def set(self, value: dict[str, Any]) -> Optional[str]:
        """Write to the first tier that accepts the value; returns that tier's name"""
        for tier in self.tiers:
            try:
                tier.write(value)
                return tier.name
            except _STORAGE_ERRORS as e:
                Logger.base.warning(f'⚠️ [SESSION] {tier.name} rejected write: {e!r}')
        Logger.base.error('❌ [SESSION] No storage tier accepted the staff session')
        return None

    def get(self) -> Optional[dict[str, Any]]:
        for tier in self.tiers:
            try:
                value = tier.read()
            except _STORAGE_ERRORS as e:
                Logger.base.warning(f'⚠️ [SESSION] {tier.name} unreadable: {e!r}')
                continue
            if value is not None:
                return value
        return None

    def remove(self) -> None:
        for tier in self.tiers:
            self._clear(tier)

    def _clear(self, tier: SessionStorageTier) -> None:
        try:
            tier.clear()
        except _STORAGE_ERRORS as e:
            Logger.base.warning(f'⚠️ [SESSION] {tier.name} could not be cleared: {e!r}')

    # Staff authorization

    def start_session(self) -> None:
        self.set({'timestamp': self.clock()})
        Logger.base.info('🔓 [SESSION] Staff session started')

    def is_authorized(self) -> bool:
        """
        True if any tier holds a session younger than the shift length.

        Each tier is judged on its own value: a stale or malformed entry is
        cleared from that tier only, so a fresh session further down the chain
        (written there because a higher tier stopped accepting writes) survives.
        """
        for tier in self.tiers:
            try:
                cached = tier.read()
            except _STORAGE_ERRORS as e:
                Logger.base.warning(f'⚠️ [SESSION] {tier.name} unreadable: {e!r}')
                continue
            if cached is None:
                continue

            timestamp = cached.get('timestamp')
            if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
                Logger.base.warning(f'⚠️ [SESSION] Malformed staff session in {tier.name}')
                self._clear(tier)
                continue

            if self.clock() - timestamp < self.session_seconds:
                return True

            Logger.base.info(f'⌛ [SESSION] Staff session in {tier.name} expired')
            self._clear(tier)
        return False

    def end_session(self) -> None:
        self.remove()
        Logger.base.info('🔒 [SESSION] Staff session ended')
