"""
Loguru sinks shared by the admission API and the gate devices.

Every line carries the service context, so API workers and gate devices can
write to one collector during an event and still be told apart.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.logging.service_context import get_service_context


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger


# Masked wherever @Logger.io dumps arguments or return values
SENSITIVE_KEYWORDS = frozenset({'password', 'pin', 'plain_pin', 'hashed_pin'})
MASK = '********'
DEPTH_LINE = '│'
TRUNCATE_LENGTH = 500

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)

# DEBUG output from these is wire-level noise (gate HTTP stack, test DB driver, event loop)
MUTED_DEBUG_LOGGERS = ('httpcore', 'httpx', 'aiosqlite', 'asyncio')


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging (SQLAlchemy, granian, httpx) to the loguru sinks"""

    def __init__(self, bound_logger: 'LoguruLogger') -> None:
        super().__init__()
        self._bound_logger = bound_logger

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(MUTED_DEBUG_LOGGERS):
            return

        level: str | int
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller, not the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self._bound_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def resolve_log_level() -> str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return 'DEBUG' if settings.DEBUG else 'INFO'


def log_file_path(log_dir: Path, now: datetime) -> Path:
    return log_dir / f'{now.strftime("%Y-%m-%d_%H")}.log'


def configure_logging() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )
    level = resolve_log_level()

    bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)

    # Files default to DEBUG runs only; production ships stdout to the collector
    write_file = settings.DEBUG if settings.LOG_TO_FILE is None else settings.LOG_TO_FILE
    if write_file:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
        bound.add(
            str(log_file_path(settings.LOG_DIR, datetime.now(timezone.utc))),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=level,
        )

    logging.basicConfig(handlers=[InterceptHandler(bound)], level=0, force=True)
    return bound


custom_logger = configure_logging()
