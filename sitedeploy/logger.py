from collections.abc import Sequence
import contextlib
from dataclasses import KW_ONLY, dataclass
import sys
from types import TracebackType
from typing import Final, Self

from loguru import logger

from .constants import DONE_SUFFIX, FAILURE_SUFFIX, LOADING_SUFFIX

LOG_LEVELS: Final[Sequence[str]] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE")
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
SILENT: Final[int] = 100
EVERYTHING: Final[int] = 0


def _caller_depth() -> int:
    """Count the frames between the logging call and the first frame outside this module."""
    frame = sys._getframe(1)
    depth = 0
    while frame is not None and frame.f_code.co_filename in (__file__, contextlib.__file__):
        frame = frame.f_back  # type: ignore [assignment]
        depth += 1
    return depth


@dataclass(frozen=True, slots=True)
class describe(contextlib.ContextDecorator):  # noqa: N801
    """Log a step as it starts, then whether it finished or failed.

    Works as a context manager or as a decorator.
    """

    message: str
    _: KW_ONLY
    level: str = "TRACE"
    error_level: str = "ERROR"

    def _emit(self, level: str, suffix: str) -> None:
        logger.opt(depth=_caller_depth()).log(level, f"{self.message} {suffix}")

    def __enter__(self) -> Self:
        self._emit(self.level, LOADING_SUFFIX)
        return self

    def __exit__(
        self,
        type_: type[BaseException] | None,
        value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if type_ is None:
            self._emit(self.level, DONE_SUFFIX)
        else:
            self._emit(self.error_level, FAILURE_SUFFIX)


def log_level_name(quiet: int, verbose: int) -> str | int:
    index = LOG_LEVELS.index(DEFAULT_LOG_LEVEL) + verbose - quiet
    if index < 0:
        return SILENT
    if index >= len(LOG_LEVELS):
        return EVERYTHING
    return LOG_LEVELS[index]


def setup_logger(quiet: int, verbose: int) -> None:
    logger.remove()
    logger.add(sys.stdout, level=log_level_name(quiet, verbose), format="<level>{message}</level>")
