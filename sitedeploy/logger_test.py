import contextlib
import textwrap

from loguru import logger
import pytest
from pytest import LogCaptureFixture

from .logger import describe, log_level_name


@pytest.fixture
def log_level() -> str:
    return "TRACE"


@pytest.fixture(autouse=True)
def log_cleanly(log_cleanly: None) -> None: ...


@pytest.mark.typed
def test_describe_success(caplog: LogCaptureFixture) -> None:
    with describe("Cloning"):
        logger.info("working")
    assert (
        caplog.text.strip()
        == textwrap.dedent(
            """
            Cloning ...
            working
            Cloning [done]
            """
        ).strip()
    )


@pytest.mark.typed
def test_describe_failure(caplog: LogCaptureFixture) -> None:
    with pytest.raises(RuntimeError), describe("Pushing"):
        logger.info("working")
        raise RuntimeError("rejected")
    assert (
        caplog.text.strip()
        == textwrap.dedent(
            """
            Pushing ...
            working
            Pushing [failed]
            """
        ).strip()
    )


@pytest.mark.parametrize("log_level", ["INFO"])
def test_describe_levels(caplog: LogCaptureFixture) -> None:
    with describe("info", level="INFO"):
        logger.info("working")
    with describe("debug", level="DEBUG"):
        logger.info("working")
    with contextlib.suppress(RuntimeError), describe("hidden", level="DEBUG", error_level="WARNING"):
        raise RuntimeError()
    assert (
        caplog.text.strip()
        == textwrap.dedent(
            """
            info ...
            working
            info [done]
            working
            hidden [failed]
            """
        ).strip()
    )


@pytest.mark.typed
def test_describe_decorator(caplog: LogCaptureFixture) -> None:
    @describe("Copying")
    def copy(x: int) -> int:
        logger.info("copying")
        return x + 1

    assert copy(3) == 4
    assert (
        caplog.text.strip()
        == textwrap.dedent(
            """
            Copying ...
            copying
            Copying [done]
            """
        ).strip()
    )


@pytest.mark.parametrize(
    "quiet, verbose, level",
    [
        # default
        (0, 0, "info"),
        # -v
        (0, 1, "debug"),
        # -vv
        (0, 2, "trace"),
        # -vvv
        (0, 3, 0),
        # -q
        (1, 0, "warning"),
        # -qq
        (2, 0, "error"),
        # -qqq
        (3, 0, "critical"),
        # -qqqq
        (4, 0, 100),
        # mixed equally
        (1, 1, "info"),
        # mixed quiet
        (3, 1, "error"),
    ],
)
def test_log_level_name(quiet: int, verbose: int, level: str | int) -> None:
    if isinstance(level, str):
        assert log_level_name(quiet, verbose) == level.upper()
    else:
        assert log_level_name(quiet, verbose) == level
