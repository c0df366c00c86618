import os
import subprocess
from unittest import mock

from inline_snapshot import snapshot
import pytest

from .config import RsyncConfig
from .process import TransportError
from .rsync import RsyncStrategy
from .typed_path import AbsDir


@pytest.fixture
def build() -> AbsDir:
    return AbsDir("/project/build")


@pytest.mark.parametrize(
    "config, clean, command",
    [
        (
            # clean from config, default port
            RsyncConfig(host="h", user="u", path="/p", clean=True),
            None,
            snapshot(["rsync", "-avz", "-e", "ssh -p 22", "/project/build/", "u@h:/p", "--delete"]),
        ),
        (
            # no clean, custom port
            RsyncConfig(host="h", user="u", path="/p", port=2222),
            None,
            snapshot(["rsync", "-avz", "-e", "ssh -p 2222", "/project/build/", "u@h:/p"]),
        ),
        (
            # override enables clean
            RsyncConfig(host="h", user="u", path="/p"),
            True,
            snapshot(["rsync", "-avz", "-e", "ssh -p 22", "/project/build/", "u@h:/p", "--delete"]),
        ),
        (
            # override disables clean
            RsyncConfig(host="h", user="u", path="/p", clean=True),
            False,
            snapshot(["rsync", "-avz", "-e", "ssh -p 22", "/project/build/", "u@h:/p"]),
        ),
    ],
)
def test_command(config: RsyncConfig, clean: bool | None, command: list[str], build: AbsDir) -> None:
    assert RsyncStrategy(config, build, clean=clean).command == command


def test_source_keeps_single_trailing_separator() -> None:
    strategy = RsyncStrategy(RsyncConfig(host="h", user="u", path="/p"), AbsDir("/build/"))
    assert strategy.command[4] == f"{os.sep}build{os.sep}"


def test_run_invokes_rsync(build: AbsDir) -> None:
    strategy = RsyncStrategy(RsyncConfig(host="h", user="u", path="/p"), build)
    completed = subprocess.CompletedProcess(strategy.command, 0, stdout="sent 10 bytes\n", stderr="")
    with mock.patch("sitedeploy.process.subprocess.run", return_value=completed) as run:
        result = strategy.run()
    run.assert_called_once_with(
        strategy.command, capture_output=True, text=True, check=False
    )
    assert result.stdout == "sent 10 bytes\n"


def test_run_failure_reports_exit_status(build: AbsDir) -> None:
    strategy = RsyncStrategy(RsyncConfig(host="h", user="u", path="/p"), build)
    completed = subprocess.CompletedProcess(
        strategy.command, 255, stdout="", stderr="ssh: connect to host h port 22: Connection refused\n"
    )
    with (
        mock.patch("sitedeploy.process.subprocess.run", return_value=completed),
        pytest.raises(TransportError) as e,
    ):
        strategy.run()
    assert e.value.returncode == 255
    assert str(e.value) == snapshot(
        "'rsync' failed with exit status 255. (ssh: connect to host h port 22: Connection refused)"
    )
