from collections.abc import Sequence
from dataclasses import dataclass
import shlex
import subprocess

from loguru import logger


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessResult:
    stdout: str
    stderr: str
    returncode: int
    args: Sequence[str]

    def log(self, level: str) -> None:
        logger.log(level, f"Running: {shlex.join(self.args)}")
        logger.log(level, f"stdout:\n{self.stdout}")
        logger.log(level, f"stderr:\n{self.stderr}")
        logger.log(level, f"returncode = {self.returncode}")


@dataclass
class TransportError(Exception):
    command: str
    returncode: int
    stderr: str = ""

    def __str__(self) -> str:
        message = f"{self.command!r} failed with exit status {self.returncode}."
        if self.stderr.strip():
            message = f"{message} ({self.stderr.strip()})"
        return message


def run_process(args: Sequence[str]) -> ProcessResult:
    completed = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        check=False,
    )
    result = ProcessResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
        args=tuple(args),
    )
    if result.returncode == 0:
        result.log(level="DEBUG")
    else:
        result.log(level="INFO")
        raise TransportError(args[0], result.returncode, result.stderr)
    return result
