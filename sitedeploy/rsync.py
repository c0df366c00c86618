from dataclasses import dataclass
import os

from .config import RsyncConfig
from .logger import describe
from .process import ProcessResult, run_process
from .typed_path import AbsDir


@dataclass(frozen=True)
class RsyncStrategy:
    config: RsyncConfig
    build: AbsDir
    clean: bool | None = None

    @property
    def delete(self) -> bool:
        return self.config.clean if self.clean is None else self.clean

    @property
    def command(self) -> list[str]:
        command = [
            "rsync",
            "-avz",
            "-e",
            f"ssh -p {self.config.port}",
            # Trailing separator copies the contents rather than the folder itself.
            os.path.join(os.fspath(self.build), ""),
            self.config.destination,
        ]
        if self.delete:
            command.append("--delete")
        return command

    def run(self) -> ProcessResult:
        with describe(f"Syncing {self.build} to {self.config.destination}", level="DEBUG"):
            return run_process(self.command)
