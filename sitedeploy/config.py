from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from .constants import DEFAULT_BRANCH, DEFAULT_REMOTE, DEFAULT_SSH_PORT


class DeployMethod(StrEnum):
    RSYNC = "rsync"
    GIT = "git"
    FTP = "ftp"


@dataclass(frozen=True, kw_only=True, slots=True)
class RawDeployConfig:
    method: str | None = None
    host: str | None = None
    user: str | None = None
    path: str | None = None
    port: int | None = None
    clean: bool | None = None
    remote: str | None = None
    branch: str | None = None
    password: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class RsyncConfig:
    method: ClassVar[DeployMethod] = DeployMethod.RSYNC
    host: str
    user: str
    path: str
    port: int = DEFAULT_SSH_PORT
    clean: bool = False

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}:{self.path}"

    def __str__(self) -> str:
        return f"{self.destination} port={self.port}"


@dataclass(frozen=True, kw_only=True, slots=True)
class GitConfig:
    method: ClassVar[DeployMethod] = DeployMethod.GIT
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    clean: bool = False

    def __str__(self) -> str:
        return f"remote={self.remote!r} and branch={self.branch!r}"


@dataclass(frozen=True, kw_only=True, slots=True)
class FtpConfig:
    method: ClassVar[DeployMethod] = DeployMethod.FTP
    host: str
    user: str
    password: str = field(repr=False)
    path: str

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}:{self.path}"

    def __str__(self) -> str:
        return self.destination


type DeployConfig = RsyncConfig | GitConfig | FtpConfig
