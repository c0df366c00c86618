from collections.abc import Sequence
from dataclasses import dataclass
import textwrap
from typing import Final

from .config import DeployConfig, DeployMethod, FtpConfig, GitConfig, RawDeployConfig, RsyncConfig
from .constants import DEFAULT_BRANCH, DEFAULT_REMOTE, DEFAULT_SSH_PORT, DEPLOY_FILE

USAGE_EXAMPLES: Final[dict[DeployMethod, str]] = {
    DeployMethod.RSYNC: """
        # Deploy the build directory to a remote host via rsync.
        method: rsync
        # host, user and path must be set.
        host: www.example.com
        user: deployer
        path: /srv/www/site
        # port is optional (default 22).
        port: 22
        # clean is optional (default false).
        clean: true
        """,
    DeployMethod.GIT: """
        # Deploy to a remote branch via git (eg gh-pages on GitHub).
        method: git
        # remote is optional (default "origin").
        # Run `git remote -v` to see a list of possible remotes.
        remote: some-other-remote-name
        # branch is optional (default "gh-pages").
        # Run `git branch -a` to see a list of possible branches.
        branch: some-other-branch-name
        """,
    DeployMethod.FTP: """
        # Deploy the build directory to a remote host via ftp.
        method: ftp
        # host, user, password and path must be set.
        host: ftp.example.com
        user: deployer
        password: secret
        path: /srv/www/site
        """,
}


def usage(*methods: DeployMethod) -> str:
    examples = "\n".join(textwrap.dedent(USAGE_EXAMPLES[method]) for method in methods)
    return f"Follow one of the examples below to set up {DEPLOY_FILE}.\n{examples}"


class ConfigurationError(ValueError):
    @property
    def usage(self) -> str:
        return usage(*DeployMethod)


@dataclass
class MissingMethodError(ConfigurationError):
    def __str__(self) -> str:
        return f"A deploy method must be set (one of {', '.join(DeployMethod)})."


@dataclass
class InvalidMethodError(ConfigurationError):
    method: str

    def __str__(self) -> str:
        return f"{self.method!r} is not a deploy method (expected one of {', '.join(DeployMethod)})."


@dataclass
class MissingFieldsError(ConfigurationError):
    method: DeployMethod
    fields: Sequence[str]

    def __str__(self) -> str:
        return f"The {self.method} deploy method requires {', '.join(self.fields)} to be set."

    @property
    def usage(self) -> str:
        return usage(self.method)


def resolve(raw: RawDeployConfig) -> DeployConfig:
    if raw.method is None:
        raise MissingMethodError()
    try:
        method = DeployMethod(raw.method)
    except ValueError:
        raise InvalidMethodError(raw.method) from None
    match method:
        case DeployMethod.RSYNC:
            return _resolve_rsync(raw)
        case DeployMethod.GIT:
            return _resolve_git(raw)
        case DeployMethod.FTP:
            return _resolve_ftp(raw)


def _require(raw: RawDeployConfig, method: DeployMethod, *fields: str) -> None:
    missing = [field for field in fields if getattr(raw, field) is None]
    if missing:
        raise MissingFieldsError(method, missing)


def _resolve_rsync(raw: RawDeployConfig) -> RsyncConfig:
    _require(raw, DeployMethod.RSYNC, "host", "user", "path")
    assert raw.host is not None and raw.user is not None and raw.path is not None
    return RsyncConfig(
        host=raw.host,
        user=raw.user,
        path=raw.path,
        port=DEFAULT_SSH_PORT if raw.port is None else raw.port,
        clean=bool(raw.clean),
    )


def _resolve_git(raw: RawDeployConfig) -> GitConfig:
    return GitConfig(
        remote=raw.remote or DEFAULT_REMOTE,
        branch=raw.branch or DEFAULT_BRANCH,
        clean=bool(raw.clean),
    )


def _resolve_ftp(raw: RawDeployConfig) -> FtpConfig:
    _require(raw, DeployMethod.FTP, "host", "user", "password", "path")
    assert (
        raw.host is not None
        and raw.user is not None
        and raw.password is not None
        and raw.path is not None
    )
    return FtpConfig(host=raw.host, user=raw.user, password=raw.password, path=raw.path)
