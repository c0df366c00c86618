from collections.abc import Collection, Sequence
from dataclasses import dataclass
import functools
import os
from typing import Any, ClassVar, Never, cast

import git
from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git import Repo as GitRepo
from git.cmd import _AutoInterrupt as GitCmd
from loguru import logger

from .logger import describe
from .process import ProcessResult
from .typed_path import AbsDir, GitDir, Remote
from .utils import strict_not_none


@dataclass(frozen=True, slots=True)
class Commit:
    sha: str
    DISPLAY_LENGTH: ClassVar[int] = 7

    def __str__(self) -> str:
        return self.sha[: self.DISPLAY_LENGTH]


@dataclass
class RemoteResolutionError(Exception):
    local: AbsDir
    remote_name: str

    def __str__(self) -> str:
        return f"{self.local} has no remote named {self.remote_name!r} (run `git remote -v` to see a list of possible remotes)."


@dataclass
class MissingBranchError(Exception):
    remote: Remote
    branch: str

    def __str__(self) -> str:
        return f"{self.remote} has no branch named {self.branch!r}; push it once before deploying."


@dataclass
class SyncConflictError(Exception):
    local: GitDir
    branch: str
    stderr: str

    def __str__(self) -> str:
        return f"Unable to fast-forward {self.local} to origin/{self.branch}; delete the cache and try again. ({self.stderr.strip()})"


class GitHelper:
    ORIGIN = "origin"

    @classmethod
    @functools.cache
    def repo(cls, local: AbsDir) -> GitRepo:
        # Convert to string explicitly to gitpython-developers/GitPython#2085
        return GitRepo(os.fspath(local))

    @classmethod
    def run_command(
        cls,
        local: GitDir,
        command: str,
        *args: Any,
        returncodes: Collection[int] | None = (0,),
        as_process: Never = cast(Never, None),
        **kwargs: Any,
    ) -> ProcessResult:
        cmd: GitCmd = getattr(cls.repo(local).git, command)(*args, **kwargs, as_process=True)
        return cls.wait(cmd, returncodes=returncodes)

    @classmethod
    def wait(cls, cmd: GitCmd, *, returncodes: Collection[int] | None) -> ProcessResult:
        process = strict_not_none(cmd.proc)
        stdout, stderr = process.communicate()
        result = ProcessResult(
            stdout=strict_not_none(git.safe_decode(stdout)),
            stderr=strict_not_none(git.safe_decode(stderr)),
            returncode=process.returncode,
            args=tuple(cast(Sequence[str], process.args)),
        )
        if returncodes is None or result.returncode in returncodes:
            result.log(level="TRACE")
        else:
            result.log(level="DEBUG")
            raise GitCommandError(
                tuple(result.args),
                status=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    @classmethod
    def remote_url(cls, local: AbsDir, remote_name: str) -> Remote:
        repo = cls.repo(local)
        try:
            remote = repo.remote(remote_name)
        except ValueError:
            raise RemoteResolutionError(local, remote_name) from None
        return Remote(remote.url)

    @classmethod
    def is_clone(cls, local: AbsDir) -> bool:
        try:
            GitRepo(os.fspath(local))
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.debug(f"{local} is not a clone ({type(e).__name__}).")
            return False
        return True

    @classmethod
    def clone(cls, remote: Remote, local: AbsDir) -> GitDir:
        with describe(f"Cloning {remote} into {local}", level="INFO", error_level="DEBUG"):
            GitRepo.clone_from(remote.url, os.fspath(local))
        cls.repo.cache_clear()
        return GitDir(local)

    @classmethod
    def current_branch(cls, local: GitDir) -> str:
        return cls.repo(local).active_branch.name

    @classmethod
    def fetch(cls, local: GitDir) -> None:
        with describe(f"Fetching {cls.ORIGIN!r} into {local}", level="DEBUG"):
            cls.run_command(local, "fetch", cls.ORIGIN)

    @classmethod
    def track(cls, remote: Remote, local: GitDir, branch: str) -> None:
        repo = cls.repo(local)
        tracking = f"{cls.ORIGIN}/{branch}"
        if tracking not in {ref.name for ref in repo.remote(cls.ORIGIN).refs}:
            raise MissingBranchError(remote, branch)
        with describe(f"Checking out {branch!r} tracking {tracking!r}", level="DEBUG"):
            cls.run_command(local, "checkout", "-b", branch, "--track", tracking)

    @classmethod
    def pull(cls, local: GitDir, branch: str) -> None:
        with describe(f"Pulling {branch!r} into {local}", level="INFO", error_level="DEBUG"):
            result = cls.run_command(
                local, "pull", "--ff-only", cls.ORIGIN, branch, returncodes=None
            )
            if result.returncode != 0:
                raise SyncConflictError(local, branch, result.stderr)

    @classmethod
    def add_all(cls, local: GitDir) -> None:
        cls.run_command(local, "add", "--all")

    @classmethod
    def has_staged_changes(cls, local: GitDir) -> bool:
        repo = cls.repo(local)
        if not repo.head.is_valid():
            return len(repo.index.entries) > 0
        return cls.run_command(local, "diff", "--cached", "--quiet", returncodes=(0, 1)).returncode == 1

    @classmethod
    def commit(cls, local: GitDir, message: str) -> Commit | None:
        if not cls.has_staged_changes(local):
            logger.info(f"Nothing to commit in {local}.")
            return None
        cls.run_command(local, "commit", "-m", message)
        return cls.head(local)

    @classmethod
    def push(cls, local: GitDir, branch: str) -> None:
        with describe(f"Pushing {branch!r} from {local}", level="INFO", error_level="DEBUG"):
            cls.run_command(local, "push", cls.ORIGIN, branch)

    @classmethod
    def head(cls, local: GitDir) -> Commit:
        return Commit(cls.repo(local).head.commit.hexsha)
