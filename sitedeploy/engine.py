from collections.abc import Collection
from dataclasses import dataclass
from datetime import UTC, datetime
import functools
import hashlib
import shutil

from git import InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from .config import GitConfig
from .constants import (
    DEPLOY_CACHE,
    DEPLOY_CACHE_MODE,
    DEPLOY_LOCK_EXTENSION,
    DEPLOY_NAME,
    DEPLOY_VERSION,
    GIT_DIR,
)
from .githelper import Commit, GitHelper
from .lock import FileSystemLock
from .logger import describe
from .typed_path import AbsDir, AbsFile, GitDir, RelDir, Remote


@dataclass(frozen=True)
class MirrorCache:
    remote: Remote
    branch: str
    root: AbsDir = DEPLOY_CACHE

    @functools.cached_property
    def key(self) -> str:
        return hashlib.sha1(
            bytes(self.remote.url + self.branch, encoding="utf-8"), usedforsecurity=False
        ).hexdigest()

    @property
    def folder(self) -> AbsDir:
        return self.root / RelDir(self.key)

    @property
    def lockfile(self) -> AbsFile:
        return self.folder + DEPLOY_LOCK_EXTENSION

    def lock(self) -> FileSystemLock:
        self.root.make(mode=DEPLOY_CACHE_MODE)
        return FileSystemLock.acquire(self.lockfile)

    def is_clone(self) -> bool:
        return (self.folder / GIT_DIR).is_folder() and GitHelper.is_clone(self.folder)

    def checkout(self) -> GitDir:
        self.folder.make(mode=DEPLOY_CACHE_MODE)
        if self.is_clone():
            repo = GitDir(self.folder)
            if GitHelper.current_branch(repo) != self.branch:
                # An earlier deploy stopped before the branch was tracked.
                GitHelper.fetch(repo)
                GitHelper.track(self.remote, repo, self.branch)
            GitHelper.pull(repo, self.branch)
            return repo
        self.clear()
        repo = GitHelper.clone(self.remote, self.folder)
        if GitHelper.current_branch(repo) != self.branch:
            GitHelper.track(self.remote, repo, self.branch)
        return repo

    def clear(self, *, keep: Collection[str] = ()) -> None:
        for entry in self.folder.path.iterdir():
            if entry.name in keep:
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

    def update(self, build: AbsDir, *, clean: bool) -> None:
        if clean:
            self.clear(keep={GIT_DIR.path.name})
        shutil.copytree(
            build, self.folder, dirs_exist_ok=True, ignore=shutil.ignore_patterns(GIT_DIR.path.name)
        )


@dataclass(frozen=True)
class GitSyncEngine:
    config: GitConfig
    root: AbsDir
    build: AbsDir
    clean: bool | None = None
    cache_root: AbsDir = DEPLOY_CACHE

    @property
    def delete(self) -> bool:
        return self.config.clean if self.clean is None else self.clean

    @property
    def commit_message(self) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
        return f"Automated commit at {timestamp} by {DEPLOY_NAME} {DEPLOY_VERSION}"

    def remote(self) -> Remote:
        try:
            return GitHelper.remote_url(self.root, self.config.remote)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise InvalidGitRepositoryError(
                f"{self.root} is not a git repository, so {self.config.remote!r} cannot be resolved."
            ) from e

    def cache(self) -> MirrorCache:
        return MirrorCache(self.remote(), self.config.branch, self.cache_root)

    def deploy(self) -> MirrorCache:
        cache = self.cache()
        lock = cache.lock()
        try:
            self.sync(cache)
        finally:
            lock.release()
        logger.info(f"A cache of the remote {self.config.remote!r} is in:")
        logger.info(f"  {cache.folder}")
        logger.info("You may delete it now or leave it alone to speed up your next deployment.")
        return cache

    def sync(self, cache: MirrorCache) -> Commit | None:
        with describe(f"Checking out {cache.remote} ({self.config.branch!r})", level="DEBUG"):
            repo = cache.checkout()
        with describe(f"Copying {self.build} into {cache.folder}", level="DEBUG"):
            cache.update(self.build, clean=self.delete)
        GitHelper.add_all(repo)
        commit = GitHelper.commit(repo, self.commit_message)
        GitHelper.push(repo, self.config.branch)
        return commit
