from __future__ import annotations

from dataclasses import dataclass
import errno
import fcntl
from typing import Self, TextIO

from .typed_path import AbsFile


@dataclass
class CacheInUseError(Exception):
    lockfile: AbsFile

    def __str__(self) -> str:
        return f"{self.lockfile} is in use by another deployment. Wait for it to finish then try again."


@dataclass(frozen=True)
class FileSystemLock:
    file: TextIO

    def __del__(self) -> None:
        self.release()

    @classmethod
    def acquire(cls, filepath: AbsFile) -> Self:
        file = open(filepath, "a")  # noqa: SIM115
        lock = cls.acquire_non_blocking(file)
        if lock is None:
            file.close()
            raise CacheInUseError(filepath)
        return lock

    @classmethod
    def acquire_non_blocking(cls, file: TextIO) -> Self | None:
        try:
            fcntl.flock(file, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            if e.errno in (errno.EWOULDBLOCK, errno.EAGAIN):
                return None
            raise e
        return cls(file)

    def release(self) -> None:
        self.file.close()
