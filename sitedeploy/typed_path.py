from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Self, overload


@dataclass(frozen=True, slots=True)
class TypedPath:
    path: Path

    def __init__(self, path: Path | str | Self) -> None:
        if type(self) is TypedPath:
            raise TypeError()
        object.__setattr__(self, "path", Path(path))

    def _join[T: TypedPath](self, other: TypedPath, type_: type[T]) -> T:
        return type_(self.path / other.path)

    def exists(self) -> bool:
        return self.path.exists()

    def is_folder(self) -> bool:
        return self.path.is_dir()

    def __fspath__(self) -> str:
        return self.path.__fspath__()

    def __str__(self) -> str:
        return repr(str(self.path))


@dataclass(frozen=True, slots=True, init=False)
class RelFile(TypedPath): ...


@dataclass(frozen=True, slots=True, init=False)
class AbsFile(TypedPath): ...


@dataclass(frozen=True, slots=True, init=False)
class RelDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> RelFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> RelDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        match other:
            case RelFile():
                ret_type: type[TypedPath] = RelFile
            case RelDir():
                ret_type = RelDir
            case _:
                raise TypeError()
        return self._join(other, ret_type)


@dataclass(frozen=True, slots=True, init=False)
class AbsDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> AbsFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> AbsDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        match other:
            case RelFile():
                ret_type: type[TypedPath] = AbsFile
            case RelDir():
                ret_type = AbsDir
            case _:
                raise TypeError()
        return self._join(other, ret_type)

    def __add__(self, extension: Ext) -> AbsFile:
        return AbsFile(f"{self.path}{extension.extension}")

    def make(self, *, mode: int) -> None:
        """Create the folder (and any missing parents) and set its own mode to `mode`.

        Parents keep the default permissions.
        """
        self.path.mkdir(mode=mode, parents=True, exist_ok=True)
        self.path.chmod(mode)

    def walk(self) -> Iterator[RelDir | RelFile]:
        """Yield every entry below this folder, parents before children, siblings sorted."""
        for folder, dirnames, filenames in self.path.walk():
            dirnames.sort()
            relative = RelDir(folder.relative_to(self.path))
            for dirname in dirnames:
                yield relative / RelDir(dirname)
            for filename in sorted(filenames):
                yield relative / RelFile(filename)


@dataclass(frozen=True, slots=True)
class GitDir(AbsDir):
    def __init__(self, dir: AbsDir | Path | str, *, check: bool = True) -> None:
        AbsDir.__init__(self, dir)
        if check:
            from .githelper import GitHelper

            GitHelper.repo(self)


@dataclass(frozen=True, slots=True)
class Ext:
    extension: str


@dataclass(frozen=True)
class Remote:
    url: str

    def __fspath__(self) -> str:
        return self.url

    def __str__(self) -> str:
        return repr(self.url)
