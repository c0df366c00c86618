from collections.abc import Callable
from dataclasses import dataclass
import ftplib
import os
from typing import Any, BinaryIO, Protocol

from loguru import logger

from .config import FtpConfig
from .constants import FTP_RETRY_CODE
from .logger import describe
from .typed_path import AbsDir, RelDir, RelFile
from .utils import is_binary


class FtpClient(Protocol):
    def login(self, user: str, passwd: str) -> str: ...
    def set_pasv(self, val: bool) -> None: ...
    def cwd(self, dirname: str) -> str: ...
    def mkd(self, dirname: str) -> str: ...
    def storbinary(self, cmd: str, fp: BinaryIO, *args: Any, **kwargs: Any) -> str: ...
    def storlines(self, cmd: str, fp: BinaryIO, *args: Any, **kwargs: Any) -> str: ...
    def close(self) -> None: ...


def reply_code(error: ftplib.Error) -> int | None:
    reply = str(error)
    try:
        return int(reply[:3])
    except ValueError:
        return None


@dataclass(frozen=True)
class FtpStrategy:
    config: FtpConfig
    build: AbsDir
    connect: Callable[[str], FtpClient] = ftplib.FTP

    def run(self) -> None:
        ftp = self.connect(self.config.host)
        try:
            ftp.login(self.config.user, self.config.password)
            ftp.set_pasv(True)
            ftp.cwd(self.config.path)
            for entry in self.build.walk():
                match entry:
                    case RelDir():
                        self.make_folder(ftp, entry)
                    case RelFile():
                        self.upload(ftp, entry)
        finally:
            ftp.close()

    def make_folder(self, ftp: FtpClient, folder: RelDir) -> None:
        try:
            ftp.mkd(os.fspath(folder))
        except ftplib.error_perm as e:
            logger.info(f"Folder {folder} exists. Skipping... ({e})")

    def upload(self, ftp: FtpClient, file: RelFile) -> None:
        binary = is_binary(self.build / file)
        with describe(f"Uploading {file}", level="DEBUG"):
            try:
                self._upload(ftp, file, binary=binary)
            except ftplib.error_perm as e:
                if reply_code(e) != FTP_RETRY_CODE:
                    raise e
                logger.debug(f"Retrying {file} after {e}")
                self._upload(ftp, file, binary=binary)

    def _upload(self, ftp: FtpClient, file: RelFile, *, binary: bool) -> None:
        command = f"STOR {os.fspath(file)}"
        with open(self.build / file, "rb") as f:
            if binary:
                ftp.storbinary(command, f)
            else:
                ftp.storlines(command, f)
