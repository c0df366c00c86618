from dataclasses import dataclass
import functools

from loguru import logger

from .config import DeployConfig, FtpConfig, GitConfig, RawDeployConfig, RsyncConfig
from .constants import BUILD_DIR, DEPLOY_CACHE
from .engine import GitSyncEngine
from .ftp import FtpStrategy
from .resolver import resolve
from .rsync import RsyncStrategy
from .typed_path import AbsDir


@dataclass
class MissingBuildError(Exception):
    build: AbsDir

    def __str__(self) -> str:
        return f"{self.build} does not exist; build the site before deploying."


@dataclass(frozen=True)
class Deployer:
    raw_config: RawDeployConfig
    root: AbsDir
    clean: bool | None = None
    cache_root: AbsDir | None = None

    @functools.cached_property
    def config(self) -> DeployConfig:
        return resolve(self.raw_config)

    @property
    def build(self) -> AbsDir:
        return self.root / BUILD_DIR

    def deploy(self) -> None:
        config = self.config
        if not self.build.is_folder():
            raise MissingBuildError(self.build)
        logger.info(f"Deploying via {config.method} to {config}")
        match config:
            case RsyncConfig():
                RsyncStrategy(config, self.build, clean=self.clean).run()
            case GitConfig():
                GitSyncEngine(
                    config,
                    self.root,
                    self.build,
                    clean=self.clean,
                    cache_root=self.cache_root or DEPLOY_CACHE,
                ).deploy()
            case FtpConfig():
                FtpStrategy(config, self.build).run()
            case _:
                raise TypeError(f"Unable to deploy with {config!r}.")
