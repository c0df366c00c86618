import importlib.metadata
from pathlib import Path
from typing import Final

import platformdirs

from .typed_path import AbsDir, Ext, RelDir, RelFile

DEPLOY_NAME: Final[str] = "sitedeploy"
DEPLOY_VERSION: Final[str] = importlib.metadata.version(DEPLOY_NAME)

DEPLOY_CACHE: AbsDir = AbsDir(Path(platformdirs.user_cache_dir(DEPLOY_NAME)))
DEPLOY_CACHE_MODE: Final[int] = 0o700
DEPLOY_LOCK_EXTENSION: Ext = Ext(".lock")

DEPLOY_FILE: RelFile = RelFile(".deploy.yaml")
BUILD_DIR: RelDir = RelDir("build")
GIT_DIR: RelDir = RelDir(".git")
ROOT_ENV_VAR: Final[str] = "SITEDEPLOY_ROOT"

DEFAULT_REMOTE: Final[str] = "origin"
DEFAULT_BRANCH: Final[str] = "gh-pages"
DEFAULT_SSH_PORT: Final[int] = 22
FTP_RETRY_CODE: Final[int] = 550

LOADING_SUFFIX: Final[str] = "..."
DONE_SUFFIX: Final[str] = "[done]"
FAILURE_SUFFIX: Final[str] = "[failed]"
