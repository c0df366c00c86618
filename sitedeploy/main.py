from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import functools
import os
import sys
import traceback

import click
from loguru import logger

from .config_parser import Parser
from .constants import DEPLOY_FILE, ROOT_ENV_VAR
from .deployer import Deployer
from .logger import setup_logger
from .resolver import ConfigurationError
from .typed_path import AbsDir

type ExitCode = int


@dataclass
class MissingRootError(Exception):
    variable: str
    value: str | None

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.variable} must be set to the root of the project."
        return f"{self.variable} must be an absolute path to an existing folder, got {self.value!r}."


def check_for_errors[**P](fn: Callable[P, ExitCode | None]) -> Callable[P, None]:
    @functools.wraps(fn)
    def main(*args: P.args, **kwargs: P.kwargs) -> None:
        try:
            exitcode = fn(*args, **kwargs)
        except BaseException as e:
            logger.debug(f"Threw {type(e)}!")
            logger.trace(traceback.format_exc())
            logger.error(f"{type(e).__name__}: {e}")
            if isinstance(e, ConfigurationError):
                logger.info(e.usage)
            sys.exit(1)
        if exitcode is not None:
            sys.exit(exitcode)

    return main


def project_root() -> AbsDir:
    value = os.environ.get(ROOT_ENV_VAR)
    if value is None or not os.path.isabs(value) or not os.path.isdir(value):
        raise MissingRootError(ROOT_ENV_VAR, value)
    return AbsDir(value)


@click.group(context_settings=dict(show_default=True))
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Display more output (repeat up to 2 times).",
    show_default=False,
)
@click.option(
    "-q",
    "--quiet",
    count=True,
    help="Display less output (repeat up to 3 times).",
    show_default=False,
)
def main(quiet: int, verbose: int) -> None:
    setup_logger(quiet, verbose)


@main.command()
@click.option(
    "--clean/--no-clean",
    "-c",
    default=None,
    help="Remove orphaned files or directories on the remote (overrides the config).",
    show_default=False,
)
@check_for_errors
def deploy(clean: bool | None) -> None:
    """Deploy the build directory via rsync, git or ftp.

    \b
    Examples:
    # Deploy using the settings in .deploy.yaml.
    SITEDEPLOY_ROOT=$PWD sitedeploy deploy

    \b
    # Also remove remote files that are no longer built.
    SITEDEPLOY_ROOT=$PWD sitedeploy deploy --clean
    """
    root = project_root()
    raw_config = Parser.parse_file(root / DEPLOY_FILE)
    Deployer(raw_config, root, clean=clean).deploy()


main.add_command(deploy, name="d")
