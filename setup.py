from __future__ import annotations

import logging
import shutil
import sys
from os.path import join as pjoin
from pathlib import Path

from setuptools import Command, setup

ROOT = Path(__file__).resolve().parent
PYPROJECT = ROOT / "pyproject.toml"
MIN_PYTHON = (3, 11)


def _warn_if_below_min_python() -> None:
    if sys.version_info < MIN_PYTHON:
        logging.warning(
            "datacom-api targets Python %d.%d+ (running %d.%d); tomllib is unavailable.",
            MIN_PYTHON[0],
            MIN_PYTHON[1],
            sys.version_info.major,
            sys.version_info.minor,
        )


def _project_version() -> str:
    import tomllib

    with PYPROJECT.open("rb") as fh:
        data = tomllib.load(fh)
    return data["project"]["version"]


_warn_if_below_min_python()


class PrintVersion(Command):
    user_options = []

    def initialize_options(self):
        self.version = None

    def finalize_options(self):
        self.version = _project_version()

    def run(self):
        print(self.version)


class CleanCommand(Command):
    """
    Remove build output and compiled files
    ======================================

    Deletes build/, dist/, the egg-info directory under src/ and every
    __pycache__ directory and .pyc file below the project root.
    """

    description = "remove build output and compiled files"
    user_options = []
    BUILD_DIRS = ("build", "dist", pjoin("src", "datacom_api.egg-info"))

    def initialize_options(self):
        self._targets = []

    def finalize_options(self):
        targets = [ROOT / name for name in self.BUILD_DIRS]
        targets.extend(ROOT.rglob("__pycache__"))
        targets.extend(path for path in ROOT.rglob("*.pyc") if path.parent.name != "__pycache__")
        self._targets = [path for path in targets if path.exists()]

    def run(self):
        for target in self._targets:
            if self.dry_run:
                logging.info("Would remove %s", target)
                continue
            self.announce("Removing %s" % target, level=2)
            try:
                if target.is_dir():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            except OSError:
                logging.warning("Failed to remove %s", target)


setup(
    cmdclass={
        "clean": CleanCommand,
        "version": PrintVersion,
    },
)
