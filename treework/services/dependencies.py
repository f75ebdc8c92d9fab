"""Package manager detection and dependency installation for new worktrees."""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional

from treework.constants import LOCKFILES
from treework.exceptions import DependencyInstallError
from treework.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PackageManager:
    """A JavaScript package manager available on PATH."""

    name: str
    command: str


def detect_package_manager(directory: str) -> Optional[PackageManager]:
    """Detect the package manager for a project directory.

    Only projects with a ``package.json`` qualify. Lockfiles decide which
    manager is used, provided that tool is installed; npm is the fallback.
    """
    if not os.path.isfile(os.path.join(directory, "package.json")):
        return None

    for lockfile, name in LOCKFILES:
        if os.path.exists(os.path.join(directory, lockfile)) and shutil.which(name):
            logger.debug(f"Detected {name} from {lockfile}")
            return PackageManager(name=name, command=name)

    if shutil.which("npm"):
        return PackageManager(name="npm", command="npm")

    logger.debug(f"package.json found in {directory} but no package manager is installed")
    return None


def install_dependencies(directory: str, manager: PackageManager) -> None:
    """Run ``<manager> install`` inside directory.

    Raises:
        DependencyInstallError: If the install command fails
    """
    logger.info(f"Installing dependencies in {directory} with {manager.name}")
    try:
        subprocess.run(
            [manager.command, "install"],
            cwd=directory,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        raise DependencyInstallError(manager.name, (e.stderr or "").strip() or None) from e
    except OSError as e:
        raise DependencyInstallError(manager.name, str(e)) from e
