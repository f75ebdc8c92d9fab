"""Copies .env files into freshly created worktrees."""

import os
import shutil
from typing import List

from treework.constants import ENV_FILE_PREFIX
from treework.logging_config import get_logger

logger = get_logger(__name__)


def copy_env_files(src_dir: str, dst_dir: str) -> List[str]:
    """Copy ``.env*`` files from src_dir to dst_dir.

    Files that already exist in dst_dir are left alone. File modes are preserved.

    Returns:
        Names of the files that were copied, sorted
    """
    copied = []
    for name in sorted(os.listdir(src_dir)):
        if not name.startswith(ENV_FILE_PREFIX):
            continue

        src_path = os.path.join(src_dir, name)
        if not os.path.isfile(src_path):
            continue

        dst_path = os.path.join(dst_dir, name)
        if os.path.exists(dst_path):
            logger.debug(f"Not overwriting existing {dst_path}")
            continue

        shutil.copy2(src_path, dst_path)
        copied.append(name)

    if copied:
        logger.info(f"Copied {len(copied)} env file(s) into {dst_dir}")
    return copied
