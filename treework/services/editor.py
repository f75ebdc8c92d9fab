"""Opens worktrees in the user's editor."""

import shutil
import subprocess
from typing import List, Optional

from treework.constants import EDITORS
from treework.exceptions import EditorNotFoundError
from treework.logging_config import get_logger

logger = get_logger(__name__)


def editor_command(editor: str, path: str) -> List[str]:
    """Build the command line that opens path in a new window of editor."""
    for name, flags in EDITORS:
        if editor == name:
            return [editor, *flags, path]
    return [editor, path]


def open_in_editor(path: str, editor: Optional[str] = None) -> List[str]:
    """Launch an editor on path without waiting for it.

    Args:
        path: Directory to open
        editor: Configured editor command; auto-detected when None

    Returns:
        The command that was started

    Raises:
        EditorNotFoundError: If no editor is configured or installed
    """
    if editor:
        command = editor_command(editor, path)
    else:
        found = next((name for name, _flags in EDITORS if shutil.which(name)), None)
        if found is None:
            raise EditorNotFoundError()
        command = editor_command(found, path)

    logger.debug(f"Launching editor: {' '.join(command)}")
    try:
        subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        logger.warning(f"Could not start {command[0]}: {e}")
        raise EditorNotFoundError() from e
    return command
