"""
Locale file handling.

This module handles:
- Discovering the locale directory of a project (src/assets/i18n, assets/i18n)
- Reading a source resource tree
- Atomic writing of the recreated tree
"""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional

from i18n_recreate import language_codes as lc
from i18n_recreate.exceptions import InputReadFailure, OutputWriteFailure
from i18n_recreate.logger import get_logger

logger = get_logger(__name__)

# Searched in order, relative to the project root
LOCALE_DIR_CANDIDATES = [
    Path("src") / "assets" / "i18n",
    Path("assets") / "i18n",
]

NEW_FILE_MODE = 0o644


def find_locales_dir(project_root: Path = Path(".")) -> Path:
    """
    Return the first existing locale directory under project_root.

    Raises:
        InputReadFailure: If none of the candidates exists.
    """
    project_root = Path(project_root)
    for candidate in LOCALE_DIR_CANDIDATES:
        path = project_root / candidate
        if path.is_dir():
            logger.debug(f"Using locale directory: {path}")
            return path

    searched = ", ".join(str(project_root / c) for c in LOCALE_DIR_CANDIDATES)
    raise InputReadFailure(
        project_root,
        message=f"Assets directory not found! Searched: {searched}",
    )


def locale_file(locales_dir: Path, language_code: str) -> Path:
    """Path of the locale file for a language inside locales_dir."""
    return Path(locales_dir) / lc.get_language_file_name(language_code)



def load_tree(path: Path) -> Any:
    """
    Load a resource tree from a JSON file.

    Raises:
        InputReadFailure: Missing, unreadable, invalid JSON, or a root that
            is neither an object nor an array.
    """
    path = Path(path)
    if not path.exists():
        raise InputReadFailure(path, message=f"Source file {path} does not exist!")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            tree = json.load(f)
    except json.JSONDecodeError as e:
        raise InputReadFailure(path, e, message=f"Source file {path} is not valid JSON: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadFailure(path, e)

    if not isinstance(tree, (dict, list)):
        raise InputReadFailure(
            path,
            message=f"Source file {path} must contain a JSON object or array, got {type(tree).__name__}",
        )

    logger.debug(f"Loaded resource tree from {path}")
    return tree


def load_existing_tree(path: Path) -> Optional[Any]:
    """Load a previous translation if there is one; None when the file is absent."""
    path = Path(path)
    if not path.exists():
        return None
    return load_tree(path)


def dumps_tree(tree: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(tree, ensure_ascii=False, indent=indent) + '\n'


def write_tree(path: Path, tree: Any, indent: Optional[int] = 2) -> Path:
    """
    Write the tree as JSON atomically (temp file in the same directory,
    then rename), so the destination is never partially written.

    Raises:
        OutputWriteFailure: Carrying the tree, so the write can be retried.
    """
    path = Path(path)
    temp_path = None

    try:
        content = dumps_tree(tree, indent)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Create temp file in the same directory (for atomic rename)
        temp_fd, temp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}_",
            suffix=".json.tmp"
        )
        temp_path = Path(temp_name)

        with open(temp_fd, 'w', encoding='utf-8') as f:
            f.write(content)

        # mkstemp creates 0600 files; keep the mode of the file being replaced
        if path.exists():
            os.chmod(temp_path, stat.S_IMODE(path.stat().st_mode))
        else:
            os.chmod(temp_path, NEW_FILE_MODE)

        temp_path.replace(path)
        logger.debug(f"Atomic write successful: {path}")
        return path

    except (OSError, TypeError, ValueError) as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise OutputWriteFailure(path, tree, e)
