"""Filename helpers shared by the save dispatcher and the writers."""

from __future__ import annotations

import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from loguru import logger

PathLike = Union[str, "os.PathLike[str]"]

_EXTENSION_PATTERN = re.compile(r"\.([A-Za-z0-9]+)$")


def file_extension(filename: PathLike) -> str:
    """Lowercased extension of `filename` without the dot, or "" when there is none.

    Only a trailing `.<letters/digits>` counts, so `report.tar.gz` yields `gz`
    and `notes.` or `archive.v-2` yield ""."""
    match = _EXTENSION_PATTERN.search(os.fspath(filename))
    return match.group(1).lower() if match else ""


def resolve_filename(filename: PathLike, path: Optional[PathLike] = None) -> Path:
    """Join `path` and `filename`, expand `~` and normalize to an absolute path."""
    target = os.fspath(filename)
    if path is not None:
        target = os.path.join(os.fspath(path), target)
    return Path(os.path.abspath(os.path.expanduser(target)))


def _target_mode(target: Path) -> int:
    """Mode of an existing `target`, else 0666 minus the process umask."""
    if target.exists():
        return stat.S_IMODE(target.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_text_atomic(target: PathLike, content: str, encoding: str = "utf-8", atomic: bool = True) -> Path:
    """Write `content` to `target`, creating parent directories.

    With `atomic` the text goes to a temporary file in the same directory first
    and is renamed into place, so readers never see a partial file."""
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    if not atomic:
        target.write_text(content, encoding=encoding)
        return target

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
        # mkstemp files are 0600; give the result the mode a plain write would
        os.chmod(tmp_name, _target_mode(target))
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error(f"Failed to write {target}")
        raise
    return target


__all__ = ["file_extension", "resolve_filename", "write_text_atomic"]
