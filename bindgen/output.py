"""Writing the generated artifact."""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class OutputWriteError(OSError):
    """Raised when the output file cannot be written; the pass is aborted."""


def _target_mode(path: Path) -> int:
    """Mode for the written file: the existing target's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_output(text: str, path: str | Path) -> Path:
    """Write *text* to *path* atomically.

    The text goes to a temporary file beside the target which then replaces
    it, so a failed write never leaves a truncated artifact.  A replaced
    file keeps its permissions; a new one gets the usual umask-derived
    mode.  The output directory must already exist.
    """
    path = Path(path)
    tmp_name = ""
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error("Failed writing %s: %s", path, e)
        if tmp_name:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise OutputWriteError(f"Failed writing {path}") from e
    logger.info("Wrote %s (%d bytes)", path, len(text.encode("utf-8")))
    return path
