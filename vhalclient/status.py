"""Connection status reporting through a status file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class StatusProber:
    """Writes the current connection status to a file, one line at a time."""

    def __init__(self, status_file: str | os.PathLike[str]) -> None:
        self.status_file = Path(status_file)

    def update_status(self, status: str) -> bool:
        """Replace the file's contents with ``status``.

        A file that cannot be written is logged and reported as False.
        """
        try:
            self.status_file.write_text(f"{status}\n", encoding="utf-8")
        except OSError as exc:
            logger.warning("cannot update status file %s: %s", self.status_file, exc)
            return False
        return True