"""
Output file management utilities.

Writes generated documents all-or-nothing: content goes to a temporary file
in the destination directory which then replaces the target, so a failed
run never leaves a truncated document behind.
"""

import os
import tempfile
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)


class OutputManager:
    """Manages writing generated documents to disk."""

    def __init__(self, encoding: str = "utf-8"):
        """
        Initialize the output manager.

        Args:
            encoding: Text encoding for written files
        """
        self.encoding = encoding

    def save_output(self, content: str, output_path: str | Path) -> Path:
        """
        Atomically replace ``output_path`` with ``content``.

        Args:
            content: Text to write
            output_path: Destination file

        Returns:
            Path to the saved file

        Raises:
            OSError: If the temporary file cannot be written or moved into place
        """
        output_path = Path(output_path)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
            if output_path.exists():
                os.chmod(tmp_name, output_path.stat().st_mode & 0o777)
            else:
                os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved output to {output_path}", size=len(content))
        return output_path
