"""
Local Filesystem Storage Implementation.
Each record is stored as one UTF-8 file named after its key.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, List

from .interface import KeyValueStorage

logger = logging.getLogger(__name__)


class LocalStorage(KeyValueStorage):
    """
    Local filesystem storage implementation.
    Stores all records in a base directory on the server.
    """

    def __init__(self, base_dir: str = "./data", key_prefix: str = ""):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored records
            key_prefix: Namespace prefix applied to every key
        """
        super().__init__(key_prefix)
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Convert a key to the absolute path of its record file."""
        full_path = (self.base_dir / self._qualify(key)).resolve()

        # Security check: ensure path is within base_dir
        if full_path.parent != self.base_dir:
            raise ValueError(f"Invalid key: {key} - path traversal detected")

        return full_path

    def save(self, key: str, value: str) -> bool:
        """Write a record, replacing the previous file atomically."""
        full_path = self._get_full_path(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, full_path)
            return True
        except OSError as e:
            logger.error(f"Error saving record {key}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False

    def load(self, key: str) -> Optional[str]:
        """Read a record from the local filesystem."""
        full_path = self._get_full_path(key)
        if not full_path.exists():
            return None
        try:
            return full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading record {key}: {e}")
            return None

    def exists(self, key: str) -> bool:
        """Check if a record exists."""
        return self._get_full_path(key).exists()

    def delete(self, key: str) -> bool:
        """Delete a record file."""
        full_path = self._get_full_path(key)
        try:
            if full_path.exists():
                full_path.unlink()
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting record {key}: {e}")
            return False

    def list(self, prefix: str = "") -> List[str]:
        """List record keys under the namespace prefix."""
        qualified = f"{self.key_prefix}{prefix}"
        keys = [
            self._unqualify(p.name)
            for p in self.base_dir.iterdir()
            if p.is_file() and not p.name.startswith(".") and p.name.startswith(qualified)
        ]
        return sorted(keys)
