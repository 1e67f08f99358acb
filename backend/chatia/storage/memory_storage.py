"""In-memory implementation of KeyValueStorage."""

from typing import Dict, List, Optional

from .interface import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """In-memory storage for tests and throwaway sessions.

    Nothing survives the process.
    """

    def __init__(self, key_prefix: str = ""):
        super().__init__(key_prefix)
        self._records: Dict[str, str] = {}

    def save(self, key: str, value: str) -> bool:
        self._records[self._qualify(key)] = value
        return True

    def load(self, key: str) -> Optional[str]:
        return self._records.get(self._qualify(key))

    def exists(self, key: str) -> bool:
        return self._qualify(key) in self._records

    def delete(self, key: str) -> bool:
        qualified = self._qualify(key)
        if qualified in self._records:
            del self._records[qualified]
            return True
        return False

    def list(self, prefix: str = "") -> List[str]:
        qualified = f"{self.key_prefix}{prefix}"
        return sorted(
            self._unqualify(k) for k in self._records
            if k.startswith(qualified)
        )
