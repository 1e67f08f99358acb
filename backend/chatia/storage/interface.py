"""
Storage Interface - Abstract base class for durable key-value storage.
Every record is a string stored under a flat key (e.g. "conversations",
"messages_<conversation_id>"). Reads and writes are synchronous.
"""

from abc import ABC, abstractmethod
from typing import Optional, List


class KeyValueStorage(ABC):
    """
    Abstract storage interface that defines the contract for all storage implementations.

    Keys are flat strings; an optional ``key_prefix`` namespaces every record
    written through the instance.
    """

    def __init__(self, key_prefix: str = ""):
        self.key_prefix = key_prefix

    @staticmethod
    def is_valid_key(key: str) -> bool:
        """True if the key can name a record (no path separators, not hidden)."""
        return bool(key) and "/" not in key and "\\" not in key and not key.startswith(".")

    def _qualify(self, key: str) -> str:
        """Validate a key and apply the namespace prefix."""
        if not self.is_valid_key(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return f"{self.key_prefix}{key}"

    def _unqualify(self, key: str) -> str:
        """Strip the namespace prefix from a stored key."""
        return key[len(self.key_prefix):]

    @abstractmethod
    def save(self, key: str, value: str) -> bool:
        """
        Store a string value under the given key, replacing any previous value.

        Args:
            key: Record key (e.g., "conversations")
            value: Serialized record

        Returns:
            bool: True if the write succeeded, False otherwise
        """
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Load the value stored under a key.

        Args:
            key: Record key

        Returns:
            Optional[str]: Stored value, or None if the key doesn't exist
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """
        Check whether a record exists.

        Args:
            key: Record key

        Returns:
            bool: True if a value is stored under the key
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete the record stored under a key.

        Args:
            key: Record key

        Returns:
            bool: True if a record was removed, False otherwise
        """
        pass

    @abstractmethod
    def list(self, prefix: str = "") -> List[str]:
        """
        List stored keys.

        Args:
            prefix: Only return keys starting with this prefix

        Returns:
            List[str]: Sorted keys, without the namespace prefix
        """
        pass
