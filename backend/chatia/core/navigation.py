"""
Navigation - Maps addresses to conversation ids and keeps browsing history.

Two views are addressable: the home view at "/" and a conversation at
"/c/<conversation_id>".
"""

from typing import List, Optional
from urllib.parse import quote, unquote

ROOT_PATH = "/"
CONVERSATION_PREFIX = "/c/"
MAX_HISTORY = 100


def path_for(conversation_id: Optional[str]) -> str:
    """Address of a conversation, or of the home view for None."""
    if not conversation_id:
        return ROOT_PATH
    return f"{CONVERSATION_PREFIX}{quote(conversation_id, safe='')}"


def conversation_id_from_path(path: str) -> Optional[str]:
    """
    Extract the conversation id from an address.

    Args:
        path: Address such as "/c/conv_1" (query string and fragment ignored)

    Returns:
        The conversation id, or None for the home view and unknown addresses
    """
    path = path.split("?", 1)[0].split("#", 1)[0]
    if not path.startswith(CONVERSATION_PREFIX):
        return None
    segment = path[len(CONVERSATION_PREFIX):].strip("/")
    if not segment or "/" in segment:
        return None
    return unquote(segment)


class Navigator:
    """
    In-process address bar with back/forward history.

    ``push`` adds an entry and drops any forward history; ``replace``
    rewrites the current entry. At most ``max_entries`` entries are kept.
    ``back`` and ``forward`` move through the history and return the new
    address, which callers must treat as an external address change.
    """

    def __init__(self, initial_path: str = ROOT_PATH, max_entries: int = MAX_HISTORY):
        self._entries: List[str] = [initial_path]
        self._index = 0
        self.max_entries = max(1, max_entries)

    @property
    def location(self) -> str:
        return self._entries[self._index]

    @property
    def history(self) -> List[str]:
        return list(self._entries)

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, path: str) -> None:
        if path == self.location:
            return
        del self._entries[self._index + 1:]
        self._entries.append(path)
        self._index += 1
        # Oldest entries fall off once the cap is reached
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]
            self._index -= overflow

    def replace(self, path: str) -> None:
        self._entries[self._index] = path

    def back(self) -> str:
        if self.can_go_back:
            self._index -= 1
        return self.location

    def forward(self) -> str:
        if self.can_go_forward:
            self._index += 1
        return self.location
