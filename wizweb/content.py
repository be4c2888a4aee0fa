"""Registry of web pages held in memory and served by name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

INITIAL_WEBPAGE = "index.html"
M_INITIAL_WEBPAGE = "m/index.html"
MOBILE_INITIAL_WEBPAGE = "mobile/index.html"

MAX_CONTENT_CALLBACK = 20
MAX_CONTENT_NAME_LEN = 128
HTTP_MAX_TIMEOUT_SEC = 3

_LISTING_HEAD = "\r\n=== List of Web content in code flash ===\r\n"
_LISTING_TAIL = "=========================================\r\n\r\n"
_LISTING_EMPTY = ">> Web content file not found\r\n"
_PREVIEW_LIMIT = 30


def _as_bytes(content: str | bytes) -> bytes:
    """Content as bytes, ending at the first NUL like a C string."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    data = bytes(content)
    end = data.find(b"\0")
    return data if end < 0 else data[:end]


@dataclass(frozen=True)
class WebContent:
    """A named page or file served from memory."""

    name: str
    content: bytes

    @property
    def length(self) -> int:
        """Size of the content in bytes."""
        return len(self.content)


class ContentRegistry:
    """A fixed-capacity table of registered web content, looked up by name."""

    def __init__(self, capacity: int = MAX_CONTENT_CALLBACK) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._contents: list[WebContent] = []

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[WebContent]:
        return iter(self._contents)

    def register(self, name: str | None, content: str | bytes | None) -> bool:
        """Add ``content`` under ``name``.

        Nothing is added when either argument is missing or the table is full;
        the return value tells whether the content was registered.
        """
        if name is None or content is None:
            return False
        if len(self._contents) >= self.capacity:
            return False
        self._contents.append(WebContent(name=name, content=_as_bytes(content)))
        return True

    def find(self, name: str) -> tuple[int, int] | None:
        """Return ``(index, length)`` of the first content called ``name``, or None."""
        for index, entry in enumerate(self._contents):
            if entry.name == name:
                return index, entry.length
        return None

    def read(self, index: int, offset: int, size: int) -> bytes:
        """Return up to ``size`` bytes of content ``index`` starting at ``offset``."""
        if not 0 <= index < len(self._contents):
            raise IndexError(f"no web content with index {index}")
        if offset < 0 or size < 0:
            raise ValueError("offset and size must not be negative")
        return self._contents[index].content[offset : offset + size]

    def listing(self) -> str:
        """Render the table of registered content as a text report."""
        if not self._contents:
            return _LISTING_EMPTY
        lines = [_LISTING_HEAD]
        for number, entry in enumerate(self._contents, start=1):
            if entry.length < _PREVIEW_LIMIT:
                preview = f"[{entry.content.decode('latin-1')}]"
            else:
                preview = "[ ... ]"
            lines.append(f" [{number}] {entry.name}, {entry.length} byte, {preview}\r\n")
        lines.append(_LISTING_TAIL)
        return "".join(lines)