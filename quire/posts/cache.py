import threading

from .models import RenderedPost


class RenderCache:
    """In-memory slug -> rendered post mapping, validated by fingerprint.

    Every operation holds the lock for its whole duration, so an entry is
    always replaced as a unit. Concurrent writers for the same slug race and
    the last one wins, which is harmless because rendering the same source
    always gives the same result.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, RenderedPost] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, slug: str) -> bool:
        with self._lock:
            return slug in self._entries

    def get(self, slug: str, fingerprint: str) -> RenderedPost | None:
        """Returns the entry for the slug if it was made from the same source."""

        with self._lock:
            entry = self._entries.get(slug)
        if entry is None or entry.fingerprint != fingerprint:
            return None
        return entry

    def put(self, entry: RenderedPost) -> None:
        with self._lock:
            self._entries[entry.slug] = entry

    def invalidate(self, slug: str) -> None:
        with self._lock:
            self._entries.pop(slug, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
