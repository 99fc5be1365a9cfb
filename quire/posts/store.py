import abc
import hashlib
import os
import pathlib
import re
import threading
from typing import Final, Iterable, Mapping

from rich.markup import escape

from ..log import QuireLogger
from .errors import DuplicateSlugError, PostReadError
from .models import RawSource

SLUG_RE: Final = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def slug_from_filename(filename: str, extension: str) -> str | None:
    """Derives the slug of a post source from its filename.

    The extension is stripped once (matched case-insensitively) and the rest
    is lowercased, so ``Hello-World.MD`` becomes ``hello-world``. Returns
    ``None`` if the file is not a post source or the result is not URL-safe.
    """

    if len(filename) <= len(extension):
        return None
    if not filename.lower().endswith(extension.lower()):
        return None

    slug = filename[: -len(extension)].lower()
    return slug if SLUG_RE.match(slug) else None


def compute_fingerprint(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def index_sources(
    logger: QuireLogger,
    identifiers: Iterable[str],
    extension: str,
) -> dict[str, str]:
    """Maps slugs to the source identifiers (filenames) producing them.

    Raises ``DuplicateSlugError`` if two identifiers collide.
    """

    by_slug: dict[str, list[str]] = {}
    for ident in identifiers:
        if ident.startswith("."):
            # editor swap files, dotfiles and the like
            continue
        if not ident.lower().endswith(extension.lower()):
            continue

        slug = slug_from_filename(ident, extension)
        if slug is None:
            logger.W(
                f"ignoring post source [yellow]{escape(ident)}[/]: its name does not make a valid slug"
            )
            continue
        by_slug.setdefault(slug, []).append(ident)

    for slug, idents in by_slug.items():
        if len(idents) > 1:
            raise DuplicateSlugError(slug, sorted(idents))

    return {slug: idents[0] for slug, idents in by_slug.items()}


class PostStore(metaclass=abc.ABCMeta):
    """Read-only access to raw post sources, keyed by slug."""

    @abc.abstractmethod
    def list_slugs(self) -> list[str]:
        """Returns all known slugs in lexical order."""
        raise NotImplementedError

    @abc.abstractmethod
    def fetch_raw(self, slug: str) -> RawSource | None:
        """Returns the raw source for the slug, or None if there is none.

        Raises ``PostReadError`` if the source exists but cannot be read.
        """
        raise NotImplementedError

    def reload(self) -> None:
        """Picks up sources added or removed since the store was loaded.

        Raises ``DuplicateSlugError`` and keeps the current index if the new
        set of sources has a collision.
        """
        pass


class DirectoryPostStore(PostStore):
    """One file per post, all in a single directory.

    The directory is scanned once on construction (and on ``reload()``), so
    the set of slugs stays stable while the store is in use. File contents
    are read afresh on every fetch.
    """

    def __init__(
        self,
        logger: QuireLogger,
        root: os.PathLike[str] | str,
        extension: str = ".md",
    ) -> None:
        self._logger = logger
        self.root = pathlib.Path(root)
        self.extension = extension
        self._paths: dict[str, pathlib.Path] = {}
        self.reload()

    def reload(self) -> None:
        try:
            with os.scandir(self.root) as it:
                filenames = [e.name for e in it if e.is_file()]
        except FileNotFoundError:
            self._logger.W(
                f"posts directory [yellow]{escape(str(self.root))}[/] does not exist"
            )
            filenames = []
        except NotADirectoryError:
            self._logger.W(
                f"posts directory [yellow]{escape(str(self.root))}[/] is not a directory"
            )
            filenames = []

        index = index_sources(self._logger, filenames, self.extension)
        # replace the whole mapping at once so concurrent readers see
        # either the old or the new index
        self._paths = {slug: self.root / name for slug, name in index.items()}
        self._logger.D(f"indexed {len(self._paths)} post(s) under {self.root}")

    def list_slugs(self) -> list[str]:
        return sorted(self._paths)

    def fetch_raw(self, slug: str) -> RawSource | None:
        path = self._paths.get(slug)
        if path is None:
            return None

        try:
            content = path.read_bytes()
        except FileNotFoundError:
            # removed since the last scan
            return None
        except OSError as e:
            raise PostReadError(slug, str(path), e) from e

        return RawSource(
            slug=slug,
            identifier=str(path),
            content=content,
            fingerprint=compute_fingerprint(content),
        )


class MemoryPostStore(PostStore):
    """Post sources held in memory, keyed by filename-like identifiers."""

    def __init__(
        self,
        logger: QuireLogger,
        sources: Mapping[str, str | bytes] | None = None,
        extension: str = ".md",
    ) -> None:
        self._logger = logger
        self.extension = extension
        self._lock = threading.Lock()
        self._sources: dict[str, bytes] = {}
        self._index: dict[str, str] = {}
        if sources:
            for ident, content in sources.items():
                self._sources[ident] = _to_bytes(content)
            self._index = index_sources(logger, self._sources, extension)

    def put(self, identifier: str, content: str | bytes) -> None:
        """Adds or replaces a source."""

        with self._lock:
            sources = dict(self._sources)
            sources[identifier] = _to_bytes(content)
            # raises on collisions before anything is committed
            index = index_sources(self._logger, sources, self.extension)
            self._sources, self._index = sources, index

    def remove(self, identifier: str) -> None:
        with self._lock:
            sources = dict(self._sources)
            del sources[identifier]
            index = index_sources(self._logger, sources, self.extension)
            self._sources, self._index = sources, index

    def list_slugs(self) -> list[str]:
        return sorted(self._index)

    def fetch_raw(self, slug: str) -> RawSource | None:
        with self._lock:
            ident = self._index.get(slug)
            if ident is None:
                return None
            content = self._sources[ident]

        return RawSource(
            slug=slug,
            identifier=ident,
            content=content,
            fingerprint=compute_fingerprint(content),
        )


def _to_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content
