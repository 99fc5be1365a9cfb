import enum
import sys
from typing import Sequence


if sys.version_info >= (3, 11):

    class ParseErrorKind(enum.StrEnum):
        MissingField = "missing-field"
        InvalidDate = "invalid-date"
        MalformedHeader = "malformed-header"
        InvalidEncoding = "invalid-encoding"

else:

    class ParseErrorKind(str, enum.Enum):
        MissingField = "missing-field"
        InvalidDate = "invalid-date"
        MalformedHeader = "malformed-header"
        InvalidEncoding = "invalid-encoding"


class FrontMatterError(Exception):
    """A post source exists but is structurally invalid.

    ``slug`` is unset while the error travels through the parser (which knows
    nothing about slugs), and is filled in by the resolver before the error
    reaches callers.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        field: str | None = None,
        detail: str | None = None,
        slug: str | None = None,
    ) -> None:
        super().__init__()
        self.kind = kind
        self.field = field
        self.detail = detail
        self.slug = slug

    def __str__(self) -> str:
        if self.kind == ParseErrorKind.MissingField:
            s = f"missing required front matter field '{self.field}'"
        elif self.kind == ParseErrorKind.InvalidDate:
            s = f"front matter field '{self.field}' is not a valid date"
        elif self.kind == ParseErrorKind.InvalidEncoding:
            s = "post source is not valid UTF-8"
        elif self.field is not None:
            s = f"malformed front matter at field '{self.field}'"
        else:
            s = "malformed front matter"

        if self.detail:
            s = f"{s}: {self.detail}"
        if self.slug is not None:
            s = f"post '{self.slug}': {s}"
        return s

    def __repr__(self) -> str:
        return f"FrontMatterError({self.kind!r}, {self.field!r}, {self.detail!r}, slug={self.slug!r})"


class PostReadError(OSError):
    """A post source is known to exist but could not be read."""

    def __init__(self, slug: str, identifier: str, cause: OSError) -> None:
        super().__init__(cause.errno, cause.strerror)
        self.slug = slug
        self.identifier = identifier
        self.cause = cause

    def __str__(self) -> str:
        return f"cannot read post '{self.slug}' from {self.identifier}: {self.cause}"

    def __repr__(self) -> str:
        return f"PostReadError({self.slug!r}, {self.identifier!r}, {self.cause!r})"


class DuplicateSlugError(Exception):
    """Two or more post sources map to the same slug."""

    def __init__(self, slug: str, identifiers: Sequence[str]) -> None:
        super().__init__()
        self.slug = slug
        self.identifiers = list(identifiers)

    def __str__(self) -> str:
        sources = ", ".join(self.identifiers)
        return f"duplicate post slug '{self.slug}' produced by: {sources}"

    def __repr__(self) -> str:
        return f"DuplicateSlugError({self.slug!r}, {self.identifiers!r})"
