from dataclasses import dataclass
import datetime
from typing import TYPE_CHECKING

from ..utils.porcelain import PorcelainEntity, PorcelainEntityType

if TYPE_CHECKING:
    from typing_extensions import NotRequired


@dataclass(frozen=True)
class PostMetadata:
    title: str
    description: str
    published_at: datetime.datetime


@dataclass(frozen=True)
class RawSource:
    slug: str
    identifier: str
    """Where the bytes came from, e.g. a file path; for messages only."""

    content: bytes
    fingerprint: str


@dataclass(frozen=True)
class Post:
    slug: str
    title: str
    description: str
    published_at: datetime.datetime

    content: str
    """The markdown body, exactly as found after the front matter."""

    html: str
    """``content`` rendered to HTML that is safe to embed as-is."""

    fingerprint: str

    def to_porcelain(self) -> "PorcelainPostSummaryV1":
        return {
            "ty": PorcelainEntityType.PostSummaryV1,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "published_at": self.published_at.isoformat(),
        }


@dataclass(frozen=True)
class RenderedPost:
    slug: str
    fingerprint: str
    html: str
    css: str
    post: Post


class PorcelainPostSummaryV1(PorcelainEntity):
    slug: str
    title: str
    description: str
    published_at: str


class PorcelainPostCheckResultV1(PorcelainEntity):
    slug: str
    ok: bool
    error: "NotRequired[str]"
