# Front matter support for post sources.
#
# Only YAML front matter delimited by "---" lines is supported. The body is
# everything after the closing delimiter line, kept byte-for-byte.

import datetime
import re
from typing import Final

import yaml
from yaml.constructor import SafeConstructor

from .errors import FrontMatterError, ParseErrorKind
from .models import PostMetadata

FRONTMATTER_BOUNDARY_RE: Final = re.compile(r"(?m)^-{3,}[ \t]*(?:\r?\n|\Z)")

FIELD_TITLE: Final = "title"
FIELD_DESCRIPTION: Final = "description"
FIELD_PUBLISHED_AT: Final = "publishedAt"


class _MetadataLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as strings.

    PyYAML would otherwise build date objects itself and fail with a bare
    ValueError on impossible dates like 2023-02-30.
    """


_MetadataLoader.add_constructor(
    "tag:yaml.org,2002:timestamp",
    _MetadataLoader.construct_yaml_str,
)


def decode_source(raw: bytes) -> str:
    try:
        # utf-8-sig drops a leading BOM, which would hide the opening delimiter
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FrontMatterError(ParseErrorKind.InvalidEncoding, detail=str(e)) from e


def split_front_matter(s: str) -> tuple[dict[object, object], str]:
    """Splits a document into its decoded YAML header and the body."""

    opening = FRONTMATTER_BOUNDARY_RE.match(s)
    if opening is None:
        raise FrontMatterError(
            ParseErrorKind.MalformedHeader,
            detail="document does not start with a '---' line",
        )

    closing = FRONTMATTER_BOUNDARY_RE.search(s, opening.end())
    if closing is None:
        raise FrontMatterError(
            ParseErrorKind.MalformedHeader,
            detail="front matter is not closed with a '---' line",
        )

    header, body = s[opening.end() : closing.start()], s[closing.end() :]

    try:
        metadata = yaml.load(header, Loader=_MetadataLoader)
    except yaml.YAMLError as e:
        raise FrontMatterError(ParseErrorKind.MalformedHeader, detail=str(e)) from e

    if metadata is None:
        # empty header; let the required field checks report what is missing
        return {}, body
    if not isinstance(metadata, dict):
        raise FrontMatterError(
            ParseErrorKind.MalformedHeader,
            detail="front matter is not a mapping of keys to values",
        )
    return metadata, body


def _require_text(md: dict[object, object], field: str) -> str:
    val = md.get(field)
    if val is None:
        raise FrontMatterError(ParseErrorKind.MissingField, field)
    if isinstance(val, bool) or not isinstance(val, (str, int, float)):
        raise FrontMatterError(
            ParseErrorKind.MalformedHeader,
            field,
            f"expected text, got {type(val).__name__}",
        )

    s = val if isinstance(val, str) else str(val)
    if not s.strip():
        raise FrontMatterError(ParseErrorKind.MissingField, field)
    return s


def _parse_timestamp(val: object) -> datetime.datetime | None:
    """Parses the timestamp forms YAML 1.1 accepts, with the semantics of
    ``SafeConstructor.construct_yaml_timestamp``.

    Returns ``None`` for anything else, including impossible dates.
    """

    if not isinstance(val, str):
        return None

    m = SafeConstructor.timestamp_regexp.match(val.strip())
    if m is None:
        return None

    values = m.groupdict()
    try:
        if not values["hour"]:
            # a bare date means midnight
            return datetime.datetime(
                int(values["year"]),
                int(values["month"]),
                int(values["day"]),
                tzinfo=datetime.timezone.utc,
            )

        fraction = 0
        if values["fraction"]:
            fraction = int(values["fraction"][:6].ljust(6, "0"))

        tzinfo = datetime.timezone.utc
        if values["tz_sign"]:
            delta = datetime.timedelta(
                hours=int(values["tz_hour"]),
                minutes=int(values["tz_minute"] or 0),
            )
            if values["tz_sign"] == "-":
                delta = -delta
            tzinfo = datetime.timezone(delta)

        return datetime.datetime(
            int(values["year"]),
            int(values["month"]),
            int(values["day"]),
            int(values["hour"]),
            int(values["minute"]),
            int(values["second"]),
            fraction,
            tzinfo=tzinfo,
        )
    except ValueError:
        return None


def _require_timestamp(md: dict[object, object], field: str) -> datetime.datetime:
    val = md.get(field)
    if val is None or (isinstance(val, str) and not val.strip()):
        raise FrontMatterError(ParseErrorKind.MissingField, field)

    dt = _parse_timestamp(val)
    if dt is None:
        raise FrontMatterError(ParseErrorKind.InvalidDate, field, repr(val))
    return dt


def parse_post(raw: str) -> tuple[PostMetadata, str]:
    """Parses a post source into validated metadata and its markdown body.

    Unknown front matter keys are ignored. Raises ``FrontMatterError`` for
    anything that would leave the metadata incomplete.
    """

    md, body = split_front_matter(raw)
    metadata = PostMetadata(
        title=_require_text(md, FIELD_TITLE),
        description=_require_text(md, FIELD_DESCRIPTION),
        published_at=_require_timestamp(md, FIELD_PUBLISHED_AT),
    )
    return metadata, body
