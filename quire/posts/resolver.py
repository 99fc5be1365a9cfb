from rich.markup import escape

from ..log import QuireLogger
from .cache import RenderCache
from .errors import FrontMatterError, PostReadError
from .frontmatter import decode_source, parse_post
from .models import Post, RawSource, RenderedPost
from .render import MarkdownRenderer
from .store import PostStore


class PostResolver:
    """Turns slugs into ready-to-display posts.

    ``resolve`` returns ``None`` when there is no such post. A post that
    exists but is broken raises ``FrontMatterError`` (bad source) or
    ``PostReadError`` (unreadable source), always with ``slug`` set, so
    callers can tell "nothing there" from "something is wrong".
    """

    def __init__(
        self,
        logger: QuireLogger,
        store: PostStore,
        renderer: MarkdownRenderer,
        cache: RenderCache | None = None,
    ) -> None:
        self._logger = logger
        self.store = store
        self.renderer = renderer
        self.cache = cache

    def resolve(self, slug: str) -> Post | None:
        try:
            raw = self.store.fetch_raw(slug)
        except PostReadError as e:
            self._logger.W(f"cannot read post [yellow]{escape(slug)}[/]: {escape(str(e.cause))}")
            raise

        if raw is None:
            self._logger.D(f"no post with slug '{slug}'")
            return None

        if self.cache is not None:
            if entry := self.cache.get(slug, raw.fingerprint):
                self._logger.D(f"render cache hit for '{slug}'")
                return entry.post

        try:
            post = self._build(raw)
        except FrontMatterError as e:
            e.slug = slug
            self._logger.W(f"post [yellow]{escape(slug)}[/] is malformed: {escape(str(e))}")
            raise

        if self.cache is not None:
            self.cache.put(
                RenderedPost(
                    slug=slug,
                    fingerprint=raw.fingerprint,
                    html=post.html,
                    css=self.renderer.stylesheet(),
                    post=post,
                )
            )
        return post

    def _build(self, raw: RawSource) -> Post:
        metadata, body = parse_post(decode_source(raw.content))
        return Post(
            slug=raw.slug,
            title=metadata.title,
            description=metadata.description,
            published_at=metadata.published_at,
            content=body,
            html=self.renderer.render(body),
            fingerprint=raw.fingerprint,
        )

    def list_posts(self) -> list[Post]:
        """Returns every post, newest first.

        The first broken post aborts the listing with its error.
        """

        posts: list[Post] = []
        for slug in self.store.list_slugs():
            # a source removed since the store was indexed is simply skipped
            if post := self.resolve(slug):
                posts.append(post)

        posts.sort(key=lambda p: p.slug)
        posts.sort(key=lambda p: p.published_at, reverse=True)
        return posts

    def check_all(self) -> list[tuple[str, Exception]]:
        """Resolves every post and returns the failures as (slug, error)."""

        failures: list[tuple[str, Exception]] = []
        for slug in self.store.list_slugs():
            try:
                self.resolve(slug)
            except (FrontMatterError, PostReadError) as e:
                failures.append((slug, e))
        return failures
