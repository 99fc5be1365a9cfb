import re
from typing import Final
from urllib.parse import unquote, urlsplit

from rich.markup import escape

from ..log import QuireLogger
from ..posts.errors import DuplicateSlugError, FrontMatterError, PostReadError
from ..posts.models import Post
from ..posts.resolver import PostResolver
from .compose import (
    ComposedPage,
    compose_error_page,
    compose_index_page,
    compose_not_found_page,
    compose_post_page,
)

POST_PATH_RE: Final = re.compile(r"^/blog/(?P<slug>[^/]+)$")

UNAVAILABLE_ERRORS: Final = (FrontMatterError, PostReadError, DuplicateSlugError)


class SiteRoutes:
    """Maps request paths to composed pages.

    ``/`` is the post index and ``/blog/<slug>`` a single post; everything
    else is a 404. The post store is rescanned for every index request and
    whenever a post lookup misses, so posts added while serving show up
    without a restart.
    """

    def __init__(
        self,
        logger: QuireLogger,
        resolver: PostResolver,
        *,
        container_class: str = "markdown-body",
    ) -> None:
        self._logger = logger
        self.resolver = resolver
        self.container_class = container_class

    def handle(self, path: str) -> ComposedPage:
        req_path = unquote(urlsplit(path).path)
        if req_path != "/":
            req_path = req_path.rstrip("/")

        if req_path == "/":
            return self.index()
        if m := POST_PATH_RE.match(req_path):
            return self.post(m.group("slug"))
        return compose_not_found_page()

    def index(self) -> ComposedPage:
        try:
            self.resolver.store.reload()
            posts = self.resolver.list_posts()
        except UNAVAILABLE_ERRORS as e:
            self._logger.D(f"index unavailable: {escape(str(e))}")
            return compose_error_page()
        return compose_index_page(posts)

    def post(self, slug: str) -> ComposedPage:
        try:
            post = self._resolve_rescanning(slug)
        except UNAVAILABLE_ERRORS as e:
            self._logger.D(f"post unavailable: {escape(str(e))}")
            return compose_error_page()

        if post is None:
            return compose_not_found_page()
        return compose_post_page(
            post,
            self.resolver.renderer.stylesheet(),
            container_class=self.container_class,
        )

    def _resolve_rescanning(self, slug: str) -> Post | None:
        if post := self.resolver.resolve(slug):
            return post

        self._logger.D(f"'{slug}' not indexed, rescanning the post store")
        self.resolver.store.reload()
        return self.resolver.resolve(slug)
