import datetime
import pathlib

import pytest

from quire.log import QuireLogger
from quire.posts.cache import RenderCache
from quire.posts.render import MarkdownRenderer
from quire.posts.resolver import PostResolver
from quire.posts.store import DirectoryPostStore, MemoryPostStore
from quire.web.routes import SiteRoutes
from quire.web.server import make_handler

from tests.fixtures import QuireFileFixtureFactory


@pytest.fixture
def routes(quire_logger: QuireLogger, quire_file: QuireFileFixtureFactory) -> SiteRoutes:
    store = MemoryPostStore(
        quire_logger,
        {
            "hello-world.md": quire_file.post_source("hello-world.md"),
            "code-sample.md": quire_file.post_source("code-sample.md"),
            "no-date.md": quire_file.post_source("no-date.md"),
        },
    )
    resolver = PostResolver(quire_logger, store, MarkdownRenderer(), RenderCache())
    return SiteRoutes(quire_logger, resolver)


def test_post(routes: SiteRoutes) -> None:
    page = routes.handle("/blog/hello-world")
    assert page.status == 200
    assert "<h1>Hi</h1>" in page.html
    assert "January 1, 2023" in page.html

    assert routes.handle("/blog/hello-world/").status == 200
    assert routes.handle("/blog/hello-world?ref=feed").status == 200


def test_post_with_code(routes: SiteRoutes) -> None:
    page = routes.handle("/blog/code-sample")
    assert page.status == 200
    assert '<code class="language-python">' in page.html
    assert ".markdown-body .highlight" in page.html
    assert "March 14, 2023" in page.html


def test_not_found(routes: SiteRoutes) -> None:
    for path in ["/blog/nope", "/blog/", "/elsewhere", "/blog/a/b", "/blog/Hello-World"]:
        page = routes.handle(path)
        assert page.status == 404, path
        assert "We couldn&#39;t find the post you&#39;re looking for." in page.html


def test_broken_post(routes: SiteRoutes) -> None:
    page = routes.handle("/blog/no-date")
    assert page.status == 500
    # details stay in the logs
    assert "publishedAt" not in page.html


def test_index_with_broken_post(routes: SiteRoutes) -> None:
    assert routes.handle("/").status == 500


def test_index(quire_logger: QuireLogger, quire_file: QuireFileFixtureFactory) -> None:
    store = MemoryPostStore(
        quire_logger,
        {
            "hello-world.md": quire_file.post_source("hello-world.md"),
            "code-sample.md": quire_file.post_source("code-sample.md"),
        },
    )
    r = SiteRoutes(quire_logger, PostResolver(quire_logger, store, MarkdownRenderer()))

    page = r.handle("/")
    assert page.status == 200
    # newest first
    assert page.html.index("/blog/code-sample") < page.html.index("/blog/hello-world")


def test_make_handler(quire_logger: QuireLogger, routes: SiteRoutes) -> None:
    handler_cls = make_handler(quire_logger, routes)
    assert callable(getattr(handler_cls, "do_GET"))
    assert callable(getattr(handler_cls, "do_HEAD"))


def test_published_dates_are_aware(routes: SiteRoutes) -> None:
    post = routes.resolver.resolve("code-sample")
    assert post is not None
    assert post.published_at.utcoffset() == datetime.timedelta(hours=1)


def test_posts_added_while_serving(
    quire_logger: QuireLogger,
    quire_file: QuireFileFixtureFactory,
    tmp_path: pathlib.Path,
) -> None:
    store = DirectoryPostStore(quire_logger, tmp_path)
    r = SiteRoutes(quire_logger, PostResolver(quire_logger, store, MarkdownRenderer(), RenderCache()))

    assert r.handle("/blog/hello-world").status == 404
    assert "No posts yet." in r.handle("/").html

    (tmp_path / "hello-world.md").write_bytes(quire_file.post_source("hello-world.md"))
    page = r.handle("/blog/hello-world")
    assert page.status == 200
    assert "<h1>Hi</h1>" in page.html

    (tmp_path / "code-sample.md").write_bytes(quire_file.post_source("code-sample.md"))
    assert '<a href="/blog/code-sample">' in r.handle("/").html


def test_duplicate_added_while_serving(
    quire_logger: QuireLogger,
    quire_file: QuireFileFixtureFactory,
    tmp_path: pathlib.Path,
) -> None:
    (tmp_path / "hello-world.md").write_bytes(quire_file.post_source("hello-world.md"))
    store = DirectoryPostStore(quire_logger, tmp_path)
    r = SiteRoutes(quire_logger, PostResolver(quire_logger, store, MarkdownRenderer()))

    (tmp_path / "Hello-World.md").write_bytes(quire_file.post_source("hello-world.md"))
    assert r.handle("/").status == 500
    assert r.handle("/blog/other").status == 500
    # the index from before the collision stays in use
    assert store.list_slugs() == ["hello-world"]
    assert r.handle("/blog/hello-world").status == 200
