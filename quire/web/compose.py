from dataclasses import dataclass
from typing import Final, Sequence

from ..posts.models import Post
from ..utils.templating import render_template_str

DEFAULT_SITE_TITLE: Final = "Blog"

NOT_FOUND_DESCRIPTION: Final = "We couldn't find the post you're looking for."
BROKEN_POST_DESCRIPTION: Final = "This post exists but could not be displayed."


@dataclass(frozen=True)
class ComposedPage:
    status: int
    html: str


def compose_post_page(
    post: Post,
    stylesheet: str,
    *,
    container_class: str = "markdown-body",
    site_title: str = DEFAULT_SITE_TITLE,
) -> ComposedPage:
    # post.html comes out of the sanitizing renderer and is embedded verbatim
    html = render_template_str(
        "post.html.jinja",
        {
            "site_title": site_title,
            "post": post,
            "stylesheet": stylesheet,
            "container_class": container_class,
        },
    )
    return ComposedPage(200, html)


def compose_index_page(
    posts: Sequence[Post],
    *,
    site_title: str = DEFAULT_SITE_TITLE,
) -> ComposedPage:
    html = render_template_str(
        "index.html.jinja",
        {"site_title": site_title, "posts": posts},
    )
    return ComposedPage(200, html)


def compose_status_page(
    status: int,
    description: str,
    *,
    site_title: str = DEFAULT_SITE_TITLE,
) -> ComposedPage:
    html = render_template_str(
        "status.html.jinja",
        {"site_title": site_title, "status": status, "description": description},
    )
    return ComposedPage(status, html)


def compose_not_found_page(*, site_title: str = DEFAULT_SITE_TITLE) -> ComposedPage:
    return compose_status_page(404, NOT_FOUND_DESCRIPTION, site_title=site_title)


def compose_error_page(*, site_title: str = DEFAULT_SITE_TITLE) -> ComposedPage:
    """The page shown for a post that exists but is broken.

    Error details stay in the logs; visitors only learn that the failure is
    on the server side.
    """
    return compose_status_page(500, BROKEN_POST_DESCRIPTION, site_title=site_title)
