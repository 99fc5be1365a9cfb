import sys

from rich import box
from rich.markup import escape
from rich.table import Table

from ..config import GlobalConfig
from ..log import QuireLogger
from ..utils.porcelain import PorcelainEntityType, PorcelainOutput
from ..utils.templating import format_long_date
from ..web.compose import compose_post_page
from .errors import FrontMatterError, PostReadError
from .models import PorcelainPostCheckResultV1, Post


def print_post_table(logger: QuireLogger, posts: list[Post]) -> None:
    tbl = Table(box=box.SIMPLE, show_edge=False)
    tbl.add_column("Date")
    tbl.add_column("Slug")
    tbl.add_column("Title")

    for post in posts:
        tbl.add_row(
            format_long_date(post.published_at),
            f"[bold green]{escape(post.slug)}[/]",
            escape(post.title),
        )

    logger.stdout(tbl)


def do_list(cfg: GlobalConfig) -> int:
    logger = cfg.logger
    try:
        posts = cfg.resolver.list_posts()
    except (FrontMatterError, PostReadError) as e:
        logger.F(f"cannot list posts: {escape(str(e))}")
        logger.I("run [yellow]quire check[/] to find all broken posts")
        return 1

    if cfg.is_porcelain:
        with PorcelainOutput() as po:
            for post in posts:
                po.emit(post.to_porcelain())
        return 0

    logger.stdout("[bold green]Posts:[/]\n")
    if not posts:
        logger.stdout(f"  (no post under {escape(str(cfg.posts_dir))})")
        return 0

    print_post_table(logger, posts)
    return 0


def do_check(cfg: GlobalConfig) -> int:
    logger = cfg.logger
    slugs = cfg.post_store.list_slugs()
    failures = dict(cfg.resolver.check_all())

    if cfg.is_porcelain:
        with PorcelainOutput() as po:
            for slug in slugs:
                result: PorcelainPostCheckResultV1 = {
                    "ty": PorcelainEntityType.PostCheckResultV1,
                    "slug": slug,
                    "ok": slug not in failures,
                }
                if err := failures.get(slug):
                    result["error"] = str(err)
                po.emit(result)
        return 1 if failures else 0

    for slug in slugs:
        if err := failures.get(slug):
            logger.stdout(f"[bold red]broken[/] {escape(slug)}: {escape(str(err))}")
        else:
            logger.stdout(f"[green]ok[/]     {escape(slug)}")

    if failures:
        logger.F(f"{len(failures)} of {len(slugs)} post(s) are broken")
        return 1

    logger.I(f"all {len(slugs)} post(s) are fine")
    return 0


def do_render(cfg: GlobalConfig, slug: str, output: str | None) -> int:
    logger = cfg.logger
    try:
        post = cfg.resolver.resolve(slug)
    except (FrontMatterError, PostReadError) as e:
        logger.F(f"cannot render: {escape(str(e))}")
        return 1

    if post is None:
        logger.F(f"no post with slug [yellow]{escape(slug)}[/]")
        return 1

    page = compose_post_page(
        post,
        cfg.renderer.stylesheet(),
        container_class=cfg.container_class,
    )

    if output is None:
        # bypass rich, the page must come out verbatim
        sys.stdout.write(page.html)
        sys.stdout.flush()
        return 0

    with open(output, "w", encoding="utf-8") as fp:
        fp.write(page.html)
    logger.I(f"wrote [green]{escape(slug)}[/] to [yellow]{escape(output)}[/]")
    return 0
