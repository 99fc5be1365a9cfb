import argparse
from typing import TYPE_CHECKING

from ..cli.cmd import RootCommand

if TYPE_CHECKING:
    from ..config import GlobalConfig


class ListCommand(
    RootCommand,
    cmd="list",
    help="List the posts of the site, newest first",
):
    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        pass

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .site import do_list

        return do_list(cfg)


class CheckCommand(
    RootCommand,
    cmd="check",
    help="Check that every post parses and renders",
    description="Resolves every post of the site and reports the broken ones. Exits with status 1 if any post is broken.",
):
    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        pass

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .site import do_check

        return do_check(cfg)


class RenderCommand(
    RootCommand,
    cmd="render",
    help="Render a post into a standalone HTML page",
):
    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "slug",
            type=str,
            help="Slug of the post to render",
        )
        p.add_argument(
            "-o",
            "--output",
            type=str,
            default=None,
            help="Write the page to this file instead of stdout",
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .site import do_render

        slug: str = args.slug
        output: str | None = args.output
        return do_render(cfg, slug, output)
