import argparse
from typing import Callable, IO, Protocol, TYPE_CHECKING

from . import QUIRE_ENTRYPOINT_NAME

if TYPE_CHECKING:
    from ..config import GlobalConfig

    CLIEntrypoint = Callable[["GlobalConfig", argparse.Namespace], int]


class _PrintHelp(Protocol):
    def print_help(self, file: IO[str] | None = None) -> None: ...


def _wrap_help(x: _PrintHelp) -> "CLIEntrypoint":
    def _wrapped_(gc: "GlobalConfig", args: argparse.Namespace) -> int:
        x.print_help()
        return 0

    return _wrapped_


class BaseCommand:
    parsers: "list[type[BaseCommand]]" = []

    cmd: str | None
    has_subcommands: bool
    is_subcommand_required: bool
    has_main: bool
    aliases: list[str]
    description: str | None
    prog: str | None
    help: str | None

    def __init_subclass__(
        cls,
        cmd: str | None,
        has_subcommands: bool = False,
        is_subcommand_required: bool = False,
        has_main: bool | None = None,
        aliases: list[str] | None = None,
        description: str | None = None,
        prog: str | None = None,
        help: str | None = None,
        **kwargs: object,
    ) -> None:
        cls.cmd = cmd
        cls.has_subcommands = has_subcommands
        cls.is_subcommand_required = is_subcommand_required
        cls.has_main = has_main if has_main is not None else not has_subcommands

        # argparse params
        cls.aliases = aliases or []
        cls.description = description
        cls.prog = prog
        cls.help = help

        cls.parsers.append(cls)

        super().__init_subclass__(**kwargs)

    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        """Configure arguments for this parser."""
        pass

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        """Entrypoint of this command."""
        raise NotImplementedError

    @classmethod
    def is_root(cls) -> bool:
        return cls.cmd is None

    @classmethod
    def build_argparse(cls) -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog=cls.prog, description=cls.description)
        cls.configure_args(p)
        cls._populate_defaults(p)
        cls._maybe_build_subcommands(p)
        return p

    @classmethod
    def _maybe_build_subcommands(cls, p: argparse.ArgumentParser) -> None:
        if not cls.has_subcommands:
            return

        sp = p.add_subparsers(
            title="subcommands",
            required=cls.is_subcommand_required,
        )
        for subcmd_cls in cls.parsers:
            if subcmd_cls.mro()[1] is not cls:
                # do not recurse onto self or non-direct subclasses
                continue
            subcmd_cls._configure_subcommand(sp)

    @classmethod
    def _configure_subcommand(
        cls,
        sp: "argparse._SubParsersAction[argparse.ArgumentParser]",
    ) -> argparse.ArgumentParser:
        assert cls.cmd is not None
        p = sp.add_parser(
            cls.cmd,
            aliases=cls.aliases,
            help=cls.help,
            description=cls.description,
        )
        cls.configure_args(p)
        cls._populate_defaults(p)
        cls._maybe_build_subcommands(p)
        return p

    @classmethod
    def _populate_defaults(cls, p: argparse.ArgumentParser) -> None:
        if cls.has_main:
            p.set_defaults(func=cls.main)
        else:
            p.set_defaults(func=_wrap_help(p))


class RootCommand(
    BaseCommand,
    cmd=None,
    has_subcommands=True,
    has_main=False,
    prog=QUIRE_ENTRYPOINT_NAME,
    description="Resolve, render and preview markdown blog posts",
):
    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        from .version_cli import cli_version

        p.add_argument(
            "-V",
            "--version",
            action="store_const",
            dest="func",
            const=cli_version,
            help="Print version information",
        )
        p.add_argument(
            "--porcelain",
            action="store_true",
            help="Give the output in a machine-friendly format if applicable",
        )
        p.add_argument(
            "--site",
            type=str,
            default=None,
            help="Root directory of the site (default: $QUIRE_SITE or the current directory)",
        )
        p.add_argument(
            "-c",
            "--config",
            action="append",
            dest="config_overrides",
            default=[],
            metavar="KEY=VALUE",
            help="Override a config value for this invocation, e.g. cache.enabled=false",
        )
