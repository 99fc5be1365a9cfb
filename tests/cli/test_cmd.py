import pytest

from quire.cli import builtin_commands
from quire.cli.cmd import RootCommand

del builtin_commands


@pytest.mark.parametrize("subcmd", [["list"], ["check"], ["render", "x"], ["serve"], ["version"]])
def test_root_options_survive_subcommands(subcmd: list[str]) -> None:
    p = RootCommand.build_argparse()
    args = p.parse_args(["--porcelain", "--site", "/srv/blog", "-c", "cache.enabled=false", *subcmd])

    assert args.porcelain is True
    assert args.site == "/srv/blog"
    assert args.config_overrides == ["cache.enabled=false"]


def test_root_options_only_before_subcommand() -> None:
    p = RootCommand.build_argparse()
    with pytest.raises(SystemExit):
        p.parse_args(["list", "--porcelain"])
