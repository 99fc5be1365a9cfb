from typing import TYPE_CHECKING

from rich.markup import escape

from ..config import GlobalConfig
from ..config import errors as config_errors
from ..config.schema import decode_value
from ..log import QuireLogger
from ..posts.errors import DuplicateSlugError
from ..utils.global_mode import GlobalModeProvider

if TYPE_CHECKING:
    from .cmd import CLIEntrypoint

CONFIG_ERRORS = (
    config_errors.InvalidConfigSectionError,
    config_errors.InvalidConfigKeyError,
    config_errors.InvalidConfigValueTypeError,
    config_errors.InvalidConfigValueError,
    config_errors.MalformedConfigFileError,
)


def apply_config_overrides(gc: GlobalConfig, overrides: list[str]) -> None:
    for ov in overrides:
        key, sep, val = ov.partition("=")
        if not sep:
            raise config_errors.InvalidConfigValueError(
                None, ov, "overrides must look like KEY=VALUE"
            )
        gc.set_by_key(key, decode_value(key, val))


def main(gm: GlobalModeProvider, logger: QuireLogger, argv: list[str]) -> int:
    from .cmd import RootCommand
    from . import builtin_commands

    del builtin_commands

    p = RootCommand.build_argparse()
    args = p.parse_args(argv[1:])

    gm.is_porcelain = args.porcelain

    logger.D(f"argv[0] = {gm.argv0}")
    logger.D(f"args={escape(str(args))}")

    try:
        gc = GlobalConfig.load_from_config(gm, logger, args.site)
        apply_config_overrides(gc, args.config_overrides)
    except CONFIG_ERRORS as e:
        logger.F(escape(str(e)))
        return 1

    func: "CLIEntrypoint" = args.func
    try:
        return func(gc, args)
    except DuplicateSlugError as e:
        logger.F(escape(str(e)))
        logger.I("rename one of the files so that every post gets its own slug")
        return 1
