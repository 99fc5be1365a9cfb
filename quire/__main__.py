#!/usr/bin/env python3

import os
import sys

from quire.utils.global_mode import EnvGlobalModeProvider


def entrypoint() -> None:
    gm = EnvGlobalModeProvider(os.environ, sys.argv)

    # NOTE: import of rich is comparatively slow, so initialization of
    # logging is deferred as late as possible
    from quire.cli.main import main
    from quire.log import QuireConsoleLogger

    logger = QuireConsoleLogger(gm)

    if not sys.argv:
        logger.F("no argv?")
        sys.exit(1)

    sys.exit(main(gm, logger, sys.argv))


if __name__ == "__main__":
    entrypoint()
