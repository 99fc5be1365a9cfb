import argparse
from typing import TYPE_CHECKING

from ..cli.cmd import RootCommand

if TYPE_CHECKING:
    from ..config import GlobalConfig


class ServeCommand(
    RootCommand,
    cmd="serve",
    help="Preview the site over HTTP",
    description="Serves the post index at / and every post at /blog/<slug>, rendering posts as they are requested.",
):
    @classmethod
    def configure_args(cls, p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--host",
            type=str,
            default=None,
            help="Address to listen on (default: server.host from config)",
        )
        p.add_argument(
            "--port",
            type=int,
            default=None,
            help="Port to listen on (default: server.port from config)",
        )

    @classmethod
    def main(cls, cfg: "GlobalConfig", args: argparse.Namespace) -> int:
        from .server import serve

        host: str = args.host or cfg.server_host
        port: int = args.port if args.port is not None else cfg.server_port
        return serve(cfg, host, port)
