from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING

from .routes import SiteRoutes

if TYPE_CHECKING:
    from ..config import GlobalConfig
    from ..log import QuireLogger


def make_handler(
    logger: "QuireLogger",
    routes: SiteRoutes,
) -> type[BaseHTTPRequestHandler]:
    class PostRequestHandler(BaseHTTPRequestHandler):
        server_version = "quire"

        def _send_page(self, include_body: bool) -> None:
            page = routes.handle(self.path)
            payload = page.html.encode("utf-8")

            self.send_response(page.status)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if include_body:
                self.wfile.write(payload)

        def do_GET(self) -> None:
            self._send_page(True)

        def do_HEAD(self) -> None:
            self._send_page(False)

        def log_message(self, format: str, *args: object) -> None:
            logger.D(f"{self.address_string()} - {format % args}")

    return PostRequestHandler


def make_server(gc: "GlobalConfig", host: str, port: int) -> ThreadingHTTPServer:
    routes = SiteRoutes(gc.logger, gc.resolver, container_class=gc.container_class)
    return ThreadingHTTPServer((host, port), make_handler(gc.logger, routes))


def serve(gc: "GlobalConfig", host: str, port: int) -> int:
    try:
        httpd = make_server(gc, host, port)
    except OSError as e:
        gc.logger.F(f"cannot listen on {host}:{port}: {e.strerror or e}")
        return 1

    bound_host, bound_port = httpd.server_address[:2]
    gc.logger.I(f"serving posts from [green]{gc.posts_dir}[/] at http://{bound_host}:{bound_port}/")

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        gc.logger.I("shutting down")
    finally:
        httpd.server_close()

    return 0
