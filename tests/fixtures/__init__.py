from contextlib import contextmanager, redirect_stderr, redirect_stdout
from dataclasses import dataclass
import io
import pathlib
import shutil
from typing import Generator

import pytest

from quire.cli.main import main as quire_main
from quire.log import QuireConsoleLogger, QuireLogger
from quire.utils.global_mode import EnvGlobalModeProvider, GlobalModeProvider


class QuireFileFixtureFactory:
    def __init__(self) -> None:
        self._fixtures_dir = pathlib.Path(__file__).parent

    @contextmanager
    def path(self, *frags: str) -> Generator[pathlib.Path, None, None]:
        result_path = self._fixtures_dir
        for frag in frags:
            result_path = result_path / frag
        yield result_path

    def read_bytes(self, *frags: str) -> bytes:
        with self.path(*frags) as p:
            return p.read_bytes()

    def post_source(self, name: str) -> bytes:
        return self.read_bytes("posts", name)


class MockGlobalModeProvider(GlobalModeProvider):
    def __init__(
        self,
        is_debug: bool = False,
        is_porcelain: bool = False,
        site_root: str | None = None,
    ) -> None:
        self._is_debug = is_debug
        self._is_porcelain = is_porcelain
        self._site_root = site_root

    @property
    def argv0(self) -> str:
        return "quire"

    @property
    def is_debug(self) -> bool:
        return self._is_debug

    @property
    def is_porcelain(self) -> bool:
        return self._is_porcelain

    @is_porcelain.setter
    def is_porcelain(self, v: bool) -> None:
        self._is_porcelain = v

    @property
    def site_root(self) -> str | None:
        return self._site_root


@pytest.fixture
def quire_file() -> QuireFileFixtureFactory:
    return QuireFileFixtureFactory()


@pytest.fixture
def mock_gm() -> MockGlobalModeProvider:
    return MockGlobalModeProvider()


@dataclass
class CapturedLogger:
    logger: QuireLogger
    stdout_io: io.StringIO
    stderr_io: io.StringIO

    @property
    def stdout(self) -> str:
        return self.stdout_io.getvalue()

    @property
    def stderr(self) -> str:
        return self.stderr_io.getvalue()


@pytest.fixture
def captured_logger(mock_gm: MockGlobalModeProvider) -> CapturedLogger:
    """A logger whose output can be inspected afterwards."""
    out, err = io.StringIO(), io.StringIO()
    return CapturedLogger(QuireConsoleLogger(mock_gm, stdout=out, stderr=err), out, err)


@pytest.fixture
def quire_logger(captured_logger: CapturedLogger) -> QuireLogger:
    return captured_logger.logger


@dataclass
class CLIRunResult:
    exit_code: int
    stdout: str
    stderr: str


class IntegrationTestHarness:
    def __init__(self, env: dict[str, str], site_root: pathlib.Path) -> None:
        self._env = env
        self.site_root = site_root

    @property
    def posts_dir(self) -> pathlib.Path:
        return self.site_root / "data" / "posts"

    def __call__(self, *args: str) -> CLIRunResult:
        return self.run(*args)

    def run(self, *args: str) -> CLIRunResult:
        argv = ["quire", *args]
        stdout_io = io.StringIO()
        stderr_io = io.StringIO()
        with redirect_stdout(stdout_io), redirect_stderr(stderr_io):
            gm = EnvGlobalModeProvider(self._env, argv)
            logger = QuireConsoleLogger(gm, stdout=stdout_io, stderr=stderr_io)
            exit_code = quire_main(gm, logger, argv)
        return CLIRunResult(exit_code, stdout_io.getvalue(), stderr_io.getvalue())

    def add_post(self, filename: str, content: str) -> pathlib.Path:
        self.posts_dir.mkdir(parents=True, exist_ok=True)
        path = self.posts_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    def write_config(self, toml_text: str) -> None:
        (self.site_root / "quire.toml").write_text(toml_text, encoding="utf-8")


@pytest.fixture
def quire_cli_runner(
    tmp_path: pathlib.Path,
    quire_file: QuireFileFixtureFactory,
) -> IntegrationTestHarness:
    site_root = tmp_path / "site"
    with quire_file.path("sites", "basic") as src:
        shutil.copytree(src, site_root)

    # the site is always passed explicitly through QUIRE_SITE
    env = {"QUIRE_SITE": str(site_root)}
    return IntegrationTestHarness(env=env, site_root=site_root)
