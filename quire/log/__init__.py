import abc
import datetime
from functools import cached_property
import io
import sys
import time
from typing import Any, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    # rich is only needed once something is actually printed
    from rich.console import Console, RenderableType
    from rich.text import Text

from ..utils.global_mode import ProvidesGlobalMode
from ..utils.porcelain import PorcelainEntity, PorcelainEntityType, PorcelainOutput


class PorcelainLog(PorcelainEntity):
    t: int
    """Timestamp of the message line in microseconds"""

    lvl: str
    """Log level of the message line (one of D, F, I, W)"""

    msg: str
    """Message content, with rich markup already rendered away"""


def log_time_formatter(x: datetime.datetime) -> "Text":
    from rich.text import Text

    return Text(f"debug: [{x.isoformat()}]")


def _make_porcelain_log(
    lvl: str,
    message: "RenderableType",
    sep: str,
    *objects: Any,
) -> PorcelainLog:
    from rich.console import Console

    with io.StringIO() as buf:
        tmp_console = Console(file=buf, color_system=None, soft_wrap=True)
        tmp_console.print(message, *objects, sep=sep, end="")
        return {
            "ty": PorcelainEntityType.LogV1,
            "t": int(time.time() * 1000000),
            "lvl": lvl,
            "msg": buf.getvalue(),
        }


class QuireLogger(metaclass=abc.ABCMeta):
    """Sink for everything quire prints.

    ``stdout`` is for program output proper; ``D``, ``I``, ``W`` and ``F``
    are diagnostics (debug, info, warning, fatal) and go to stderr. All of
    them accept rich markup.
    """

    @abc.abstractmethod
    def stdout(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def D(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
        _stack_offset_delta: int = 0,
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def F(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def I(  # noqa: E743 # the name intentionally mimics Android logging for brevity
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def W(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        raise NotImplementedError


class QuireConsoleLogger(QuireLogger):
    def __init__(
        self,
        gm: ProvidesGlobalMode,
        stdout: TextIO = sys.stdout,
        stderr: TextIO = sys.stderr,
    ) -> None:
        self._gm = gm
        self._stdout = stdout
        self._stderr = stderr

    @cached_property
    def _stdout_console(self) -> "Console":
        from rich.console import Console

        return Console(
            file=self._stdout,
            highlight=False,
            soft_wrap=True,
        )

    @cached_property
    def _debug_console(self) -> "Console":
        from rich.console import Console

        return Console(
            file=self._stderr,
            log_time_format=log_time_formatter,
            soft_wrap=True,
        )

    @cached_property
    def _log_console(self) -> "Console":
        from rich.console import Console

        return Console(
            file=self._stderr,
            highlight=False,
            soft_wrap=True,
        )

    @cached_property
    def _porcelain_sink(self) -> PorcelainOutput:
        return PorcelainOutput(self._stderr)

    def _emit_porcelain_log(
        self,
        lvl: str,
        message: "RenderableType",
        sep: str = " ",
        *objects: Any,
    ) -> None:
        self._porcelain_sink.emit(_make_porcelain_log(lvl, message, sep, *objects))

    def _print_prefixed(
        self,
        lvl: str,
        prefix: str,
        message: "RenderableType",
        *objects: Any,
        sep: str,
        end: str,
    ) -> None:
        if self._gm.is_porcelain:
            return self._emit_porcelain_log(lvl, message, sep, *objects)

        return self._log_console.print(
            f"{prefix} {message}",
            *objects,
            sep=sep,
            end=end,
        )

    def stdout(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        return self._stdout_console.print(message, *objects, sep=sep, end=end)

    def D(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
        _stack_offset_delta: int = 0,
    ) -> None:
        if not self._gm.is_debug:
            return

        if self._gm.is_porcelain:
            return self._emit_porcelain_log("D", message, sep, *objects)

        return self._debug_console.log(
            message,
            *objects,
            sep=sep,
            end=end,
            _stack_offset=2 + _stack_offset_delta,
        )

    def F(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        self._print_prefixed(
            "F", "[bold red]fatal error:[/]", message, *objects, sep=sep, end=end
        )

    def I(  # noqa: E743 # the name intentionally mimics Android logging for brevity
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        self._print_prefixed(
            "I", "[bold green]info:[/]", message, *objects, sep=sep, end=end
        )

    def W(
        self,
        message: "RenderableType",
        *objects: Any,
        sep: str = " ",
        end: str = "\n",
    ) -> None:
        self._print_prefixed(
            "W", "[bold yellow]warn:[/]", message, *objects, sep=sep, end=end
        )

