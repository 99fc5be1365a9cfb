import abc
import os
from typing import Final, Mapping, Protocol, runtime_checkable

ENV_DEBUG: Final = "QUIRE_DEBUG"
ENV_SITE_ROOT: Final = "QUIRE_SITE"

TRUTHY_ENV_VAR_VALUES: Final = {"1", "true", "x", "y", "yes"}


def is_env_var_truthy(env: Mapping[str, str], var: str) -> bool:
    if v := env.get(var):
        return v.lower() in TRUTHY_ENV_VAR_VALUES
    return False


@runtime_checkable
class ProvidesGlobalMode(Protocol):
    @property
    def argv0(self) -> str: ...

    @property
    def is_debug(self) -> bool: ...

    @property
    def is_porcelain(self) -> bool: ...

    @property
    def site_root(self) -> str | None: ...


class GlobalModeProvider(metaclass=abc.ABCMeta):
    """
    Abstract base class for global mode providers.
    """

    @property
    @abc.abstractmethod
    def argv0(self) -> str:
        return ""

    @property
    @abc.abstractmethod
    def is_debug(self) -> bool:
        return False

    @property
    @abc.abstractmethod
    def is_porcelain(self) -> bool:
        return False

    @is_porcelain.setter
    @abc.abstractmethod
    def is_porcelain(self, v: bool) -> None:
        pass

    @property
    @abc.abstractmethod
    def site_root(self) -> str | None:
        return None


def _guess_porcelain_from_argv(argv: list[str]) -> bool:
    """
    Guess if the current invocation is a "porcelain" command based on the
    arguments passed, so that logging done before argparse finishes is
    already in the right format.
    """
    return "--porcelain" in argv[1:2]


class EnvGlobalModeProvider(GlobalModeProvider):
    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        argv: list[str] | None = None,
    ) -> None:
        if env is None:
            env = os.environ
        if argv is None:
            argv = []

        self._argv0 = argv[0] if argv else ""
        self._is_debug = is_env_var_truthy(env, ENV_DEBUG)
        self._is_porcelain = _guess_porcelain_from_argv(argv)
        self._site_root = env.get(ENV_SITE_ROOT) or None

    @property
    def argv0(self) -> str:
        return self._argv0

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
