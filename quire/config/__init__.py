from functools import cached_property
import os
import pathlib
from typing import Any, Final, Mapping, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import Self

    from ..log import QuireLogger
    from ..posts.render import MarkdownRenderer
    from ..posts.resolver import PostResolver
    from ..posts.store import DirectoryPostStore
    from ..utils.global_mode import ProvidesGlobalMode

from . import errors
from . import schema


CONFIG_FILENAME: Final = "quire.toml"

DEFAULT_POSTS_DIR: Final = "data/posts"
DEFAULT_POSTS_EXTENSION: Final = ".md"
DEFAULT_HIGHLIGHT_STYLE: Final = "default"
DEFAULT_CONTAINER_CLASS: Final = "markdown-body"
DEFAULT_SERVER_HOST: Final = "127.0.0.1"
DEFAULT_SERVER_PORT: Final = 8000

# config key -> GlobalConfig attribute
_ATTR_BY_KEY: Final[dict[tuple[str, str], str]] = {
    (schema.SECTION_POSTS, schema.KEY_POSTS_DIR): "posts_dir_setting",
    (schema.SECTION_POSTS, schema.KEY_POSTS_EXTENSION): "posts_extension",
    (schema.SECTION_RENDER, schema.KEY_RENDER_HIGHLIGHT_STYLE): "highlight_style",
    (schema.SECTION_RENDER, schema.KEY_RENDER_CONTAINER_CLASS): "container_class",
    (schema.SECTION_CACHE, schema.KEY_CACHE_ENABLED): "cache_enabled",
    (schema.SECTION_SERVER, schema.KEY_SERVER_HOST): "server_host",
    (schema.SECTION_SERVER, schema.KEY_SERVER_PORT): "server_port",
}


class GlobalConfig:
    def __init__(
        self,
        gm: "ProvidesGlobalMode",
        logger: "QuireLogger",
        site_root: os.PathLike[Any] | str,
    ) -> None:
        self._gm = gm
        self.logger = logger
        self.site_root = pathlib.Path(site_root)

        # all defaults
        self.posts_dir_setting = DEFAULT_POSTS_DIR
        self.posts_extension = DEFAULT_POSTS_EXTENSION
        self.highlight_style = DEFAULT_HIGHLIGHT_STYLE
        self.container_class = DEFAULT_CONTAINER_CLASS
        self.cache_enabled = True
        self.server_host = DEFAULT_SERVER_HOST
        self.server_port = DEFAULT_SERVER_PORT

    def _apply_config(self, config_data: Mapping[str, object]) -> None:
        for section, section_data in config_data.items():
            schema.validate_section(section)
            if not isinstance(section_data, Mapping):
                raise errors.InvalidConfigKeyError(section)
            for leaf, val in section_data.items():
                self.set_by_key((section, leaf), val)

    def get_by_key(self, key: str | Sequence[str]) -> object:
        return getattr(self, self._get_attr_name_by_key(key))

    def set_by_key(self, key: str | Sequence[str], value: object) -> None:
        attr_name = self._get_attr_name_by_key(key)
        schema.ensure_valid_config_kv(key, True, value)
        setattr(self, attr_name, value)

    @classmethod
    def _get_attr_name_by_key(cls, key: str | Sequence[str]) -> str:
        parsed_key = schema.parse_config_key(key)
        # also validates the key
        schema.get_expected_type_for_config_key(parsed_key)
        section, leaf = parsed_key
        return _ATTR_BY_KEY[(section, leaf)]

    @property
    def is_debug(self) -> bool:
        return self._gm.is_debug

    @property
    def is_porcelain(self) -> bool:
        return self._gm.is_porcelain

    @property
    def config_file(self) -> pathlib.Path:
        return self.site_root / CONFIG_FILENAME

    @property
    def posts_dir(self) -> pathlib.Path:
        # relative settings are anchored at the site root, not the CWD
        return self.site_root / self.posts_dir_setting

    @cached_property
    def post_store(self) -> "DirectoryPostStore":
        from ..posts.store import DirectoryPostStore

        return DirectoryPostStore(
            self.logger,
            self.posts_dir,
            extension=self.posts_extension,
        )

    @cached_property
    def renderer(self) -> "MarkdownRenderer":
        from ..posts.render import MarkdownRenderer

        return MarkdownRenderer(
            highlight_style=self.highlight_style,
            container_class=self.container_class,
        )

    @cached_property
    def resolver(self) -> "PostResolver":
        from ..posts.cache import RenderCache
        from ..posts.resolver import PostResolver

        return PostResolver(
            self.logger,
            self.post_store,
            self.renderer,
            RenderCache() if self.cache_enabled else None,
        )

    def _try_apply_config_file(self, path: os.PathLike[Any]) -> None:
        import tomlkit
        from tomlkit.exceptions import ParseError

        try:
            with open(path, "rb") as fp:
                data: dict[str, Any] = tomlkit.load(fp).unwrap()
        except FileNotFoundError:
            return
        except ParseError as e:
            raise errors.MalformedConfigFileError(path, str(e)) from e

        self.logger.D(f"applying config from {path}: {data}")
        self._apply_config(data)

    @classmethod
    def load_from_config(
        cls,
        gm: "ProvidesGlobalMode",
        logger: "QuireLogger",
        site_root: os.PathLike[Any] | str | None = None,
    ) -> "Self":
        if site_root is None:
            site_root = gm.site_root or os.getcwd()

        obj = cls(gm, logger, site_root)
        obj.logger.D(f"trying config file: {obj.config_file}")
        obj._try_apply_config_file(obj.config_file)
        return obj
