import re
from typing import Final, Sequence

from .errors import (
    InvalidConfigKeyError,
    InvalidConfigSectionError,
    InvalidConfigValueError,
    InvalidConfigValueTypeError,
)


def parse_config_key(key: str | Sequence[str]) -> list[str]:
    if isinstance(key, str):
        return key.split(".")
    return list(key)


SECTION_POSTS: Final = "posts"
KEY_POSTS_DIR: Final = "dir"
KEY_POSTS_EXTENSION: Final = "extension"

SECTION_RENDER: Final = "render"
KEY_RENDER_HIGHLIGHT_STYLE: Final = "highlight_style"
KEY_RENDER_CONTAINER_CLASS: Final = "container_class"

SECTION_CACHE: Final = "cache"
KEY_CACHE_ENABLED: Final = "enabled"

SECTION_SERVER: Final = "server"
KEY_SERVER_HOST: Final = "host"
KEY_SERVER_PORT: Final = "port"

_KEY_TYPES: Final[dict[str, dict[str, type]]] = {
    SECTION_POSTS: {
        KEY_POSTS_DIR: str,
        KEY_POSTS_EXTENSION: str,
    },
    SECTION_RENDER: {
        KEY_RENDER_HIGHLIGHT_STYLE: str,
        KEY_RENDER_CONTAINER_CLASS: str,
    },
    SECTION_CACHE: {
        KEY_CACHE_ENABLED: bool,
    },
    SECTION_SERVER: {
        KEY_SERVER_HOST: str,
        KEY_SERVER_PORT: int,
    },
}

EXTENSION_RE: Final = re.compile(r"^\.[0-9A-Za-z_-]+$")
CSS_CLASS_RE: Final = re.compile(r"^-?[_A-Za-z][_A-Za-z0-9-]*$")


def validate_section(section: str) -> None:
    if section not in _KEY_TYPES:
        raise InvalidConfigSectionError(section)


def get_expected_type_for_config_key(key: str | Sequence[str]) -> type:
    parsed_key = parse_config_key(key)
    if len(parsed_key) != 2:
        # for now there's no nested config option
        raise InvalidConfigKeyError(key)

    section, sel = parsed_key
    validate_section(section)
    try:
        return _KEY_TYPES[section][sel]
    except KeyError:
        raise InvalidConfigKeyError(key) from None


def ensure_valid_config_kv(
    key: str | Sequence[str],
    check_val: bool = False,
    val: object | None = None,
) -> None:
    expected_type = get_expected_type_for_config_key(key)
    if not check_val:
        return

    ensure_value_type(key, val, expected_type)

    section, sel = parse_config_key(key)
    if section == SECTION_POSTS:
        return _extra_validate_section_posts_kv(key, sel, val)
    elif section == SECTION_RENDER:
        return _extra_validate_section_render_kv(key, sel, val)
    elif section == SECTION_SERVER:
        return _extra_validate_section_server_kv(key, sel, val)


def ensure_value_type(
    key: str | Sequence[str],
    val: object | None,
    expected: type,
) -> None:
    # bool is a subclass of int, but a port number of "true" is nonsense
    if expected is not bool and isinstance(val, bool):
        raise InvalidConfigValueTypeError(key, val, expected)
    if not isinstance(val, expected):
        raise InvalidConfigValueTypeError(key, val, expected)


def _extra_validate_section_posts_kv(
    key: str | Sequence[str],
    sel: str,
    val: object | None,
) -> None:
    # value types are already ensured earlier
    if sel == KEY_POSTS_DIR:
        if not val:
            raise InvalidConfigValueError(key, val, "must not be empty")
    elif sel == KEY_POSTS_EXTENSION:
        assert isinstance(val, str)
        if not EXTENSION_RE.match(val):
            raise InvalidConfigValueError(key, val, "must look like '.md'")


def _extra_validate_section_render_kv(
    key: str | Sequence[str],
    sel: str,
    val: object | None,
) -> None:
    if sel == KEY_RENDER_HIGHLIGHT_STYLE:
        from pygments.styles import get_all_styles

        if val not in set(get_all_styles()):
            raise InvalidConfigValueError(key, val, "not a known Pygments style")
    elif sel == KEY_RENDER_CONTAINER_CLASS:
        assert isinstance(val, str)
        if not CSS_CLASS_RE.match(val):
            raise InvalidConfigValueError(key, val, "not a valid CSS class name")


def _extra_validate_section_server_kv(
    key: str | Sequence[str],
    sel: str,
    val: object | None,
) -> None:
    if sel == KEY_SERVER_PORT:
        assert isinstance(val, int)
        if not (1 <= val <= 65535):
            raise InvalidConfigValueError(key, val, "must be within 1..65535")
    elif sel == KEY_SERVER_HOST:
        if not val:
            raise InvalidConfigValueError(key, val, "must not be empty")


def decode_value(key: str | Sequence[str], val: str) -> object:
    """Decodes the given string representation of a config value into a Python
    value, directed by type information implied by the config key."""

    expected_type = get_expected_type_for_config_key(key)
    return _decode_single_type_value(key, val, expected_type)


def _decode_single_type_value(
    key: str | Sequence[str] | None,
    val: str,
    expected_type: type,
) -> object:
    if expected_type is bool:
        if val in ("true", "yes", "1"):
            return True
        elif val in ("false", "no", "0"):
            return False
        else:
            raise InvalidConfigValueError(key, val, "expected a boolean")
    elif expected_type is int:
        try:
            return int(val, 10)
        except ValueError:
            raise InvalidConfigValueError(key, val, "expected an integer") from None
    elif expected_type is str:
        return val
    else:
        raise NotImplementedError(f"unhandled type for config value: {expected_type}")
