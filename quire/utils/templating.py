import datetime
from typing import Any, Callable, Final, Tuple

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateNotFound

from ..resource_bundle import get_template_str

# spelled out here so output does not depend on the process locale
MONTH_NAMES: Final = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_long_date(d: datetime.date) -> str:
    """Formats a date like ``January 1, 2023``."""
    return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


class EmbeddedLoader(BaseLoader):
    def get_source(
        self,
        environment: Environment,
        template: str,
    ) -> Tuple[str, str | None, Callable[[], bool] | None]:
        if payload := get_template_str(template):
            return payload, None, None
        raise TemplateNotFound(template)


_JINJA_ENV: Final = Environment(
    loader=EmbeddedLoader(),
    autoescape=True,  # everything we render is HTML
    auto_reload=False,  # templates ship with the package
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)
_JINJA_ENV.filters["longdate"] = format_long_date


def render_template_str(template_name: str, data: dict[str, Any]) -> str:
    tmpl = _JINJA_ENV.get_template(template_name)
    return tmpl.render(data)
