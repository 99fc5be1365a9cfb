from functools import cached_property
from typing import Final, Sequence

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.renderer import RendererHTML
from markdown_it.token import Token
from markdown_it.utils import EnvType, OptionsDict
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

# Rules for the bits of GFM output that browsers' defaults get wrong once a
# CSS reset is in place. "{scope}" is the container selector.
_BASE_CSS: Final = """\
{scope} ul {
  list-style-type: disc;
}
{scope} ol {
  list-style-type: decimal;
}
{scope} ul.contains-task-list {
  list-style-type: none;
}
{scope} table {
  border-collapse: collapse;
}
{scope} th,
{scope} td {
  border: 1px solid #d0d7de;
  padding: 6px 13px;
}
{scope} pre {
  overflow-x: auto;
}
"""


class MarkdownRenderer:
    """Renders GitHub-flavored markdown to HTML that is safe to embed.

    Raw HTML in the source is escaped and rendered as text, links with
    unsafe schemes (``javascript:`` and friends) are left unlinked, and
    fenced code blocks tagged with a language Pygments knows are
    highlighted. Rendering is deterministic and never raises on text
    input.
    """

    def __init__(
        self,
        highlight_style: str = "default",
        container_class: str = "markdown-body",
    ) -> None:
        self.highlight_style = highlight_style
        self.container_class = container_class

        self._md = (
            MarkdownIt(
                "commonmark",
                {"html": False, "highlight": _highlight_fence},
            )
            .enable(["table", "strikethrough"])
            .use(tasklists_plugin)
        )
        # GFM spells strikethrough as <del>
        self._md.add_render_rule("s_open", _render_del_open)
        self._md.add_render_rule("s_close", _render_del_close)

    def render(self, body: str) -> str:
        return self._md.render(body)

    def stylesheet(self) -> str:
        return self._stylesheet

    @cached_property
    def _stylesheet(self) -> str:
        scope = f".{self.container_class}"
        formatter = HtmlFormatter(style=self.highlight_style)
        code_scope = f"{scope} .highlight"
        lines = [_BASE_CSS.replace("{scope}", scope)]
        lines.extend(formatter.get_background_style_defs(code_scope))
        lines.extend(formatter.get_token_style_defs(code_scope))
        return "\n".join(lines) + "\n"


def _render_del_open(
    self: RendererHTML,
    tokens: Sequence[Token],
    idx: int,
    options: OptionsDict,
    env: EnvType,
) -> str:
    return "<del>"


def _render_del_close(
    self: RendererHTML,
    tokens: Sequence[Token],
    idx: int,
    options: OptionsDict,
    env: EnvType,
) -> str:
    return "</del>"


def _highlight_fence(code: str, lang: str, attrs: str) -> str:
    # an empty result makes markdown-it fall back to a plain escaped block
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""

    highlighted = highlight(code, lexer, HtmlFormatter(nowrap=True))
    return (
        f'<pre class="highlight"><code class="language-{escapeHtml(lang)}">'
        f"{highlighted}</code></pre>"
    )
