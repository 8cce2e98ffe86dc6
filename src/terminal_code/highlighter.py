"""Pygments integration producing line-addressable HTML."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import logging

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name


logger = logging.getLogger(__name__)

LINE_CLASS = "line"


def load_lexer(lang: str) -> Lexer:
    """Return the lexer for ``lang`` with leading and trailing blank lines kept."""
    return get_lexer_by_name(lang, stripnl=False)


class LineHtmlFormatter(HtmlFormatter):
    """HTML formatter wrapping every source line in ``<span class="line">``."""

    def wrap(self, source: Iterator[tuple[int, str]]) -> Iterator[tuple[int, str]]:  # type: ignore[override]
        return super().wrap(self._wrap_source_lines(source))

    def _wrap_source_lines(
        self, source: Iterator[tuple[int, str]]
    ) -> Iterator[tuple[int, str]]:
        for kind, value in source:
            if kind != 1:
                yield kind, value
                continue
            content = value[:-1] if value.endswith("\n") else value
            yield 1, f'<span class="{LINE_CLASS}">{content}</span>\n'


class PygmentsHighlighter:
    """Highlighter handle holding the styles and lexers prepared up front."""

    def __init__(self, themes: Iterable[str], lexers: Mapping[str, Lexer]) -> None:
        self.themes = tuple(themes)
        self._lexers = dict(lexers)

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self._lexers)

    def _lexer(self, lang: str) -> Lexer:
        lexer = self._lexers.get(lang)
        if lexer is None:
            lexer = load_lexer(lang)
        return lexer

    def code_to_html(self, code: str, *, lang: str, themes: Mapping[str, str]) -> str:
        """Return highlighted HTML with one line element per source line.

        Raises ``pygments.util.ClassNotFound`` when ``lang`` has no lexer.
        """
        lexer = self._lexer(lang)
        formatter = LineHtmlFormatter(
            style=themes.get("light") or "default",
            cssclass="highlight",
            wrapcode=True,
        )
        # One element per entry of code.split("\n"), blank edges included.
        return highlight(f"{code}\n", lexer, formatter)

    def style_defs(self, themes: Mapping[str, str], selector: str = ".highlight") -> str:
        """Return CSS for the light theme and, scoped to dark mode, the dark theme."""
        rules: list[str] = []
        light = themes.get("light")
        dark = themes.get("dark")
        if light:
            rules.append(HtmlFormatter(style=light).get_style_defs(selector))
        if dark:
            dark_rules = HtmlFormatter(style=dark).get_style_defs(selector)
            indented = "\n".join(f"  {line}" for line in dark_rules.splitlines())
            rules.append(f"@media (prefers-color-scheme: dark) {{\n{indented}\n}}")
        return "\n".join(rules) + "\n"


def get_highlighter(*, themes: Iterable[str], langs: Iterable[str]) -> PygmentsHighlighter:
    """Load the requested styles and lexers.

    Unknown styles or languages raise ``pygments.util.ClassNotFound``; no
    fallback is attempted.
    """
    theme_names = tuple(themes)
    for theme in theme_names:
        get_style_by_name(theme)
    lexers = {lang: load_lexer(lang) for lang in langs}
    logger.debug("Prepared highlighter for %s (%s)", ", ".join(lexers), ", ".join(theme_names))
    return PygmentsHighlighter(theme_names, lexers)


__all__ = [
    "LINE_CLASS",
    "LineHtmlFormatter",
    "PygmentsHighlighter",
    "get_highlighter",
    "load_lexer",
]
