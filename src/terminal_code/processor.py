"""Per-block entry point combining the highlighter, parser and pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any, Protocol

from terminal_code.config import TerminalCodeConfig, resolve_config
from terminal_code.highlighter import get_highlighter
from terminal_code.meta import Annotation, parse_meta
from terminal_code.pipeline import render


logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "text"


class Highlighter(Protocol):
    def code_to_html(self, code: str, *, lang: str, themes: Mapping[str, str]) -> str: ...


class HighlighterFactory(Protocol):
    def __call__(self, *, themes: Iterable[str], langs: Iterable[str]) -> Highlighter: ...


@dataclass(frozen=True, slots=True)
class ProcessedCode:
    """Rendered code block returned to the host."""

    html: str
    lang: str | None
    meta: Annotation


class TerminalCodeProcessor:
    """Render fenced code blocks with a configuration fixed at construction."""

    def __init__(
        self,
        config: TerminalCodeConfig,
        *,
        highlighter_factory: HighlighterFactory = get_highlighter,
    ) -> None:
        self._config = config
        self._highlighter_factory = highlighter_factory

    @property
    def config(self) -> TerminalCodeConfig:
        return self._config

    def process_code(
        self,
        code: str,
        lang: str | None = None,
        meta: str | None = None,
    ) -> ProcessedCode:
        """Highlight ``code`` and decorate it according to ``meta``.

        Errors raised by the highlighter, such as an unknown language, are
        propagated unchanged.
        """
        themes = self._config.themes.as_mapping()
        language = lang or DEFAULT_LANGUAGE
        highlighter = self._highlighter_factory(themes=themes.values(), langs=[language])

        annotation = parse_meta(meta or "")
        markup = highlighter.code_to_html(code, lang=language, themes=themes)
        html = render(
            markup,
            lang,
            annotation,
            self._config.features,
            self._config.custom_styles,
        )
        logger.debug("Rendered %s block (%d lines)", language, code.count("\n") + 1)
        return ProcessedCode(html=html, lang=lang, meta=annotation)


def create_processor(
    config: TerminalCodeConfig | Mapping[str, Any] | None = None,
    *,
    highlighter_factory: HighlighterFactory = get_highlighter,
) -> TerminalCodeProcessor:
    """Resolve ``config`` against the defaults and build a processor."""
    return TerminalCodeProcessor(
        resolve_config(config), highlighter_factory=highlighter_factory
    )


__all__ = [
    "DEFAULT_LANGUAGE",
    "Highlighter",
    "HighlighterFactory",
    "ProcessedCode",
    "TerminalCodeProcessor",
    "create_processor",
]
