"""Markdown extension routing fenced code blocks through the terminal processor."""

from __future__ import annotations

import re

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from terminal_code.processor import TerminalCodeProcessor, create_processor


FENCED_BLOCK = re.compile(
    r"""
    (?P<fence>^(?:~{3,}|`{3,}))[ ]*
    (?P<lang>[\w#.+-]*)[ ]*
    (?P<meta>[^\n]*)\n
    (?P<code>.*?)(?<=\n)
    (?P=fence)[ ]*$
    """,
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)


class _TerminalCodePreprocessor(Preprocessor):
    """Replace fenced blocks with stashed terminal markup."""

    def __init__(self, md: Markdown, processor: TerminalCodeProcessor) -> None:
        super().__init__(md)
        self.processor = processor

    def run(self, lines: list[str]) -> list[str]:  # type: ignore[override]
        text = "\n".join(lines)
        while match := FENCED_BLOCK.search(text):
            code = match.group("code")
            if code.endswith("\n"):
                code = code[:-1]
            result = self.processor.process_code(
                code,
                match.group("lang") or None,
                match.group("meta").strip() or None,
            )
            placeholder = self.md.htmlStash.store(result.html)
            text = f"{text[: match.start()]}\n{placeholder}\n{text[match.end() :]}"
        return text.split("\n")


class TerminalCodeExtension(Extension):
    """Register the fenced-code preprocessor ahead of ``fenced_code``."""

    def __init__(self, **kwargs: object) -> None:
        self.config = {
            "themes": [{}, "Light and dark Pygments style names"],
            "features": [{}, "Feature toggles gating each rendering pass"],
            "custom_styles": [{}, "Style overrides exported to the stylesheet"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        processor = create_processor(
            {
                "themes": self.getConfig("themes") or {},
                "features": self.getConfig("features") or {},
                "custom_styles": self.getConfig("custom_styles") or {},
            }
        )
        md.registerExtension(self)
        md.preprocessors.register(
            _TerminalCodePreprocessor(md, processor), "terminal_code", 26
        )


def makeExtension(  # noqa: N802
    **kwargs: object,
) -> TerminalCodeExtension:  # pragma: no cover - Markdown hook
    return TerminalCodeExtension(**kwargs)


__all__ = ["FENCED_BLOCK", "TerminalCodeExtension", "makeExtension"]
