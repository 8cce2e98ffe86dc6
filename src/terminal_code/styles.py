"""Stylesheet generation for the highlighter themes and custom style values."""

from __future__ import annotations

from terminal_code.config import CustomStyles, TerminalCodeConfig
from terminal_code.highlighter import get_highlighter


CSS_VARIABLE_PREFIX = "--terminal-code-"


def custom_properties(styles: CustomStyles) -> str:
    """Return a ``:root`` block exposing the configured style overrides."""
    declarations = [
        f"  {CSS_VARIABLE_PREFIX}{name.replace('_', '-')}: {value};"
        for name, value in styles.model_dump().items()
        if value
    ]
    if not declarations:
        return ""
    body = "\n".join(declarations)
    return f":root {{\n{body}\n}}\n"


def build_stylesheet(config: TerminalCodeConfig, selector: str = ".highlight") -> str:
    """Return the CSS shipped next to the rendered pages."""
    themes = config.themes.as_mapping()
    highlighter = get_highlighter(themes=themes.values(), langs=())
    parts = [custom_properties(config.custom_styles), highlighter.style_defs(themes, selector)]
    return "\n".join(part for part in parts if part)


__all__ = ["CSS_VARIABLE_PREFIX", "build_stylesheet", "custom_properties"]
