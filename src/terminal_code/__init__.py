"""Terminal-style code blocks for Markdown and MkDocs."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from terminal_code.config import (
    CustomStyles,
    FeatureConfig,
    TerminalCodeConfig,
    ThemeConfig,
    resolve_config,
)
from terminal_code.exceptions import ConfigurationError, TerminalCodeError
from terminal_code.highlighter import PygmentsHighlighter, get_highlighter
from terminal_code.meta import Annotation, DiffSpec, LineSet, parse_line_numbers, parse_meta
from terminal_code.pipeline import render
from terminal_code.processor import ProcessedCode, TerminalCodeProcessor, create_processor


try:
    __version__ = _pkg_version("terminal-code")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "Annotation",
    "ConfigurationError",
    "CustomStyles",
    "DiffSpec",
    "FeatureConfig",
    "LineSet",
    "ProcessedCode",
    "PygmentsHighlighter",
    "TerminalCodeConfig",
    "TerminalCodeError",
    "TerminalCodeProcessor",
    "ThemeConfig",
    "__version__",
    "create_processor",
    "get_highlighter",
    "parse_line_numbers",
    "parse_meta",
    "render",
    "resolve_config",
]
