"""MkDocs plugin replacing the built-in highlighters with terminal code blocks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mkdocs import plugins
from mkdocs.config import config_options
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin
from mkdocs.utils import log

from terminal_code.config import TerminalCodeConfig, resolve_config
from terminal_code.exceptions import ConfigurationError, exception_messages
from terminal_code.styles import build_stylesheet


EXTENSION_NAME = "terminal_code.markdown:TerminalCodeExtension"
HOST_HIGHLIGHTERS = ("codehilite", "pymdownx.highlight")


class TerminalCodePlugin(BasePlugin):
    """Render fenced code blocks as terminal windows."""

    config_scheme = (
        ("themes", config_options.Type(dict, default={})),
        ("features", config_options.Type(dict, default={})),
        ("custom_styles", config_options.Type(dict, default={})),
        ("stylesheet", config_options.Type(str, default="assets/terminal-code.css")),
    )

    def __init__(self) -> None:
        self._resolved: TerminalCodeConfig | None = None

    @property
    def resolved(self) -> TerminalCodeConfig:
        if self._resolved is None:
            raise PluginError("terminal-code: configuration has not been loaded yet")
        return self._resolved

    def _resolve(self) -> TerminalCodeConfig:
        try:
            return resolve_config(
                {
                    "themes": self.config.get("themes") or {},
                    "features": self.config.get("features") or {},
                    "custom_styles": self.config.get("custom_styles") or {},
                }
            )
        except ConfigurationError as exc:
            hint = exception_messages(exc)
            raise PluginError(f"terminal-code: {hint[0] if hint else exc}") from exc

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        """Disable the host highlighters and register the Markdown extension."""
        self._resolved = self._resolve()

        extensions = [
            extension
            for extension in (config.markdown_extensions or [])
            if extension not in HOST_HIGHLIGHTERS
        ]
        mdx_configs: dict[str, Any] = dict(config.mdx_configs or {})
        for name in HOST_HIGHLIGHTERS:
            mdx_configs.pop(name, None)

        if EXTENSION_NAME not in extensions:
            extensions.append(EXTENSION_NAME)
        mdx_configs[EXTENSION_NAME] = self._resolved.model_dump()
        config.markdown_extensions = extensions
        config.mdx_configs = mdx_configs

        stylesheet = self.config.get("stylesheet")
        if stylesheet and stylesheet not in config.extra_css:
            config.extra_css.append(stylesheet)
        return config

    @plugins.event_priority(-100)
    def on_pre_build(self, config: MkDocsConfig) -> None:
        """Announce availability once the configuration is final."""
        del config
        log.info("terminal-code: workspace-ready syntax highlighting enabled")
        if self.resolved.features.workspace_mode:
            log.info("terminal-code: workspace mode, desktop environment compatibility active")

    def on_post_build(self, config: MkDocsConfig) -> None:
        """Write the theme stylesheet into the built site."""
        stylesheet = self.config.get("stylesheet")
        if not stylesheet:
            return
        target = Path(config.site_dir) / stylesheet
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(build_stylesheet(self.resolved), encoding="utf-8")
        log.debug("terminal-code: wrote stylesheet to %s", target)


__all__ = ["EXTENSION_NAME", "HOST_HIGHLIGHTERS", "TerminalCodePlugin"]
