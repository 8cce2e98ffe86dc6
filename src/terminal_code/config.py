"""Configuration models used by the terminal code processor.

ThemeConfig

`light` (`str`)
: Pygments style used for the light colour scheme.

`dark` (`str`)
: Pygments style used when the reader prefers a dark colour scheme.

FeatureConfig

`line_numbers` (`bool`)
: Mark ``<pre>`` elements so the stylesheet draws a line-number gutter.

`copy_button` (`bool`)
: Insert a copy control in the frame header. Requires `terminal_frame`.

`diff_highlight` (`bool`)
: Flag lines listed in a ``diff="+n -n"`` directive as added or removed.

`line_highlight` (`bool`)
: Emphasise lines listed in a ``{n,n-m}`` directive.

`language_badge` (`bool`)
: Surface the language on the frame. Carried by the frame's ``data-lang``
  attribute, so it has no effect without `terminal_frame`.

`terminal_frame` (`bool`)
: Wrap each block in a terminal window with a title bar.

`workspace_mode` (`bool`)
: Tag the frame as embeddable in a desktop workspace shell.

CustomStyles

`border_radius`, `font_family`, `font_size` (`str | None`)
: Free-form CSS values exported as custom properties by the stylesheet. The
  rendering pipeline never reads them.

TerminalCodeConfig

`themes` (`ThemeConfig`), `features` (`FeatureConfig`),
`custom_styles` (`CustomStyles`)
: Nested sections described above. Keys may be given in snake_case or in
  camelCase (``lineNumbers``, ``customStyles``...).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from terminal_code.exceptions import ConfigurationError


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class ThemeConfig(BaseModel):
    """Pair of Pygments styles handed to the highlighter."""

    model_config = _MODEL_CONFIG

    light: str = "default"
    dark: str = "monokai"

    def as_mapping(self) -> dict[str, str]:
        return {"light": self.light, "dark": self.dark}


class FeatureConfig(BaseModel):
    """Independent toggles, each gating one rendering pass."""

    model_config = _MODEL_CONFIG

    line_numbers: bool = True
    copy_button: bool = True
    diff_highlight: bool = True
    line_highlight: bool = True
    language_badge: bool = True
    terminal_frame: bool = True
    workspace_mode: bool = False


class CustomStyles(BaseModel):
    """Opaque style overrides passed through to the stylesheet."""

    model_config = _MODEL_CONFIG

    border_radius: str | None = None
    font_family: str | None = None
    font_size: str | None = None


class TerminalCodeConfig(BaseModel):
    """Fully resolved processor configuration."""

    model_config = _MODEL_CONFIG

    themes: ThemeConfig = Field(default_factory=ThemeConfig)
    features: FeatureConfig = Field(default_factory=FeatureConfig)
    custom_styles: CustomStyles = Field(default_factory=CustomStyles)


def resolve_config(
    overrides: TerminalCodeConfig | Mapping[str, Any] | None = None,
) -> TerminalCodeConfig:
    """Merge caller overrides with the defaults and return a frozen config.

    Nested sections are merged key by key, so ``{"features": {"copyButton":
    False}}`` keeps every other feature at its default value.
    """
    if isinstance(overrides, TerminalCodeConfig):
        return overrides
    try:
        return TerminalCodeConfig.model_validate(dict(overrides or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid terminal code configuration: {exc}") from exc


__all__ = [
    "CustomStyles",
    "FeatureConfig",
    "TerminalCodeConfig",
    "ThemeConfig",
    "resolve_config",
]
