"""Rendering passes layering terminal affordances onto highlighted HTML.

The highlighted markup is parsed once into a BeautifulSoup tree. Each pass
mutates that tree in place and the result is serialised a single time after
the last pass. Passes run in a fixed order because later passes target nodes
created by earlier ones:

``terminal_frame``
: wrap the markup in a window frame with a title bar and an actions slot.

``line_numbers``
: mark ``<pre>`` elements for the line-number gutter.

``diff_highlight`` / ``line_highlight``
: flag line elements by their 1-based position in the document.

``copy_button``
: fill the actions slot created by the frame.

``workspace_mode``
: tag the frame for desktop workspace embedding.

A pass that cannot find its target leaves the tree untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Container, Iterable
from dataclasses import dataclass
import logging
from typing import Any

from bs4 import BeautifulSoup, Tag

from terminal_code.config import CustomStyles, FeatureConfig
from terminal_code.highlighter import LINE_CLASS
from terminal_code.meta import Annotation


logger = logging.getLogger(__name__)

FRAME_CLASS = "terminal-code-block"
ACTIONS_CLASS = "terminal-actions"
COPY_BUTTON_CLASS = "terminal-copy-btn"
LINE_NUMBERS_CLASSES = ("terminal-pre", "with-line-numbers")
DIFF_ADD_CLASS = "diff-add"
DIFF_REMOVE_CLASS = "diff-remove"
HIGHLIGHTED_CLASS = "highlighted"
WORKSPACE_CLASS = "workspace-compatible"
DEFAULT_TITLE = "terminal"

COPY_BUTTON_HTML = (
    f'<button type="button" class="{COPY_BUTTON_CLASS}" '
    'onclick="terminalCopyCode(this)" aria-label="Copy code">'
    '<svg width="16" height="16" viewBox="0 0 24 24" fill="currentColor" aria-hidden="true">'
    '<path d="M16 1H4c-1.1 0-2 .9-2 2v14h2V3h12V1zm3 4H8c-1.1 0-2 .9-2 2v14c0 1.1.9 2 2 '
    "2h11c1.1 0 2-.9 2-2V7c0-1.1-.9-2-2-2zm0 16H8V7h11v14z\"></path>"
    "</svg><span>Copy</span></button>"
)


@dataclass(frozen=True, slots=True)
class RenderState:
    """Per-call inputs shared by every pass."""

    lang: str
    annotation: Annotation


@dataclass(frozen=True, slots=True)
class RenderPass:
    """A transformation gated by one feature toggle."""

    name: str
    feature: str
    handler: Callable[[BeautifulSoup, RenderState], None]
    applies: Callable[[RenderState], bool] | None = None

    def enabled(self, features: FeatureConfig, state: RenderState) -> bool:
        if not getattr(features, self.feature):
            return False
        return self.applies is None or self.applies(state)


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [item for item in value if isinstance(item, str)]
    return []


def add_classes(tag: Tag, *classes: str) -> None:
    """Append classes to ``tag`` without repeating existing ones."""
    existing = gather_classes(tag.get("class"))
    tag["class"] = list(dict.fromkeys([*existing, *classes]))


def line_elements(soup: BeautifulSoup) -> list[Tag]:
    """Return the per-line elements in document order."""
    return soup.find_all("span", class_=LINE_CLASS)


def _mark_lines(soup: BeautifulSoup, marks: Iterable[tuple[Container[int], str]]) -> None:
    targets = list(marks)
    for index, line in enumerate(line_elements(soup), start=1):
        classes = [css_class for numbers, css_class in targets if index in numbers]
        if classes:
            add_classes(line, *classes)


def wrap_terminal_frame(soup: BeautifulSoup, state: RenderState) -> None:
    """Move the whole document inside a terminal window frame."""
    if soup.find("div", class_=FRAME_CLASS) is not None:
        return

    title = state.annotation.title or state.lang or DEFAULT_TITLE
    frame = soup.new_tag("div", attrs={"class": [FRAME_CLASS], "data-lang": state.lang})

    header = soup.new_tag("div", attrs={"class": ["terminal-header"]})
    controls = soup.new_tag("div", attrs={"class": ["terminal-controls"]})
    for control in ("close", "minimize", "maximize"):
        controls.append(
            soup.new_tag("span", attrs={"class": ["terminal-dot", f"terminal-{control}"]})
        )
    title_node = soup.new_tag("div", attrs={"class": ["terminal-title"]})
    title_node.string = title
    header.append(controls)
    header.append(title_node)
    header.append(soup.new_tag("div", attrs={"class": [ACTIONS_CLASS]}))

    content = soup.new_tag("div", attrs={"class": ["terminal-content"]})
    for node in list(soup.contents):
        content.append(node.extract())

    frame.append(header)
    frame.append(content)
    soup.append(frame)


def mark_line_numbers(soup: BeautifulSoup, state: RenderState) -> None:
    """Flag every ``<pre>`` so the stylesheet renders a numbered gutter."""
    del state
    for pre in soup.find_all("pre"):
        add_classes(pre, *LINE_NUMBERS_CLASSES)


def mark_diff_lines(soup: BeautifulSoup, state: RenderState) -> None:
    diff = state.annotation.diff
    if diff is None:
        return
    _mark_lines(soup, [(diff.add, DIFF_ADD_CLASS), (diff.remove, DIFF_REMOVE_CLASS)])


def mark_highlighted_lines(soup: BeautifulSoup, state: RenderState) -> None:
    _mark_lines(soup, [(state.annotation.highlight, HIGHLIGHTED_CLASS)])


def insert_copy_button(soup: BeautifulSoup, state: RenderState) -> None:
    """Place a copy control in the frame's actions slot, when there is one."""
    del state
    actions = soup.find("div", class_=ACTIONS_CLASS)
    if actions is None or actions.find("button", class_=COPY_BUTTON_CLASS) is not None:
        return
    button = BeautifulSoup(COPY_BUTTON_HTML, "html.parser").find("button")
    actions.append(button)


def mark_workspace_frame(soup: BeautifulSoup, state: RenderState) -> None:
    del state
    frame = soup.find("div", class_=FRAME_CLASS)
    if frame is None:
        return
    add_classes(frame, WORKSPACE_CLASS)
    frame["data-workspace-widget"] = "code-block"


PASSES: tuple[RenderPass, ...] = (
    RenderPass("terminal_frame", "terminal_frame", wrap_terminal_frame),
    RenderPass("line_numbers", "line_numbers", mark_line_numbers),
    RenderPass(
        "diff_highlight",
        "diff_highlight",
        mark_diff_lines,
        applies=lambda state: state.annotation.diff is not None,
    ),
    RenderPass(
        "line_highlight",
        "line_highlight",
        mark_highlighted_lines,
        applies=lambda state: bool(state.annotation.highlight),
    ),
    RenderPass("copy_button", "copy_button", insert_copy_button),
    RenderPass("workspace_mode", "workspace_mode", mark_workspace_frame),
)


def render(
    markup: str,
    lang: str | None,
    annotation: Annotation,
    features: FeatureConfig,
    custom_styles: CustomStyles | None = None,
) -> str:
    """Apply every enabled pass to ``markup`` and return the resulting HTML.

    When no pass is enabled for this call the markup is returned verbatim.
    ``custom_styles`` is accepted so callers can hand over the whole
    configuration; no pass reads it.
    """
    del custom_styles
    state = RenderState(lang=lang or "", annotation=annotation)
    active = [render_pass for render_pass in PASSES if render_pass.enabled(features, state)]
    if not active:
        return markup

    soup = BeautifulSoup(markup, "html.parser")
    for render_pass in active:
        logger.debug("Applying %s pass", render_pass.name)
        render_pass.handler(soup, state)
    return str(soup)


__all__ = [
    "PASSES",
    "RenderPass",
    "RenderState",
    "add_classes",
    "gather_classes",
    "line_elements",
    "render",
]
