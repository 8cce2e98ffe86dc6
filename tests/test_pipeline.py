from __future__ import annotations

from dataclasses import fields

from bs4 import BeautifulSoup

from terminal_code.config import CustomStyles, FeatureConfig
from terminal_code.meta import Annotation, DiffSpec, LineSet
from terminal_code.pipeline import RenderState, render


HIGHLIGHTED = (
    '<div class="highlight"><pre class="source"><span></span><code>'
    '<span class="line">one</span>\n'
    '<span class="line">two</span>\n'
    '<span class="line">three</span>\n'
    '<span class="line">four</span>\n'
    "</code></pre></div>"
)

ALL_OFF = {
    "line_numbers": False,
    "copy_button": False,
    "diff_highlight": False,
    "line_highlight": False,
    "language_badge": False,
    "terminal_frame": False,
    "workspace_mode": False,
}


def _features(**enabled: bool) -> FeatureConfig:
    return FeatureConfig(**{**ALL_OFF, **enabled})


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _line_classes(html: str) -> list[list[str]]:
    return [line.get("class", []) for line in _soup(html).find_all("span", class_="line")]


def test_all_features_disabled_returns_markup_untouched() -> None:
    annotation = Annotation(title="x", highlight=LineSet.of(1), diff=DiffSpec(add=LineSet.of(2)))

    assert render(HIGHLIGHTED, "python", annotation, _features()) == HIGHLIGHTED


def test_rerunning_on_output_with_features_disabled_is_a_no_op() -> None:
    annotation = Annotation(
        title="demo",
        highlight=LineSet.of(1, 2),
        diff=DiffSpec(add=LineSet.of(3), remove=LineSet.of(4)),
    )
    rendered = render(HIGHLIGHTED, "python", annotation, FeatureConfig(workspace_mode=True))

    assert render(rendered, "python", annotation, _features()) == rendered


def test_diff_classes_follow_line_position() -> None:
    annotation = Annotation(diff=DiffSpec(add=LineSet.of(2), remove=LineSet.of(4)))

    html = render(HIGHLIGHTED, "text", annotation, _features(diff_highlight=True))

    assert _line_classes(html) == [
        ["line"],
        ["line", "diff-add"],
        ["line"],
        ["line", "diff-remove"],
    ]


def test_diff_pass_skipped_without_diff_directive() -> None:
    html = render(HIGHLIGHTED, "text", Annotation(), _features(diff_highlight=True))

    assert html == HIGHLIGHTED


def test_overlapping_sets_produce_a_union_of_classes() -> None:
    annotation = Annotation(
        highlight=LineSet.of(1, 1),
        diff=DiffSpec(add=LineSet.of(1), remove=LineSet.of(1)),
    )

    html = render(
        HIGHLIGHTED, "text", annotation, _features(diff_highlight=True, line_highlight=True)
    )

    assert _line_classes(html)[0] == ["line", "diff-add", "diff-remove", "highlighted"]
    assert _line_classes(html)[1] == ["line"]


def test_out_of_range_lines_are_inert() -> None:
    annotation = Annotation(highlight=LineSet.of(0, 9), diff=DiffSpec(add=LineSet.of(42)))

    html = render(
        HIGHLIGHTED, "text", annotation, _features(diff_highlight=True, line_highlight=True)
    )

    assert _line_classes(html) == [["line"]] * 4


def test_terminal_frame_structure() -> None:
    html = render(HIGHLIGHTED, "python", Annotation(), _features(terminal_frame=True))
    soup = _soup(html)

    frame = soup.find("div", class_="terminal-code-block")
    assert frame is not None
    assert frame["data-lang"] == "python"
    assert len(frame.find_all("span", class_="terminal-dot")) == 3
    assert frame.find("span", class_="terminal-close") is not None
    assert frame.find("div", class_="terminal-title").get_text() == "python"
    assert frame.find("div", class_="terminal-actions").contents == []
    content = frame.find("div", class_="terminal-content")
    assert content.find("div", class_="highlight") is not None
    assert soup.contents == [frame]


def test_frame_title_fallbacks() -> None:
    features = _features(terminal_frame=True)

    def title(html: str) -> str:
        return _soup(html).find("div", class_="terminal-title").get_text()

    assert title(render(HIGHLIGHTED, "python", Annotation(title="app.py"), features)) == "app.py"
    assert title(render(HIGHLIGHTED, "", Annotation(), features)) == "terminal"
    assert title(render(HIGHLIGHTED, None, Annotation(), features)) == "terminal"


def test_frame_title_is_escaped() -> None:
    html = render(
        HIGHLIGHTED, "html", Annotation(title="<b>bold</b>"), _features(terminal_frame=True)
    )

    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert _soup(html).find("b") is None


def test_frame_is_not_nested_twice() -> None:
    features = _features(terminal_frame=True, copy_button=True)
    once = render(HIGHLIGHTED, "python", Annotation(), features)
    twice = render(once, "python", Annotation(), features)

    soup = _soup(twice)
    assert len(soup.find_all("div", class_="terminal-code-block")) == 1
    assert len(soup.find_all("button", class_="terminal-copy-btn")) == 1


def test_line_numbers_extend_existing_pre_classes() -> None:
    html = render(HIGHLIGHTED, "text", Annotation(), _features(line_numbers=True))

    pre = _soup(html).find("pre")
    assert pre["class"] == ["source", "terminal-pre", "with-line-numbers"]


def test_copy_button_needs_the_frame() -> None:
    html = render(HIGHLIGHTED, "text", Annotation(), _features(copy_button=True))

    assert html == str(_soup(HIGHLIGHTED))
    assert _soup(html).find("button") is None


def test_copy_button_lands_in_actions() -> None:
    html = render(
        HIGHLIGHTED, "text", Annotation(), _features(terminal_frame=True, copy_button=True)
    )

    actions = _soup(html).find("div", class_="terminal-actions")
    button = actions.find("button", class_="terminal-copy-btn")
    assert button is not None
    assert button["type"] == "button"
    assert button["onclick"] == "terminalCopyCode(this)"
    assert button.find("svg") is not None
    assert button.get_text() == "Copy"


def test_workspace_mode_marks_the_frame() -> None:
    html = render(
        HIGHLIGHTED, "text", Annotation(), _features(terminal_frame=True, workspace_mode=True)
    )

    frame = _soup(html).find("div", class_="terminal-code-block")
    assert frame["class"] == ["terminal-code-block", "workspace-compatible"]
    assert frame["data-workspace-widget"] == "code-block"


def test_workspace_mode_without_frame_is_a_no_op() -> None:
    html = render(HIGHLIGHTED, "text", Annotation(), _features(workspace_mode=True))

    assert "workspace" not in html


def test_custom_styles_do_not_change_markup() -> None:
    features = FeatureConfig(workspace_mode=True)
    annotation = Annotation(title="styled")
    styles = CustomStyles(border_radius="9px", font_family="monospace")

    assert render(HIGHLIGHTED, "text", annotation, features, styles) == render(
        HIGHLIGHTED, "text", annotation, features
    )
    assert [field.name for field in fields(RenderState)] == ["lang", "annotation"]
