"""Parse the metadata string attached to a code fence.

Three directives are recognised, in any order::

    ```python title="app.py" {1,3-5} diff="+7,8 -6"

Parsing is best effort: anything that does not match is ignored and the
corresponding field keeps its empty value.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import re


TITLE_PATTERN = re.compile(r'title="([^"]+)"')
HIGHLIGHT_PATTERN = re.compile(r"\{([0-9,-]+)\}")
DIFF_PATTERN = re.compile(r'diff="([^"]+)"')
DIFF_ADD_PATTERN = re.compile(r"\+([0-9,]+)")
DIFF_REMOVE_PATTERN = re.compile(r"-([0-9,]+)")


@dataclass(frozen=True, slots=True)
class LineSet:
    """Line numbers stored as ranges, so ``{1-9999999999}`` stays cheap.

    Iteration yields numbers in encounter order, duplicates included.
    """

    ranges: tuple[range, ...] = ()

    @classmethod
    def of(cls, *numbers: int) -> LineSet:
        return cls(tuple(range(number, number + 1) for number in numbers))

    def __contains__(self, number: object) -> bool:
        return any(number in span for span in self.ranges)

    def __iter__(self) -> Iterator[int]:
        for span in self.ranges:
            yield from span

    def __len__(self) -> int:
        return sum(len(span) for span in self.ranges)

    def __bool__(self) -> bool:
        return any(self.ranges)


@dataclass(frozen=True, slots=True)
class DiffSpec:
    """Line numbers flagged as added or removed."""

    add: LineSet = field(default_factory=LineSet)
    remove: LineSet = field(default_factory=LineSet)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Structured view of a fence metadata string."""

    title: str | None = None
    highlight: LineSet = field(default_factory=LineSet)
    diff: DiffSpec | None = None


def parse_line_numbers(text: str) -> LineSet:
    """Read ``"1,3-5"`` as the lines 1, 3, 4 and 5.

    Tokens that are not an integer or an ``a-b`` range contribute nothing,
    and neither does a reversed range.
    """
    spans: list[range] = []
    for part in text.split(","):
        token = part.strip()
        if not token:
            continue
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            try:
                start, end = int(start_text), int(end_text)
            except ValueError:
                continue
            if start <= end:
                spans.append(range(start, end + 1))
            continue
        try:
            number = int(token)
        except ValueError:
            continue
        spans.append(range(number, number + 1))
    return LineSet(tuple(spans))


def parse_meta(meta: str | None) -> Annotation:
    """Return the :class:`Annotation` described by ``meta``."""
    if not meta:
        return Annotation()

    title = None
    if title_match := TITLE_PATTERN.search(meta):
        title = title_match.group(1)

    highlight = LineSet()
    if highlight_match := HIGHLIGHT_PATTERN.search(meta):
        highlight = parse_line_numbers(highlight_match.group(1))

    diff = None
    if diff_match := DIFF_PATTERN.search(meta):
        payload = diff_match.group(1)
        add_match = DIFF_ADD_PATTERN.search(payload)
        remove_match = DIFF_REMOVE_PATTERN.search(payload)
        diff = DiffSpec(
            add=parse_line_numbers(add_match.group(1)) if add_match else LineSet(),
            remove=parse_line_numbers(remove_match.group(1)) if remove_match else LineSet(),
        )

    return Annotation(title=title, highlight=highlight, diff=diff)


__all__ = ["Annotation", "DiffSpec", "LineSet", "parse_line_numbers", "parse_meta"]
