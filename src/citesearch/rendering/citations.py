"""Binds `[n]` citation markers in model output back to sources.

The model is not bound to emit only ids that exist, so every marker is
looked up before it becomes a link. Markers that do not resolve stay in the
text exactly as written.
"""

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Union

from ..log import get_logger
from ..schemas.evidence import Source
from ..schemas.outputs import (
    CitationSegment, HighlightSegment, Paragraph, RenderableAnswer, Segment, TextSegment,
)

logger = get_logger("citations")

_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*")
_MARKER_RE = re.compile(r"\[(\d+)\]")

Inline = Union[TextSegment, CitationSegment]


class _Binder:
    def __init__(self, sources: Sequence[Source]):
        self.by_id: Dict[int, Source] = {s.id: s for s in sources}
        self.cited_ids: List[int] = []
        self.unresolved: List[str] = []

    def _append_text(self, out: List, text: str) -> None:
        if not text:
            return
        if out and isinstance(out[-1], TextSegment):
            out[-1] = TextSegment(text=out[-1].text + text)
        else:
            out.append(TextSegment(text=text))

    def bind_run(self, text: str, out: List) -> None:
        pos = 0
        for m in _MARKER_RE.finditer(text):
            source = self.by_id.get(int(m.group(1)))
            if source is None:
                # left inside the next text slice
                self.unresolved.append(m.group(0))
                continue
            self._append_text(out, text[pos:m.start()])
            out.append(CitationSegment(id=source.id, url=source.url, title=source.title))
            if source.id not in self.cited_ids:
                self.cited_ids.append(source.id)
            pos = m.end()
        self._append_text(out, text[pos:])

    def bind_line(self, line: str) -> Paragraph:
        segments: List[Segment] = []
        pos = 0
        for m in _EMPHASIS_RE.finditer(line):
            self.bind_run(line[pos:m.start()], segments)
            children: List[Inline] = []
            self.bind_run(m.group(1), children)
            segments.append(HighlightSegment(children=children))
            pos = m.end()
        self.bind_run(line[pos:], segments)
        return Paragraph(segments=segments)


def bind_citations(answer_text: str, sources: Sequence[Source]) -> RenderableAnswer:
    """
    One paragraph per non-blank line. Within a line, `**span**` becomes a
    highlight whose contents are bound like any other text; an unmatched
    `**` is left as literal text.
    """
    binder = _Binder(sources)
    paragraphs = [binder.bind_line(line) for line in (answer_text or "").splitlines() if line.strip()]

    if binder.unresolved:
        logger.warning(f"Answer cites unknown sources: {', '.join(binder.unresolved)}")

    return RenderableAnswer(
        paragraphs=paragraphs,
        cited_ids=binder.cited_ids,
        unresolved=binder.unresolved,
    )


def _inline_to_markdown(segment: Inline) -> str:
    if isinstance(segment, CitationSegment):
        return f"[[{segment.id}]]({segment.url})"
    return segment.text


def to_markdown(rendered: RenderableAnswer) -> str:
    """Renders bound segments back to Markdown with citation links."""
    blocks = []
    for paragraph in rendered.paragraphs:
        parts = []
        for segment in paragraph.segments:
            if isinstance(segment, HighlightSegment):
                parts.append("**" + "".join(_inline_to_markdown(c) for c in segment.children) + "**")
            else:
                parts.append(_inline_to_markdown(segment))
        blocks.append("".join(parts))
    return "\n\n".join(blocks)
