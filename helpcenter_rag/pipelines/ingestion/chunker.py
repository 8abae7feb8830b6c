"""Heading-aware Markdown chunking.

A chunk is the body text between two headings of level 1-3. Each chunk
carries the heading that currently applies at each level (``heading1`` ..
``heading3``), so a retrieval hit can be traced to its section.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

HEADING_PATTERN = re.compile(r"^(#{1,3})\s+(.+?)(?:\s+#+)?\s*$")
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
HEADING_LEVELS = 3


@dataclass
class Chunk:
    """A heading-bounded slice of one article."""

    text: str
    source: str
    title: str
    filename: str
    headings: Dict[str, str] = field(default_factory=dict)

    def to_metadata(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "source": self.source,
            "title": self.title,
            "filename": self.filename,
            **self.headings,
        }


def _paragraphs(text: str) -> List[str]:
    """Blank-line separated blocks, with each fenced code block kept as one block."""
    blocks: List[str] = []
    pending: List[str] = []
    in_fence = False
    for part in re.split(r"\n\s*\n", text):
        pending.append(part)
        fences = sum(1 for line in part.splitlines() if FENCE_PATTERN.match(line))
        if fences % 2 == 1:
            in_fence = not in_fence
        if not in_fence:
            blocks.append("\n\n".join(pending))
            pending = []

    # Unclosed fence runs to the end of the section
    if pending:
        blocks.append("\n\n".join(pending))
    return blocks


def _split_paragraphs(text: str, max_chars: int) -> List[str]:
    """Greedily pack paragraphs into pieces of at most ``max_chars``.

    A single paragraph longer than the limit is kept whole, and so is a fenced
    code block even when it contains blank lines.
    """
    if len(text) <= max_chars:
        return [text]

    pieces = []
    current = ""
    for paragraph in _paragraphs(text):
        if not paragraph.strip():
            continue
        combined = f"{current}\n\n{paragraph}" if current else paragraph
        if len(combined) <= max_chars or not current:
            current = combined
        else:
            pieces.append(current)
            current = paragraph
    if current:
        pieces.append(current)
    return pieces


class MarkdownChunker:
    """Splits Markdown bodies at ``#``, ``##`` and ``###`` headings."""

    def __init__(self, max_chunk_chars: int = 4000):
        self.max_chunk_chars = max_chunk_chars

    def split_sections(self, markdown: str) -> List[Dict[str, Any]]:
        """Return ``{"text", "headings"}`` per section in document order.

        Heading lines are not part of the section text. Lines inside fenced
        code blocks are never treated as headings.
        """
        sections: List[Dict[str, Any]] = []
        active: Dict[int, str] = {}
        lines: List[str] = []
        in_fence = False

        def flush():
            # Nothing before the first heading is not a section
            if not active and not "".join(lines).strip():
                lines.clear()
                return
            sections.append(
                {
                    "text": "\n".join(lines).strip(),
                    "headings": {f"heading{level}": active[level] for level in sorted(active)},
                }
            )
            lines.clear()

        for line in markdown.splitlines():
            if FENCE_PATTERN.match(line):
                in_fence = not in_fence
                lines.append(line)
                continue

            match = None if in_fence else HEADING_PATTERN.match(line)
            if match is None:
                lines.append(line)
                continue

            flush()
            level = len(match.group(1))
            active[level] = match.group(2).strip()
            for deeper in range(level + 1, HEADING_LEVELS + 1):
                active.pop(deeper, None)

        flush()
        return sections

    def chunk(
        self,
        markdown: str,
        title: str,
        source: str,
        filename: str,
        drop_empty: bool = True,
    ) -> List[Chunk]:
        """Chunk one article body.

        Empty and whitespace-only chunks are dropped unless ``drop_empty`` is False,
        which callers use to count every section they were handed.
        """
        chunks = []
        for section in self.split_sections(markdown):
            pieces = _split_paragraphs(section["text"], self.max_chunk_chars) or [""]
            for piece in pieces:
                if drop_empty and not piece.strip():
                    continue
                chunks.append(
                    Chunk(
                        text=piece,
                        source=source,
                        title=title,
                        filename=filename,
                        headings=dict(section["headings"]),
                    )
                )
        return chunks
