"""Unit tests for heading-aware Markdown chunking."""

import pytest

from helpcenter_rag.pipelines.ingestion.chunker import Chunk, MarkdownChunker

ARTICLE = """Úvodní text před nadpisem.

# Přihlášení

Obecné informace.

## Heslo

Jak změnit heslo.

### Zapomenuté heslo

Odkaz pro obnovu.

## Dvoufázové ověření

Nastavení SMS.

# Platby

Platba kartou.
"""


class TestMarkdownChunker:
    """Test chunk boundaries and heading metadata."""

    @pytest.fixture
    def chunker(self):
        return MarkdownChunker()

    def test_sections_follow_headings(self, chunker):
        chunks = chunker.chunk(ARTICLE, title="Přihlášení", source="https://x/1", filename="a.md")

        assert [chunk.text for chunk in chunks] == [
            "Úvodní text před nadpisem.",
            "Obecné informace.",
            "Jak změnit heslo.",
            "Odkaz pro obnovu.",
            "Nastavení SMS.",
            "Platba kartou.",
        ]

    def test_heading_metadata(self, chunker):
        chunks = chunker.chunk(ARTICLE, title="Přihlášení", source="https://x/1", filename="a.md")

        assert chunks[0].headings == {}
        assert chunks[1].headings == {"heading1": "Přihlášení"}
        assert chunks[3].headings == {
            "heading1": "Přihlášení",
            "heading2": "Heslo",
            "heading3": "Zapomenuté heslo",
        }
        # A new level-2 heading clears the level-3 one
        assert chunks[4].headings == {"heading1": "Přihlášení", "heading2": "Dvoufázové ověření"}
        assert chunks[5].headings == {"heading1": "Platby"}

    def test_chunk_metadata(self, chunker):
        chunk = chunker.chunk("# A\n\nText", title="T", source="https://x/1", filename="t.md")[0]

        assert chunk.to_metadata() == {
            "text": "Text",
            "source": "https://x/1",
            "title": "T",
            "filename": "t.md",
            "heading1": "A",
        }

    def test_deeper_headings_stay_in_body(self, chunker):
        chunks = chunker.chunk("## A\n\n#### Detail\n\nText", title="T", source="s", filename="f")

        assert len(chunks) == 1
        assert chunks[0].text == "#### Detail\n\nText"

    def test_headings_inside_code_fences_are_ignored(self, chunker):
        markdown = "# Config\n\n```\n# not a heading\nkey=value\n```\n\nAfter"

        chunks = chunker.chunk(markdown, title="T", source="s", filename="f")

        assert len(chunks) == 1
        assert "# not a heading" in chunks[0].text

    def test_title_with_trailing_hash(self, chunker):
        chunks = chunker.chunk("## C#\n\nText", title="T", source="s", filename="f")
        assert chunks[0].headings == {"heading2": "C#"}

    def test_empty_sections(self, chunker):
        markdown = "# A\n\n## B\n\n   \n\n## C\n\nText"

        kept = chunker.chunk(markdown, title="T", source="s", filename="f")
        everything = chunker.chunk(markdown, title="T", source="s", filename="f", drop_empty=False)

        assert [chunk.text for chunk in kept] == ["Text"]
        assert len(everything) == 3
        assert [chunk.text for chunk in everything[:2]] == ["", ""]

    def test_empty_body(self, chunker):
        assert chunker.chunk("", title="T", source="s", filename="f") == []

    def test_oversize_section_splits_at_paragraphs(self):
        chunker = MarkdownChunker(max_chunk_chars=50)
        paragraphs = [f"Paragraph {i} " + "x" * 20 for i in range(4)]
        markdown = "# Long\n\n" + "\n\n".join(paragraphs)

        chunks = chunker.chunk(markdown, title="T", source="s", filename="f")

        assert len(chunks) == 4
        assert [chunk.text for chunk in chunks] == paragraphs
        assert all(chunk.headings == {"heading1": "Long"} for chunk in chunks)

    def test_oversize_fenced_block_stays_whole(self):
        chunker = MarkdownChunker(max_chunk_chars=300)
        code = "\n\n".join(f"echo line {i} " + "y" * 40 for i in range(10))
        markdown = f"## Kod\n\nÚvod.\n\n```\n{code}\n```\n\nZávěr."

        chunks = chunker.chunk(markdown, title="T", source="s", filename="f")

        fenced = [chunk for chunk in chunks if "```" in chunk.text]
        assert len(fenced) == 1
        assert fenced[0].text == f"```\n{code}\n```"
        assert [chunk.text for chunk in chunks] == ["Úvod.", fenced[0].text, "Závěr."]
        assert all(chunk.headings == {"heading2": "Kod"} for chunk in chunks)

    def test_chunk_type(self, chunker):
        assert isinstance(chunker.chunk("Text", title="T", source="s", filename="f")[0], Chunk)
