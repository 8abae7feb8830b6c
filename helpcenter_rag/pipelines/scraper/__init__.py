"""Stage 1: Help-center scraper.

- Link extraction from paginated index (folder) pages
- Article HTML to Markdown conversion with frontmatter
- Bounded-concurrency orchestration across index pages

Outputs one Markdown file per article for independent ingestion.
"""
