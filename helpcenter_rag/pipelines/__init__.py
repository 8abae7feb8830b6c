"""Two-stage documentation pipeline.

Stage 1: Scraper - Crawls help-center index pages and writes Markdown articles to disk
Stage 2: Ingestion - Chunks the Markdown corpus and re-indexes it into the vector store

The output directory is the handoff between the stages, so either can run on its own.
"""
