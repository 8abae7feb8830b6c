"""Stage 2: Chunking and embedding of the Markdown corpus into the vector index."""
