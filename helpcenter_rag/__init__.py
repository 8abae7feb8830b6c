"""Help-center RAG - scrape a help center into Markdown and index it for vector search."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("helpcenter-rag")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"  # Fallback for development without install
